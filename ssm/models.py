"""Domain records for the scoring and matchmaking core.

All records are frozen dataclasses. Anything that changes (a loadout edit, a
vault's cooldown after an attack) produces a new instance, so a snapshot handed
to a caller can never drift from the values it was derived from.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Tuple

from .catalog import ChallengeType
from .errors import InvalidInputError


class DifficultyBias(str, Enum):
    EASY = "easy"
    MIXED = "mixed"
    HARD = "hard"


class DifficultyBand(str, Enum):
    SOFT = "soft"
    TRICKY = "tricky"
    BRUTAL = "brutal"


class LootRange(str, Enum):
    SMALL = "small"
    MODERATE = "moderate"
    RICH = "rich"


class SuccessChance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ChallengeModule:
    """One challenge guarding a vault.

    ``weight`` is fixed per challenge type; it is copied from the weight
    table when the module is created (see :meth:`SecurityScorer.make_module`).
    """
    id: str
    type: ChallengeType
    difficulty: float
    weight: float
    name: str
    description: str

    def __post_init__(self) -> None:
        if not 0.0 <= self.difficulty <= 1.0:
            raise InvalidInputError(
                f"Module {self.id!r} difficulty must be within [0, 1] (got {self.difficulty})"
            )
        if self.weight <= 0:
            raise InvalidInputError(f"Module {self.id!r} weight must be positive (got {self.weight})")


@dataclass(frozen=True)
class Loadout:
    """Ordered challenge modules plus their cached security score.

    Build through :meth:`SecurityScorer.build_loadout`; it is the only place
    that sets ``effective_score``. Direct construction only checks the shape;
    a hand-set score is replaced when the vault is priced.
    """
    modules: Tuple[ChallengeModule, ...]
    effective_score: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "modules", tuple(self.modules))
        if not self.modules:
            raise InvalidInputError("Loadout must hold at least one module")
        if math.isnan(self.effective_score) or self.effective_score < 0:
            raise InvalidInputError(f"Loadout score must be a non-negative number (got {self.effective_score})")

    def __len__(self) -> int:
        return len(self.modules)

    @property
    def difficulties(self) -> Tuple[float, ...]:
        return tuple(m.difficulty for m in self.modules)


@dataclass(frozen=True)
class OpponentVault:
    id: str
    owner_name: str
    balance: float
    security_score: float
    loadout: Loadout
    difficulty_band: DifficultyBand
    loot_range: LootRange
    attack_fee: int
    potential_loot: float
    success_chance: SuccessChance
    last_attacked_at: datetime | None = None
    attack_cooldown_until: datetime | None = None

    def to_dict(self) -> dict:
        """Flatten to plain values (for CLI/JSON output)."""
        return {
            "id": self.id,
            "owner_name": self.owner_name,
            "balance": self.balance,
            "security_score": round(self.security_score, 2),
            "difficulty_band": self.difficulty_band.value,
            "loot_range": self.loot_range.value,
            "attack_fee": self.attack_fee,
            "potential_loot": self.potential_loot,
            "success_chance": self.success_chance.value,
            "modules": [
                {"type": m.type.value, "name": m.name, "difficulty": round(m.difficulty, 3)}
                for m in self.loadout.modules
            ],
            "last_attacked_at": self.last_attacked_at.isoformat() if self.last_attacked_at else None,
            "attack_cooldown_until": (
                self.attack_cooldown_until.isoformat() if self.attack_cooldown_until else None
            ),
        }


@dataclass(frozen=True)
class AttackerContext:
    """Per-request view of the attacking player.

    ``recently_attacked`` holds vault ids, most recent first, bounded by
    ``window``.
    """
    rating: float = 1000.0
    recently_attacked: Tuple[str, ...] = field(default_factory=tuple)
    window: int = 20

    def __post_init__(self) -> None:
        if self.rating < 0:
            raise InvalidInputError(f"Attacker rating must not be negative (got {self.rating})")
        if self.window < 0:
            raise InvalidInputError(f"Recent-target window must not be negative (got {self.window})")
        # frozen: normalise lists to a bounded tuple in place
        object.__setattr__(self, "recently_attacked", tuple(self.recently_attacked)[:self.window])

    def remember(self, vault_id: str) -> AttackerContext:
        """Return a new context with ``vault_id`` at the front of the recent list."""
        recent = (vault_id,) + tuple(v for v in self.recently_attacked if v != vault_id)
        return replace(self, recently_attacked=recent[:self.window])

    def has_recently_attacked(self, vault_id: str) -> bool:
        return vault_id in self.recently_attacked


__all__ = [
    "DifficultyBias",
    "DifficultyBand",
    "LootRange",
    "SuccessChance",
    "ChallengeModule",
    "Loadout",
    "OpponentVault",
    "AttackerContext",
]
