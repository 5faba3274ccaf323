"""Matchmaking ranker: order candidate vaults by Target Attractiveness Score.

    TAS = a1*value + a2*ease + a3*freshness + a4*fairness - a5*(1 - variety)

- value:     log(1 + balance) / log(1 + reference_balance)
- ease:      attacker's success probability (from the economy calculator)
- freshness: fresh_signal unless the vault was attacked inside the window
- fairness:  fair_signal when the rating gap is inside the fairness band
- variety:   repeat_target_signal for vaults the attacker hit recently, else 1

Ranking is total and side-effect free: inputs are never mutated and ties are
broken by vault id so repeated calls give identical orderings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Sequence

from ..config_types import MatchmakingConfig
from ..errors import InvalidInputError
from ..models import AttackerContext, OpponentVault
from ..scoring.economy import EconomyCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetScore:
    """TAS breakdown for diagnostics."""
    vault_id: str
    value: float
    ease: float
    freshness: float
    fairness: float
    variety: float
    total: float


def _require_same_awareness(stamp: datetime, now: datetime, field_name: str, vault_id: str) -> None:
    # naive and aware datetimes cannot be compared
    if (stamp.tzinfo is None) != (now.tzinfo is None):
        raise InvalidInputError(
            f"vault={vault_id} {field_name} and now must both be timezone-aware or both naive"
        )


def is_attackable(vault: OpponentVault, now: datetime) -> bool:
    """True when the vault has no cooldown or the cooldown already passed."""
    if vault.attack_cooldown_until is None:
        return True
    _require_same_awareness(vault.attack_cooldown_until, now, "attack_cooldown_until", vault.id)
    return vault.attack_cooldown_until < now


def record_attack(vault: OpponentVault, now: datetime, cooldown_seconds: float = 3600) -> OpponentVault:
    """Return a copy of ``vault`` stamped as attacked at ``now``."""
    return replace(
        vault,
        last_attacked_at=now,
        attack_cooldown_until=now + timedelta(seconds=cooldown_seconds),
    )


class MatchmakingRanker:
    """Orders a vault pool for feed presentation.

    Example usage:
        ranker = MatchmakingRanker(calculator, MatchmakingConfig())
        ordered = ranker.rank(vaults, AttackerContext(rating=1100), now)
    """

    def __init__(self, calculator: EconomyCalculator | None = None, config: MatchmakingConfig | None = None):
        self.calculator = calculator or EconomyCalculator()
        self.config = config or MatchmakingConfig()

    def value_signal(self, balance: float) -> float:
        return math.log1p(balance) / math.log1p(self.config.reference_balance)

    def freshness_signal(self, vault: OpponentVault, now: datetime) -> float:
        cfg = self.config
        if vault.last_attacked_at is None:
            return cfg.fresh_signal
        _require_same_awareness(vault.last_attacked_at, now, "last_attacked_at", vault.id)
        if now - vault.last_attacked_at < timedelta(seconds=cfg.freshness_window_seconds):
            return cfg.stale_signal
        return cfg.fresh_signal

    def fairness_signal(self, rating: float) -> float:
        cfg = self.config
        if abs(rating - cfg.assumed_defender_rating) < cfg.fairness_band:
            return cfg.fair_signal
        return cfg.unfair_signal

    def variety_signal(self, vault: OpponentVault, context: AttackerContext) -> float:
        if context.has_recently_attacked(vault.id):
            return self.config.repeat_target_signal
        return 1.0

    def attractiveness(self, vault: OpponentVault, context: AttackerContext, now: datetime) -> TargetScore:
        """Compute the TAS breakdown of one vault for one attacker."""
        cfg = self.config
        value = self.value_signal(vault.balance)
        ease = self.calculator.success_probability(context.rating, vault.security_score)
        freshness = self.freshness_signal(vault, now)
        fairness = self.fairness_signal(context.rating)
        variety = self.variety_signal(vault, context)
        total = (
            cfg.value_weight * value
            + cfg.ease_weight * ease
            + cfg.freshness_weight * freshness
            + cfg.fairness_weight * fairness
            - cfg.variety_weight * (1.0 - variety)
        )
        return TargetScore(
            vault_id=vault.id,
            value=value,
            ease=ease,
            freshness=freshness,
            fairness=fairness,
            variety=variety,
            total=total,
        )

    def record_attack(self, vault: OpponentVault, now: datetime) -> OpponentVault:
        """Stamp ``vault`` as attacked using the configured cooldown."""
        return record_attack(vault, now, self.config.attack_cooldown_seconds)

    def rank(self, vaults: Sequence[OpponentVault], context: AttackerContext, now: datetime) -> List[OpponentVault]:
        """Return a new list ordered by TAS (descending), ties by id (ascending)."""
        if not vaults:
            return []
        debug_logging = logger.isEnabledFor(logging.DEBUG)
        scored = []
        for vault in vaults:
            breakdown = self.attractiveness(vault, context, now)
            if debug_logging:
                logger.debug(
                    f"vault={vault.id} tas={breakdown.total:.4f} value={breakdown.value:.3f} "
                    f"ease={breakdown.ease:.3f} fresh={breakdown.freshness} "
                    f"fair={breakdown.fairness} variety={breakdown.variety}"
                )
            scored.append((breakdown.total, vault))
        scored.sort(key=lambda item: (-item[0], item[1].id))
        return [vault for _, vault in scored]


__all__ = ["MatchmakingRanker", "TargetScore", "is_attackable", "record_attack"]
