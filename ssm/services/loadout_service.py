"""Loadout service: score a player's own defence for the security editor."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Any, Sequence, Tuple

from ..catalog import ChallengeType, resolve_challenge_type
from ..config import as_typed_config
from ..config_types import AppConfig
from ..engine import Engine, build_engine
from ..errors import InvalidInputError
from ..models import Loadout
from ..scoring.economy import EconomyStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadoutReport:
    loadout: Loadout
    stats: EconomyStats

    @property
    def score(self) -> float:
        return self.loadout.effective_score

    @property
    def band(self) -> str:
        return self.stats.difficulty_band.value


def parse_module_spec(spec: str) -> Tuple[ChallengeType, float]:
    """Parse ``"<challenge>:<difficulty>"`` (e.g. ``"pattern:0.6"``).

    Raises:
        InvalidInputError: If the spec is malformed or names an unknown challenge
    """
    if ":" not in spec:
        raise InvalidInputError(f"Module spec {spec!r} must look like 'challenge:difficulty'")
    name, raw_difficulty = spec.rsplit(":", 1)
    try:
        difficulty = float(raw_difficulty)
    except ValueError:
        raise InvalidInputError(f"Difficulty in {spec!r} is not a number") from None
    return resolve_challenge_type(name), difficulty


def evaluate_loadout(
    modules: Sequence[Tuple[ChallengeType, float]],
    balance: float,
    rating: float | None = None,
    config: Dict[str, Any] | AppConfig | None = None,
    engine: Engine | None = None,
) -> LoadoutReport:
    """Score a defender's loadout and estimate its economics.

    Args:
        modules: (challenge type, difficulty) pairs in slot order
        balance: Defender vault balance
        rating: Typical attacker rating (economy.reference_rating when omitted)
        config: Full configuration dict (or typed AppConfig)
        engine: Prebuilt engine (built from config when omitted)

    Returns:
        LoadoutReport with the scored loadout and economy stats
    """
    engine = engine or build_engine(as_typed_config(config))
    built = [
        engine.scorer.make_module(challenge_type, difficulty, module_id=f"slot-{index}")
        for index, (challenge_type, difficulty) in enumerate(modules)
    ]
    loadout = engine.scorer.build_loadout(built)
    stats = engine.calculator.economy_stats(balance, loadout, rating)
    logger.debug(
        f"loadout score={loadout.effective_score:.2f} band={stats.difficulty_band.value} "
        f"fee={stats.attack_fee} insurance={'yes' if stats.recommended_insurance else 'no'}"
    )
    return LoadoutReport(loadout=loadout, stats=stats)


__all__ = ["LoadoutReport", "parse_module_spec", "evaluate_loadout"]
