"""Economy calculator: attack fee, loot, success odds and display labels.

Formulas (constants in :class:`ssm.config_types.EconomyConfig`):

- Fee:       F = sqrt(V) * (a + b * S / ceiling), clamped to [fee_min, fee_max],
             capped at fee_max_fraction_of_balance * V, floored to whole tokens
- Loot:      L = min(V * loot_fraction, loot_cap)
- Success:   p = floor + (ceil - floor) * sigmoid((R / rating_scale - S) / tau)

``floor`` and ``ceil`` are asymptotes of the curve rather than clamps, so the
probability never touches 0 or 1 and stays strictly monotone.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..config_types import EconomyConfig
from ..errors import InvalidInputError
from ..models import (
    DifficultyBand,
    Loadout,
    LootRange,
    OpponentVault,
    SuccessChance,
)
from .buckets import band_table, bucket_for, loot_table, success_table
from .scorer import SecurityScorer
from .settlement import defender_earnings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EconomyStats:
    """Defender-side outlook for a loadout (shown while editing security)."""
    security_score: float
    difficulty_band: DifficultyBand
    attack_fee: int
    potential_loot: float
    success_probability: float
    estimated_attacks_per_day: float
    estimated_fail_income_per_day: int
    estimated_breach_risk_per_day: int
    recommended_insurance: bool


def _require_non_negative(name: str, value: float) -> None:
    if value is None or math.isnan(value) or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative number (got {value})")


def _sigmoid(x: float) -> float:
    # split form avoids overflow in exp for large |x|
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


class EconomyCalculator:
    """Derives the economic terms of an attack from strength and rating.

    Example usage:
        calc = EconomyCalculator(scorer)
        fee = calc.attack_fee(balance=1200, strength=45.0)
        p = calc.success_probability(rating=1000, strength=45.0)
    """

    def __init__(self, scorer: SecurityScorer | None = None, config: EconomyConfig | None = None):
        self.scorer = scorer or SecurityScorer()
        self.config = config or EconomyConfig()
        self._bands = band_table(self.config.band_thresholds)
        self._loot = loot_table(self.config.loot_thresholds)
        self._success = success_table(self.config.success_thresholds)

    # --- Pricing -----------------------------------------------------------

    def attack_fee(self, balance: float, strength: float) -> int:
        """Entry fee for attacking a vault.

        Non-decreasing in both balance and strength; strictly below the
        balance for any positive balance, 0 for an empty vault.

        Raises:
            InvalidInputError: On negative balance or strength
        """
        _require_non_negative("balance", balance)
        _require_non_negative("strength", strength)
        cfg = self.config
        if balance == 0:
            return 0
        hardness = strength / self.scorer.ceiling
        fee = math.sqrt(balance) * (cfg.fee_base + cfg.fee_hardness * hardness)
        fee = max(cfg.fee_min, min(cfg.fee_max, fee))
        fee = min(fee, balance * cfg.fee_max_fraction_of_balance)
        return int(math.floor(fee))

    def potential_loot(self, balance: float) -> float:
        """Tokens a successful attack removes from the vault."""
        _require_non_negative("balance", balance)
        return min(balance * self.config.loot_fraction, self.config.loot_cap)

    def success_probability(self, rating: float, strength: float) -> float:
        """Probability that an attacker of ``rating`` breaches ``strength``.

        Decreasing in strength, increasing in rating, always inside (0, 1).

        Raises:
            InvalidInputError: On negative rating or strength
        """
        _require_non_negative("rating", rating)
        _require_non_negative("strength", strength)
        cfg = self.config
        x = (rating / cfg.rating_scale - strength) / cfg.skill_curve_sharpness
        return cfg.success_floor + (cfg.success_ceiling - cfg.success_floor) * _sigmoid(x)

    # --- Labels ------------------------------------------------------------

    def band(self, strength: float) -> DifficultyBand:
        _require_non_negative("strength", strength)
        return bucket_for(strength, self._bands)

    def loot_range(self, balance: float) -> LootRange:
        _require_non_negative("balance", balance)
        return bucket_for(balance, self._loot)

    def success_label(self, probability: float) -> SuccessChance:
        if math.isnan(probability) or not 0.0 <= probability <= 1.0:
            raise InvalidInputError(f"probability must be within [0, 1] (got {probability})")
        return bucket_for(probability, self._success)

    # --- Assembly ----------------------------------------------------------

    def price_vault(
        self,
        vault_id: str,
        owner_name: str,
        balance: float,
        loadout: Loadout,
        attacker_rating: float,
    ) -> OpponentVault:
        """Build a vault snapshot whose derived fields all follow from its sources.

        The loadout score is recomputed rather than trusted, so a snapshot can
        not carry a stale ``effective_score``.
        """
        strength = self.scorer.score_loadout(loadout)
        if strength != loadout.effective_score:
            logger.debug(f"vault={vault_id} loadout score refreshed {loadout.effective_score} -> {strength}")
            loadout = self.scorer.build_loadout(loadout.modules)
        probability = self.success_probability(attacker_rating, strength)
        return OpponentVault(
            id=vault_id,
            owner_name=owner_name,
            balance=balance,
            security_score=strength,
            loadout=loadout,
            difficulty_band=self.band(strength),
            loot_range=self.loot_range(balance),
            attack_fee=self.attack_fee(balance, strength),
            potential_loot=self.potential_loot(balance),
            success_chance=self.success_label(probability),
        )

    def economy_stats(self, balance: float, loadout: Loadout, attacker_rating: float | None = None) -> EconomyStats:
        """Estimate how a loadout performs as a defence.

        Lower security is assumed to attract more attacks; failed attacks pay
        the defender the fee, successful ones cost the potential loot.

        Args:
            balance: Defender's vault balance
            loadout: Defender's loadout
            attacker_rating: Typical attacker rating (defaults to reference_rating)
        """
        cfg = self.config
        rating = cfg.reference_rating if attacker_rating is None else attacker_rating
        strength = self.scorer.score_loadout(loadout)
        probability = self.success_probability(rating, strength)
        fee = self.attack_fee(balance, strength)
        loot = self.potential_loot(balance)

        attractiveness = 1.0 / (1.0 + strength / cfg.attractiveness_scale)
        attacks_per_day = round(cfg.base_attacks_per_day * attractiveness, 1)
        earned = defender_earnings(fee, cfg).defender_receives
        fail_income = round(attacks_per_day * (1.0 - probability) * earned)
        breach_risk = round(attacks_per_day * probability * loot)

        return EconomyStats(
            security_score=strength,
            difficulty_band=self.band(strength),
            attack_fee=fee,
            potential_loot=loot,
            success_probability=probability,
            estimated_attacks_per_day=attacks_per_day,
            estimated_fail_income_per_day=fail_income,
            estimated_breach_risk_per_day=breach_risk,
            recommended_insurance=breach_risk > fail_income,
        )


__all__ = ["EconomyCalculator", "EconomyStats"]
