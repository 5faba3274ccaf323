"""Settlement helpers for a finished attack.

These are the payout rules the attack flow applies once a challenge run is
over: how loot is split, what a defender earns from a failed attack, the
principal floor that stops a vault being wiped out, the breach decision from
per-module results, and insurance premiums and claims.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Dict, Sequence

from ..config_types import EconomyConfig
from ..errors import InvalidInputError

if TYPE_CHECKING:
    from .economy import EconomyCalculator


@dataclass(frozen=True)
class LootDistribution:
    attacker_receives: float
    platform_receives: float
    defender_loses: float


@dataclass(frozen=True)
class DefenderEarnings:
    defender_receives: float
    platform_receives: float


@dataclass(frozen=True)
class FloorResult:
    actual_loss: float
    new_balance: float


@dataclass(frozen=True)
class ModuleResult:
    module_id: str
    score: float  # 0..1 performance in the challenge
    weight: float


@dataclass(frozen=True)
class BreachResult:
    total_score: float
    threshold: float
    breached: bool


@dataclass(frozen=True)
class InsurancePlan:
    id: str
    name: str
    duration_seconds: int
    coverage: float
    base_premium: float


INSURANCE_PLANS: Dict[str, InsurancePlan] = {
    "hour": InsurancePlan("hour", "1 Hour", 60 * 60, 0.7, 50),
    "sixhour": InsurancePlan("sixhour", "6 Hours", 6 * 60 * 60, 0.7, 200),
    "day": InsurancePlan("day", "24 Hours", 24 * 60 * 60, 0.7, 500),
}


@dataclass(frozen=True)
class InsurancePolicy:
    id: str
    coverage: float
    premium: float
    purchased_at: datetime
    expires_at: datetime
    max_payout: float
    claims_remaining: int


@dataclass(frozen=True)
class ClaimResult:
    payout: int
    policy: InsurancePolicy
    policy_valid: bool


def loot_distribution(loot: float, cfg: EconomyConfig | None = None) -> LootDistribution:
    """Split looted tokens between attacker and platform."""
    cfg = cfg or EconomyConfig()
    if loot < 0:
        raise InvalidInputError(f"loot must not be negative (got {loot})")
    platform = round(loot * cfg.platform_cut)
    return LootDistribution(
        attacker_receives=loot - platform,
        platform_receives=platform,
        defender_loses=loot,
    )


def defender_earnings(attack_fee: float, cfg: EconomyConfig | None = None) -> DefenderEarnings:
    """What the defender keeps from the fee of a failed attack."""
    cfg = cfg or EconomyConfig()
    if attack_fee < 0:
        raise InvalidInputError(f"attack_fee must not be negative (got {attack_fee})")
    platform = round(attack_fee * cfg.platform_cut_fail)
    return DefenderEarnings(defender_receives=attack_fee - platform, platform_receives=platform)


def apply_principal_floor(balance: float, loot_lost: float, cfg: EconomyConfig | None = None) -> FloorResult:
    """Limit a loss so the vault keeps at least the principal floor."""
    cfg = cfg or EconomyConfig()
    if balance < 0 or loot_lost < 0:
        raise InvalidInputError("balance and loot_lost must not be negative")
    remaining = balance - loot_lost
    if remaining < cfg.principal_floor:
        actual = max(0.0, balance - cfg.principal_floor)
        return FloorResult(actual_loss=actual, new_balance=balance - actual)
    return FloorResult(actual_loss=loot_lost, new_balance=remaining)


def breach_result(results: Sequence[ModuleResult], cfg: EconomyConfig | None = None) -> BreachResult:
    """Decide a breach from the weighted mean of per-module scores.

    Raises:
        InvalidInputError: If no results are given or a score is outside [0, 1]
    """
    cfg = cfg or EconomyConfig()
    if not results:
        raise InvalidInputError("breach_result needs at least one module result")
    total_weight = 0.0
    weighted = 0.0
    for r in results:
        if not 0.0 <= r.score <= 1.0:
            raise InvalidInputError(f"Module {r.module_id!r} score must be within [0, 1] (got {r.score})")
        if r.weight <= 0:
            raise InvalidInputError(f"Module {r.module_id!r} weight must be positive (got {r.weight})")
        weighted += r.score * r.weight
        total_weight += r.weight
    score = weighted / total_weight
    return BreachResult(
        total_score=round(score, 2),
        threshold=cfg.breach_threshold,
        breached=score >= cfg.breach_threshold,
    )


def insurance_premium(
    calculator: EconomyCalculator,
    balance: float,
    strength: float,
    duration_seconds: float,
    coverage: float,
) -> int:
    """Premium for insuring a vault's loot for ``duration_seconds``.

    premium = expected_loss_per_hour * hours * (1 + margin) + fixed_fee,
    discounted proportionally to security, never below the fixed fee.
    """
    cfg = calculator.config
    if duration_seconds < 0:
        raise InvalidInputError(f"duration_seconds must not be negative (got {duration_seconds})")
    if not 0.0 <= coverage <= cfg.insurance_max_coverage:
        raise InvalidInputError(
            f"coverage must be within [0, {cfg.insurance_max_coverage}] (got {coverage})"
        )
    probability = calculator.success_probability(cfg.reference_rating, strength)
    covered_loot = calculator.potential_loot(balance) * coverage
    expected_loss_per_hour = cfg.insurance_attack_rate * probability * covered_loot
    hours = duration_seconds / 3600.0

    premium = expected_loss_per_hour * hours * (1 + cfg.insurance_margin) + cfg.insurance_fixed_fee
    security = min(strength / calculator.scorer.ceiling, 1.0)
    premium *= 1 - cfg.insurance_security_discount * security
    return round(max(premium, cfg.insurance_fixed_fee))


def buy_policy(
    calculator: EconomyCalculator,
    plan: InsurancePlan,
    balance: float,
    strength: float,
    now: datetime,
    policy_id: str,
    claims: int = 1,
) -> InsurancePolicy:
    """Create a policy for ``plan`` priced against the vault's current state."""
    premium = insurance_premium(calculator, balance, strength, plan.duration_seconds, plan.coverage)
    return InsurancePolicy(
        id=policy_id,
        coverage=plan.coverage,
        premium=premium,
        purchased_at=now,
        expires_at=now + timedelta(seconds=plan.duration_seconds),
        max_payout=calculator.potential_loot(balance) * plan.coverage,
        claims_remaining=claims,
    )


def insurance_claim(policy: InsurancePolicy, loot_lost: float, now: datetime) -> ClaimResult:
    """Pay out a claim when the policy is still valid."""
    if loot_lost < 0:
        raise InvalidInputError(f"loot_lost must not be negative (got {loot_lost})")
    if now > policy.expires_at or policy.claims_remaining <= 0:
        return ClaimResult(payout=0, policy=replace(policy, claims_remaining=0), policy_valid=False)
    payout = min(loot_lost * policy.coverage, policy.max_payout)
    return ClaimResult(
        payout=round(payout),
        policy=replace(policy, claims_remaining=policy.claims_remaining - 1),
        policy_valid=True,
    )


__all__ = [
    "LootDistribution",
    "DefenderEarnings",
    "FloorResult",
    "ModuleResult",
    "BreachResult",
    "InsurancePlan",
    "InsurancePolicy",
    "ClaimResult",
    "INSURANCE_PLANS",
    "loot_distribution",
    "defender_earnings",
    "apply_principal_floor",
    "breach_result",
    "insurance_premium",
    "buy_policy",
    "insurance_claim",
]
