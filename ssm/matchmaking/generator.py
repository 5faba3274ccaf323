"""Procedural opponent vault generation.

A vault is built in five steps:
1. sample a balance from the bias-scaled range,
2. sample a target difficulty from the bias range (easy low, hard high,
   mixed across the middle),
3. pick up to ``max_modules`` distinct challenge types and jitter each
   module's difficulty around the target, clamped to [0, 1],
4. score the loadout,
5. price the vault.

Every draw comes from the ``random.Random`` passed in by the caller; this
module never touches the global random state.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import replace
from typing import Iterable, List, Sequence

from ..catalog import ALL_CHALLENGE_TYPES, ChallengeType
from ..config_types import GenerationConfig
from ..errors import InvalidInputError
from ..models import DifficultyBand, DifficultyBias, Loadout, OpponentVault
from ..scoring.economy import EconomyCalculator
from ..scoring.scorer import SecurityScorer, random_id
from ..utils.logging_helpers import log_progress

logger = logging.getLogger(__name__)

PRACTICE_VAULT_ID = "practice-safe"
PRACTICE_OWNER_NAME = "TrainingSafe"


def _coerce_bias(bias: DifficultyBias | str) -> DifficultyBias:
    try:
        return DifficultyBias(bias)
    except ValueError:
        raise InvalidInputError(
            f"Unknown difficulty bias {bias!r} (expected one of: easy, mixed, hard)"
        ) from None


def _eligible_types(preferred: Iterable[ChallengeType] | None) -> List[ChallengeType]:
    if preferred is None:
        return list(ALL_CHALLENGE_TYPES)
    seen: List[ChallengeType] = []
    for t in preferred:
        t = ChallengeType(t)
        if t not in seen:
            seen.append(t)
    if not seen:
        raise InvalidInputError("preferred_types must name at least one challenge type")
    return seen


class VaultGenerator:
    """Builds internally consistent opponent vaults.

    Example usage:
        gen = VaultGenerator(scorer, calculator, GenerationConfig())
        rng = random.Random(42)
        vault = gen.generate(1000, "hard", rng)
        feed = gen.generate_feed(1000, 10, rng)
    """

    def __init__(
        self,
        scorer: SecurityScorer | None = None,
        calculator: EconomyCalculator | None = None,
        config: GenerationConfig | None = None,
    ):
        self.scorer = scorer or SecurityScorer()
        self.calculator = calculator or EconomyCalculator(self.scorer)
        self.config = config or GenerationConfig()

    def sample_balance(self, bias: DifficultyBias | str, rng: random.Random) -> int:
        bias = _coerce_bias(bias)
        cfg = self.config
        base = cfg.balance_min + rng.random() * cfg.balance_span
        return round(base * cfg.balance_multipliers[bias.value])

    def sample_target_difficulty(self, bias: DifficultyBias | str, rng: random.Random) -> float:
        bias = _coerce_bias(bias)
        low, high = self.config.difficulty_ranges[bias.value]
        return low + rng.random() * (high - low)

    def build_loadout(
        self,
        target_difficulty: float,
        rng: random.Random,
        preferred_types: Sequence[ChallengeType] | None = None,
    ) -> Loadout:
        """Create a scored loadout whose modules sit around ``target_difficulty``.

        Uses every eligible type when there are fewer than ``max_modules``.
        """
        if not 0.0 <= target_difficulty <= 1.0:
            raise InvalidInputError(f"target difficulty must be within [0, 1] (got {target_difficulty})")
        eligible = _eligible_types(preferred_types)
        take = min(self.scorer.max_modules, len(eligible))
        selected = rng.sample(eligible, take)

        noise = self.config.difficulty_noise
        modules = []
        for challenge_type in selected:
            jitter = (rng.random() - 0.5) * noise
            difficulty = max(0.0, min(1.0, target_difficulty + jitter))
            modules.append(self.scorer.make_module(challenge_type, difficulty, rng=rng))
        return self.scorer.build_loadout(modules)

    def generate(
        self,
        attacker_rating: float,
        difficulty_bias: DifficultyBias | str = DifficultyBias.MIXED,
        rng: random.Random | None = None,
        preferred_types: Sequence[ChallengeType] | None = None,
    ) -> OpponentVault:
        """Generate one opponent vault.

        Args:
            attacker_rating: Rating of the player the vault is generated for
            difficulty_bias: easy, mixed or hard
            rng: Explicit random source (a fresh unseeded one when omitted)
            preferred_types: Restrict challenge types to this subset

        Returns:
            Fully priced OpponentVault
        """
        if attacker_rating < 0:
            raise InvalidInputError(f"attacker_rating must not be negative (got {attacker_rating})")
        bias = _coerce_bias(difficulty_bias)
        rng = rng if rng is not None else random.Random()

        owner_name = rng.choice(self.config.owner_names)
        balance = self.sample_balance(bias, rng)
        target = self.sample_target_difficulty(bias, rng)
        loadout = self.build_loadout(target, rng, preferred_types)
        vault = self.calculator.price_vault(
            vault_id=random_id(rng),
            owner_name=owner_name,
            balance=balance,
            loadout=loadout,
            attacker_rating=attacker_rating,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"generated vault={vault.id} bias={bias.value} target={target:.2f} "
                f"score={vault.security_score:.1f} band={vault.difficulty_band.value} "
                f"balance={balance} fee={vault.attack_fee}"
            )
        return vault

    def generate_feed(
        self,
        attacker_rating: float,
        count: int,
        rng: random.Random | None = None,
        bias: DifficultyBias | str | None = None,
        preferred_types: Sequence[ChallengeType] | None = None,
        progress_interval: int = 0,
    ) -> List[OpponentVault]:
        """Generate ``count`` independent vaults.

        With ``bias`` unset each vault draws its own bias uniformly.

        Args:
            progress_interval: Log progress every N vaults (0 disables)
        """
        if count < 0:
            raise InvalidInputError(f"count must not be negative (got {count})")
        rng = rng if rng is not None else random.Random()
        fixed = _coerce_bias(bias) if bias is not None else None
        biases = list(DifficultyBias)
        vaults: List[OpponentVault] = []
        band_counts = {band.value: 0 for band in DifficultyBand}
        start = time.time()
        for _ in range(count):
            vault_bias = fixed if fixed is not None else rng.choice(biases)
            vault = self.generate(attacker_rating, vault_bias, rng, preferred_types)
            vaults.append(vault)
            band_counts[vault.difficulty_band.value] += 1
            if progress_interval > 0 and len(vaults) % progress_interval == 0:
                log_progress(
                    processed=len(vaults),
                    total=count,
                    elapsed_seconds=time.time() - start,
                    item_name="vaults",
                    **band_counts,
                )
        return vaults

    def practice_vault(self, rng: random.Random | None = None, attacker_rating: float = 1000.0) -> OpponentVault:
        """Guaranteed-easy tutorial target that costs nothing to attack."""
        rng = rng if rng is not None else random.Random()
        loadout = self.build_loadout(self.config.practice_difficulty, rng)
        vault = self.calculator.price_vault(
            vault_id=PRACTICE_VAULT_ID,
            owner_name=PRACTICE_OWNER_NAME,
            balance=self.config.practice_balance,
            loadout=loadout,
            attacker_rating=attacker_rating,
        )
        return replace(vault, attack_fee=0)


__all__ = ["VaultGenerator", "PRACTICE_VAULT_ID", "PRACTICE_OWNER_NAME"]
