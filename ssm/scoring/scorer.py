"""Security scorer: collapse a loadout into one comparable strength value.

Each module contributes its weight times a convex difficulty curve
(see :mod:`ssm.catalog`). The weighted mean of the curves is scaled by how
many of the available slots are filled, then by the score ceiling:

    strength = ceiling * (sum(w_i * curve_i(d_i)) / sum(w_i)) * (n / max_modules)

so a full loadout at maximum difficulty scores exactly ``ceiling`` and raising
any single module's difficulty strictly raises the score.

Kept pure / side-effect free for easy unit testing.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import replace
from typing import Iterable, List, Sequence

from ..catalog import CHALLENGE_CATALOG, ChallengeType, challenge_hardness, challenge_weight
from ..config_types import ScoringConfig
from ..errors import InvalidInputError
from ..models import ChallengeModule, Loadout

logger = logging.getLogger(__name__)


def difficulty_curve(difficulty: float, hardness: float) -> float:
    """Map difficulty in [0, 1] to [0, 1] along ``(e^(k*d) - 1) / (e^k - 1)``."""
    return math.expm1(hardness * difficulty) / math.expm1(hardness)


class SecurityScorer:
    """Scores loadouts and builds loadouts that carry their own score.

    Example usage:
        scorer = SecurityScorer(ScoringConfig(max_modules=3))
        loadout = scorer.build_loadout([
            scorer.make_module(ChallengeType.PATTERN, 0.4, module_id="m1"),
            scorer.make_module(ChallengeType.KEYPAD, 0.7, module_id="m2"),
        ])
        loadout.effective_score  # == scorer.score(loadout.modules)
    """

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()
        if self.config.max_modules < 1:
            raise InvalidInputError(f"max_modules must be >= 1 (got {self.config.max_modules})")

    @property
    def max_modules(self) -> int:
        return self.config.max_modules

    @property
    def ceiling(self) -> float:
        return self.config.score_ceiling

    def score(self, modules: Sequence[ChallengeModule]) -> float:
        """Compute the strength of a module list.

        Args:
            modules: 1..max_modules challenge modules

        Returns:
            Strength in [0, ceiling]

        Raises:
            InvalidInputError: If the list is empty or longer than max_modules
        """
        count = len(modules)
        if count == 0:
            raise InvalidInputError("Cannot score an empty loadout")
        if count > self.max_modules:
            raise InvalidInputError(
                f"Loadout holds {count} modules but at most {self.max_modules} are allowed"
            )

        weighted = 0.0
        total_weight = 0.0
        for module in modules:
            hardness = challenge_hardness(module.type, self.config)
            weighted += module.weight * difficulty_curve(module.difficulty, hardness)
            total_weight += module.weight

        coverage = count / self.max_modules
        return self.ceiling * (weighted / total_weight) * coverage

    def score_loadout(self, loadout: Loadout) -> float:
        """Recompute a loadout's score from its modules."""
        return self.score(loadout.modules)

    def build_loadout(self, modules: Iterable[ChallengeModule]) -> Loadout:
        """Create a Loadout whose cached score matches its modules."""
        module_tuple = tuple(modules)
        return Loadout(modules=module_tuple, effective_score=self.score(module_tuple))

    def make_module(
        self,
        challenge_type: ChallengeType,
        difficulty: float,
        module_id: str | None = None,
        rng: random.Random | None = None,
    ) -> ChallengeModule:
        """Create a module with the weight and display text of its type.

        Args:
            challenge_type: Challenge kind
            difficulty: Difficulty in [0, 1] (not clamped)
            module_id: Explicit identifier; otherwise derived from ``rng``
            rng: Random source for the identifier when ``module_id`` is omitted

        Raises:
            InvalidInputError: If neither an id nor a random source is given,
                or the difficulty is out of range
        """
        if module_id is None:
            if rng is None:
                raise InvalidInputError("make_module needs either module_id or rng")
            module_id = random_id(rng)
        spec = CHALLENGE_CATALOG[challenge_type]
        return ChallengeModule(
            id=module_id,
            type=challenge_type,
            difficulty=float(difficulty),
            weight=challenge_weight(challenge_type, self.config),
            name=spec.name,
            description=spec.description,
        )

    # --- Loadout edits (each returns a freshly scored Loadout) -------------

    def replace_module(self, loadout: Loadout, index: int, module: ChallengeModule) -> Loadout:
        modules = self._checked_list(loadout, index)
        modules[index] = module
        return self.build_loadout(modules)

    def set_difficulty(self, loadout: Loadout, index: int, difficulty: float) -> Loadout:
        modules = self._checked_list(loadout, index)
        modules[index] = replace(modules[index], difficulty=float(difficulty))
        return self.build_loadout(modules)

    def add_module(self, loadout: Loadout, module: ChallengeModule) -> Loadout:
        if len(loadout.modules) >= self.max_modules:
            raise InvalidInputError(f"Loadout is full ({self.max_modules} modules)")
        return self.build_loadout(list(loadout.modules) + [module])

    def remove_module(self, loadout: Loadout, index: int) -> Loadout:
        modules = self._checked_list(loadout, index)
        del modules[index]
        return self.build_loadout(modules)

    def _checked_list(self, loadout: Loadout, index: int) -> List[ChallengeModule]:
        if not 0 <= index < len(loadout.modules):
            raise InvalidInputError(
                f"Module index {index} out of range for loadout of {len(loadout.modules)}"
            )
        return list(loadout.modules)


def random_id(rng: random.Random) -> str:
    """Derive a UUID4-shaped identifier from an explicit random source."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


__all__ = ["SecurityScorer", "difficulty_curve", "random_id"]
