"""Wiring of the four engine components from one typed configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .config_types import AppConfig
from .matchmaking.generator import VaultGenerator
from .matchmaking.ranker import MatchmakingRanker
from .scoring.economy import EconomyCalculator
from .scoring.scorer import SecurityScorer


@dataclass(frozen=True)
class Engine:
    """Scorer, calculator, generator and ranker sharing one configuration.

    Components hold only immutable configuration, so one Engine can serve
    concurrent requests as long as each request brings its own random source.
    """
    config: AppConfig
    scorer: SecurityScorer
    calculator: EconomyCalculator
    generator: VaultGenerator
    ranker: MatchmakingRanker


def build_engine(config: AppConfig | None = None) -> Engine:
    """Build an Engine from a typed config (defaults when omitted)."""
    config = config or AppConfig()
    scorer = SecurityScorer(config.scoring)
    calculator = EconomyCalculator(scorer, config.economy)
    generator = VaultGenerator(scorer, calculator, config.generation)
    ranker = MatchmakingRanker(calculator, config.matchmaking)
    return Engine(
        config=config,
        scorer=scorer,
        calculator=calculator,
        generator=generator,
        ranker=ranker,
    )


__all__ = ["Engine", "build_engine"]
