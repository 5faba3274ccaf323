"""Feed service: generate an opponent feed and order it for display.

This is the request-level entry point: it turns the configuration into an
engine, creates one random source for the request, runs the generator, then
hands the batch to the ranker.
"""

from __future__ import annotations
import time
import random
import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Sequence

from ..catalog import ChallengeType
from ..config import as_typed_config
from ..config_types import AppConfig
from ..engine import Engine, build_engine
from ..models import AttackerContext, DifficultyBias, OpponentVault
from ..utils.logging_helpers import format_band_summary

logger = logging.getLogger(__name__)


class FeedResult:
    """Results from a feed request."""

    def __init__(self):
        self.vaults: List[OpponentVault] = []
        self.requested = 0
        self.seed: int | None = None
        self.rating = 0.0
        self.band_counts: Dict[str, int] = {"soft": 0, "tricky": 0, "brutal": 0}
        self.duration_seconds = 0.0


def build_feed(
    config: Dict[str, Any] | AppConfig | None = None,
    rating: float | None = None,
    count: int = 10,
    seed: int | None = None,
    bias: DifficultyBias | str | None = None,
    recently_attacked: Sequence[str] = (),
    now: datetime | None = None,
    preferred_types: Sequence[ChallengeType] | None = None,
    engine: Engine | None = None,
) -> FeedResult:
    """Generate ``count`` opponent vaults and rank them for ``rating``.

    Args:
        config: Full configuration dict (or typed AppConfig)
        rating: Attacker rating (defaults to matchmaking.default_rating)
        count: Number of vaults to generate (0 yields an empty feed)
        seed: Seed for this request's random source; None draws fresh entropy
        bias: Force one difficulty bias for the whole feed
        recently_attacked: Vault ids the attacker hit recently (most recent first)
        now: Reference time for freshness (defaults to current UTC time)
        preferred_types: Restrict generated loadouts to these challenge types
        engine: Prebuilt engine (built from config when omitted)

    Returns:
        FeedResult with the ranked vaults and band statistics
    """
    result = FeedResult()
    start = time.time()

    engine = engine or build_engine(as_typed_config(config))
    mm = engine.config.matchmaking
    rating = mm.default_rating if rating is None else rating
    now = now or datetime.now(timezone.utc)

    result.requested = count
    result.seed = seed
    result.rating = rating

    rng = random.Random(seed)
    context = AttackerContext(rating=rating, recently_attacked=tuple(recently_attacked), window=mm.recent_window)

    # progress lines only pay off for large batches
    progress_interval = 100 if count >= 500 else 0
    vaults = engine.generator.generate_feed(
        rating,
        count,
        rng=rng,
        bias=bias,
        preferred_types=preferred_types,
        progress_interval=progress_interval,
    )
    result.vaults = engine.ranker.rank(vaults, context, now)

    for vault in result.vaults:
        result.band_counts[vault.difficulty_band.value] += 1
    result.duration_seconds = time.time() - start

    logger.info(format_band_summary(
        soft=result.band_counts["soft"],
        tricky=result.band_counts["tricky"],
        brutal=result.band_counts["brutal"],
        duration_seconds=result.duration_seconds,
        item_name=f"Feed of {len(result.vaults)} vaults",
    ))
    return result


__all__ = ["FeedResult", "build_feed"]
