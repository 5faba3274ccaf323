"""Scoring package: security scorer, economy calculator and settlement rules."""

from .scorer import SecurityScorer, difficulty_curve, random_id
from .economy import EconomyCalculator, EconomyStats
from .buckets import bucket_for, build_table, band_table, loot_table, success_table

__all__ = [
    "SecurityScorer",
    "difficulty_curve",
    "random_id",
    "EconomyCalculator",
    "EconomyStats",
    "bucket_for",
    "build_table",
    "band_table",
    "loot_table",
    "success_table",
]
