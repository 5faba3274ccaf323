"""Bucketing tables for display labels.

A table is an ordered tuple of ``(upper_bound_inclusive, label)`` pairs whose
last bound is ``math.inf``. Lookup returns the first bucket whose bound is not
exceeded, so every comparable value maps to exactly one label.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple, TypeVar

from ..errors import InvalidInputError
from ..models import DifficultyBand, LootRange, SuccessChance

T = TypeVar("T")

BucketTable = Tuple[Tuple[float, T], ...]


def build_table(thresholds: Sequence[float], labels: Sequence[T]) -> BucketTable:
    """Pair ascending thresholds with labels, closing the table with ``inf``.

    Args:
        thresholds: Strictly increasing inclusive upper bounds (one fewer than labels)
        labels: Bucket labels in ascending order

    Returns:
        Bucket table usable with :func:`bucket_for`
    """
    if len(labels) != len(thresholds) + 1:
        raise InvalidInputError(
            f"Bucket table needs exactly one more label than thresholds "
            f"(got {len(labels)} labels, {len(thresholds)} thresholds)"
        )
    bounds = [float(t) for t in thresholds]
    if any(b >= nxt for b, nxt in zip(bounds, bounds[1:])):
        raise InvalidInputError(f"Bucket thresholds must be strictly increasing (got {bounds})")
    bounds.append(math.inf)
    return tuple(zip(bounds, labels))


def bucket_for(value: float, table: BucketTable) -> T:
    """Return the label of the first bucket whose upper bound holds ``value``."""
    if math.isnan(value):
        raise InvalidInputError("Cannot bucket NaN")
    for upper, label in table:
        if value <= upper:
            return label
    # unreachable: last bound is inf
    raise InvalidInputError(f"Value {value} exceeds bucket table")


def band_table(thresholds: Sequence[float] = (33.0, 66.0)) -> BucketTable:
    return build_table(thresholds, [DifficultyBand.SOFT, DifficultyBand.TRICKY, DifficultyBand.BRUTAL])


def loot_table(thresholds: Sequence[float] = (500.0, 2000.0)) -> BucketTable:
    return build_table(thresholds, [LootRange.SMALL, LootRange.MODERATE, LootRange.RICH])


def success_table(thresholds: Sequence[float] = (0.3, 0.6)) -> BucketTable:
    return build_table(thresholds, [SuccessChance.LOW, SuccessChance.MEDIUM, SuccessChance.HIGH])


__all__ = ["BucketTable", "build_table", "bucket_for", "band_table", "loot_table", "success_table"]
