"""Exception types raised by the scoring and matchmaking core."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a caller passes input outside the documented domain.

    Values are never clamped into range: an empty loadout, a negative balance
    or an out-of-range difficulty fails fast so the economic guarantees of the
    calculators cannot be silently broken downstream.
    """


__all__ = ["InvalidInputError"]
