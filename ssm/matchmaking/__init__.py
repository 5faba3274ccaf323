"""Matchmaking package exposing the vault generator and the feed ranker."""

from .generator import VaultGenerator, PRACTICE_VAULT_ID
from .ranker import MatchmakingRanker, TargetScore, is_attackable, record_attack

__all__ = [
    "VaultGenerator",
    "PRACTICE_VAULT_ID",
    "MatchmakingRanker",
    "TargetScore",
    "is_attackable",
    "record_attack",
]
