"""Typed configuration dataclasses for safe-security-matchmaker.

Provides strongly-typed configuration objects for the scorer, the economy
calculator, the vault generator and the matchmaking ranker. Every tuning
constant of the engine lives here so it can be overridden from the
environment (see :func:`ssm.config.load_config`).
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any


DEFAULT_OWNER_NAMES: List[str] = [
    "CryptoVault", "ShadowKeeper", "NightOwl", "SteelGuard", "IronFist",
    "GhostLock", "CyberShield", "QuantumSafe", "NeonVault", "DataFortress",
    "BitLocker", "ChainGuard", "MatrixSafe", "PhantomBox", "TechVault",
    "SecureNode", "FireWall", "HexLock", "ByteGuard", "PixelSafe",
]


@dataclass
class ScoringConfig:
    """Security scorer configuration.

    ``weights`` and ``hardness`` hold per-challenge overrides keyed by the
    challenge type value (e.g. ``{"pattern": 1.5}``); types not listed keep
    their catalog defaults.
    """
    max_modules: int = 3
    score_ceiling: float = 100.0
    weights: Dict[str, float] = field(default_factory=dict)
    hardness: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class EconomyConfig:
    """Attack pricing, odds and settlement constants."""
    # fee: F = sqrt(V) * (fee_base + fee_hardness * S / ceiling)
    fee_base: float = 0.8
    fee_hardness: float = 1.6
    fee_min: float = 10
    fee_max: float = 5000
    fee_max_fraction_of_balance: float = 0.5
    # loot
    loot_fraction: float = 0.25
    loot_cap: float = 10000
    platform_cut: float = 0.10
    platform_cut_fail: float = 0.0
    principal_floor: float = 100
    # success odds: logistic over (rating / rating_scale - S) / sharpness
    rating_scale: float = 100.0
    skill_curve_sharpness: float = 10.0
    success_floor: float = 0.01
    success_ceiling: float = 0.99
    breach_threshold: float = 0.65
    # bucketing (inclusive upper bounds, last bucket is open-ended)
    band_thresholds: List[float] = field(default_factory=lambda: [33.0, 66.0])
    loot_thresholds: List[float] = field(default_factory=lambda: [500.0, 2000.0])
    success_thresholds: List[float] = field(default_factory=lambda: [0.3, 0.6])
    # defender outlook estimates
    base_attacks_per_day: float = 5.0
    attractiveness_scale: float = 50.0
    reference_rating: float = 1000.0
    # insurance
    insurance_margin: float = 0.2
    insurance_fixed_fee: float = 5
    insurance_max_coverage: float = 0.8
    insurance_security_discount: float = 0.2
    insurance_attack_rate: float = 0.1  # attacks per hour

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class GenerationConfig:
    """Procedural vault generation ranges per difficulty bias."""
    balance_min: float = 200
    balance_span: float = 3000
    balance_multipliers: Dict[str, float] = field(
        default_factory=lambda: {"easy": 0.7, "mixed": 1.0, "hard": 1.5}
    )
    difficulty_ranges: Dict[str, List[float]] = field(
        default_factory=lambda: {"easy": [0.2, 0.5], "mixed": [0.3, 0.8], "hard": [0.6, 1.0]}
    )
    difficulty_noise: float = 0.3  # total span, centered on the target
    owner_names: List[str] = field(default_factory=lambda: list(DEFAULT_OWNER_NAMES))
    practice_difficulty: float = 0.1
    practice_balance: float = 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class MatchmakingConfig:
    """Target Attractiveness Score weights and signal constants."""
    value_weight: float = 0.30
    ease_weight: float = 0.25
    freshness_weight: float = 0.20
    fairness_weight: float = 0.10
    variety_weight: float = 0.15
    reference_balance: float = 5000
    freshness_window_seconds: float = 30 * 60
    fresh_signal: float = 1.0
    stale_signal: float = 0.5
    fairness_band: float = 200
    assumed_defender_rating: float = 1000
    fair_signal: float = 1.0
    unfair_signal: float = 0.7
    repeat_target_signal: float = 0.3
    recent_window: int = 20
    attack_cooldown_seconds: float = 60 * 60
    default_rating: float = 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    matchmaking: MatchmakingConfig = field(default_factory=MatchmakingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "scoring": self.scoring.to_dict(),
            "economy": self.economy.to_dict(),
            "generation": self.generation.to_dict(),
            "matchmaking": self.matchmaking.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            scoring=ScoringConfig(**data.get("scoring", {})),
            economy=EconomyConfig(**data.get("economy", {})),
            generation=GenerationConfig(**data.get("generation", {})),
            matchmaking=MatchmakingConfig(**data.get("matchmaking", {})),
        )


__all__ = [
    "AppConfig",
    "ScoringConfig",
    "EconomyConfig",
    "GenerationConfig",
    "MatchmakingConfig",
    "DEFAULT_OWNER_NAMES",
]
