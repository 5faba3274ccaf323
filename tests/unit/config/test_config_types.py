"""Unit tests for typed configuration dataclasses."""

import pytest
from ssm.config import as_typed_config, validate_config
from ssm.config_types import (
    AppConfig,
    EconomyConfig,
    GenerationConfig,
    MatchmakingConfig,
    ScoringConfig,
    DEFAULT_OWNER_NAMES,
)
from ssm.errors import InvalidInputError


def test_scoring_config_defaults():
    """Test ScoringConfig default values."""
    config = ScoringConfig()

    assert config.max_modules == 3
    assert config.score_ceiling == 100.0
    assert config.weights == {}
    assert config.hardness == {}


def test_economy_config_defaults():
    config = EconomyConfig()

    assert config.fee_min == 10
    assert config.fee_max == 5000
    assert config.loot_fraction == 0.25
    assert config.loot_cap == 10000
    assert config.band_thresholds == [33.0, 66.0]
    assert config.success_floor < config.success_ceiling


def test_matchmaking_weights_sum_to_one():
    config = MatchmakingConfig()
    total = (config.value_weight + config.ease_weight + config.freshness_weight
             + config.fairness_weight + config.variety_weight)
    assert total == pytest.approx(1.0)


def test_generation_config_lists_are_independent():
    """Mutable defaults must not be shared between instances."""
    a = GenerationConfig()
    b = GenerationConfig()
    a.owner_names.append("Extra")
    a.difficulty_ranges["easy"][0] = 0.0
    assert b.owner_names == DEFAULT_OWNER_NAMES
    assert b.difficulty_ranges["easy"] == [0.2, 0.5]


def test_app_config_round_trip():
    """Test AppConfig.to_dict()/from_dict() preserve values."""
    config = AppConfig(
        log_level="DEBUG",
        scoring=ScoringConfig(max_modules=4, weights={"pattern": 1.5}),
        matchmaking=MatchmakingConfig(recent_window=5),
    )

    data = config.to_dict()
    restored = AppConfig.from_dict(data)

    assert restored == config
    assert data["scoring"]["weights"] == {"pattern": 1.5}
    assert data["matchmaking"]["recent_window"] == 5


def test_from_dict_partial_sections():
    restored = AppConfig.from_dict({"economy": {"fee_min": 20}})
    assert restored.economy.fee_min == 20
    assert restored.economy.fee_max == 5000
    assert restored.scoring == ScoringConfig()


def test_as_typed_config_accepts_dict_and_object():
    assert as_typed_config(None) == AppConfig()
    assert as_typed_config(AppConfig().to_dict()) == AppConfig()
    typed = AppConfig(log_level="WARNING")
    assert as_typed_config(typed) is typed


def test_defaults_validate():
    validate_config(AppConfig())


@pytest.mark.parametrize("overrides", [
    {"scoring": ScoringConfig(max_modules=0)},
    {"scoring": ScoringConfig(weights={"pattern": 0})},
    {"economy": EconomyConfig(success_floor=0.5, success_ceiling=0.4)},
    {"economy": EconomyConfig(fee_min=6000)},
    {"economy": EconomyConfig(band_thresholds=[66.0, 33.0])},
    {"economy": EconomyConfig(loot_thresholds=[500.0])},
    {"generation": GenerationConfig(difficulty_ranges={"easy": [0.8, 0.2], "mixed": [0.3, 0.8], "hard": [0.6, 1.0]})},
    {"generation": GenerationConfig(balance_multipliers={"easy": 0.7, "mixed": 1.0})},
    {"generation": GenerationConfig(owner_names=[])},
    {"matchmaking": MatchmakingConfig(ease_weight=-0.1)},
    {"matchmaking": MatchmakingConfig(reference_balance=0)},
    {"economy": EconomyConfig(fee_base=-0.8)},
    {"economy": EconomyConfig(fee_hardness=-1.6)},
    {"economy": EconomyConfig(fee_min=-10)},
    {"economy": EconomyConfig(loot_fraction=-0.25)},
    {"economy": EconomyConfig(loot_cap=-1)},
    {"generation": GenerationConfig(balance_min=-5000)},
    {"generation": GenerationConfig(balance_span=-1)},
    {"generation": GenerationConfig(difficulty_noise=-0.3)},
    {"generation": GenerationConfig(practice_balance=-500)},
    {"generation": GenerationConfig(practice_difficulty=1.5)},
    {"generation": GenerationConfig(difficulty_ranges={"easy": [0.1, 0.2, 0.3], "mixed": [0.3, 0.8], "hard": [0.6, 1.0]})},
    {"generation": GenerationConfig(difficulty_ranges={"easy": [0.2], "mixed": [0.3, 0.8], "hard": [0.6, 1.0]})},
])
def test_invalid_configs_rejected(overrides):
    with pytest.raises(InvalidInputError):
        validate_config(AppConfig(**overrides))


def test_dict_config_with_negative_loot_rejected():
    """Overrides arriving as plain dicts go through the same checks."""
    cfg = AppConfig().to_dict()
    cfg["economy"]["loot_fraction"] = -0.25
    with pytest.raises(InvalidInputError):
        as_typed_config(cfg)
