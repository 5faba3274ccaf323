from __future__ import annotations
import os
import json
import logging
from typing import Any, Dict
from pathlib import Path
import copy

from .config_types import AppConfig, DEFAULT_OWNER_NAMES
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "scoring": {
        "max_modules": 3,
        "score_ceiling": 100.0,
        "weights": {},
        "hardness": {},
    },
    "economy": {
        "fee_base": 0.8,
        "fee_hardness": 1.6,
        "fee_min": 10,
        "fee_max": 5000,
        "fee_max_fraction_of_balance": 0.5,
        "loot_fraction": 0.25,
        "loot_cap": 10000,
        "platform_cut": 0.10,
        "platform_cut_fail": 0.0,
        "principal_floor": 100,
        "rating_scale": 100.0,
        "skill_curve_sharpness": 10.0,
        "success_floor": 0.01,
        "success_ceiling": 0.99,
        "breach_threshold": 0.65,
        "band_thresholds": [33.0, 66.0],
        "loot_thresholds": [500.0, 2000.0],
        "success_thresholds": [0.3, 0.6],
        "base_attacks_per_day": 5.0,
        "attractiveness_scale": 50.0,
        "reference_rating": 1000.0,
        "insurance_margin": 0.2,
        "insurance_fixed_fee": 5,
        "insurance_max_coverage": 0.8,
        "insurance_security_discount": 0.2,
        "insurance_attack_rate": 0.1,
    },
    "generation": {
        "balance_min": 200,
        "balance_span": 3000,
        "balance_multipliers": {"easy": 0.7, "mixed": 1.0, "hard": 1.5},
        "difficulty_ranges": {"easy": [0.2, 0.5], "mixed": [0.3, 0.8], "hard": [0.6, 1.0]},
        "difficulty_noise": 0.3,
        "owner_names": list(DEFAULT_OWNER_NAMES),
        "practice_difficulty": 0.1,
        "practice_balance": 500,
    },
    "matchmaking": {
        "value_weight": 0.30,
        "ease_weight": 0.25,
        "freshness_weight": 0.20,
        "fairness_weight": 0.10,
        "variety_weight": 0.15,
        "reference_balance": 5000,
        "freshness_window_seconds": 1800,
        "fresh_signal": 1.0,
        "stale_signal": 0.5,
        "fairness_band": 200,
        "assumed_defender_rating": 1000,
        "fair_signal": 1.0,
        "unfair_signal": 0.7,
        "repeat_target_signal": 0.3,
        "recent_window": 20,
        "attack_cooldown_seconds": 3600,
        "default_rating": 1000,
    },
}

_BIASES = ("easy", "mixed", "hard")


def deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Merge dict b into a (shallow copies) returning new dict.
    Nested dicts are merged recursively; other values override.
    """
    result = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)  # type: ignore[arg-type]
        else:
            result[k] = v
    return result


def _load_dotenv(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, val = line.split('=', 1)
        key = key.strip()
        val = val.strip()
        # Strip inline comments starting with # unless inside quotes
        if '#' in val:
            in_single = False
            in_double = False
            result_chars = []
            for ch in val:
                if ch == "'" and not in_double:
                    in_single = not in_single
                elif ch == '"' and not in_single:
                    in_double = not in_double
                if ch == '#' and not in_single and not in_double:
                    break
                result_chars.append(ch)
            val = ''.join(result_chars).rstrip()
        if (val.startswith('"') and val.endswith('"')) or (val.startswith("'") and val.endswith("'")):
            if len(val) >= 2:
                val = val[1:-1]
        if key:
            values[key] = val
    return values


def load_config(overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Load configuration merging defaults <- .env <- environment <- overrides.

    During test runs (detected via PYTEST_CURRENT_TEST) .env loading is skipped
    unless SSM_ENABLE_DOTENV=1 is set to allow deterministic defaults.

    Environment keys use the ``SSM__`` prefix and ``__`` as path separator,
    e.g. ``SSM__MATCHMAKING__VALUE_WEIGHT=0.4`` or
    ``SSM__SCORING__WEIGHTS__PATTERN=1.5``.

    Args:
        overrides: Dict of values to deep-merge last (primarily for tests).

    Returns:
        dict: Configuration dictionary (for typed access use load_typed_config()).
    """
    dotenv_values: Dict[str, str] = {}
    if os.environ.get('SSM_ENABLE_DOTENV') or not os.environ.get('PYTEST_CURRENT_TEST'):
        dotenv_values = _load_dotenv(Path('.env'))
    # Deep copy defaults to avoid cross-call mutation of nested dicts
    cfg: Dict[str, Any] = copy.deepcopy(_DEFAULTS)

    prefix = "SSM__"
    # Merge .env and real environment (real env wins)
    combined = {**{k: v for k, v in dotenv_values.items() if k.startswith(prefix)},
                **{k: v for k, v in os.environ.items() if k.startswith(prefix)}}
    for raw_key, value in combined.items():
        path_parts = raw_key[len(prefix):].split("__")
        cursor: Dict[str, Any] = cfg
        for part in path_parts[:-1]:
            cursor = cursor.setdefault(part.lower(), {})  # type: ignore[assignment]
        cursor[path_parts[-1].lower()] = coerce_scalar(value)
    if overrides:
        cfg = deep_merge(cfg, overrides)

    _configure_logging(cfg.get('log_level', 'INFO'))

    return cfg


def load_typed_config(overrides: Dict[str, Any] | None = None) -> AppConfig:
    """Load configuration as a validated, typed AppConfig object.

    Args:
        overrides: Dictionary of override values

    Returns:
        AppConfig: Typed configuration object with .to_dict() for dict conversion

    Raises:
        InvalidInputError: If a configured value is out of its valid domain
    """
    dict_config = load_config(overrides)
    typed = AppConfig.from_dict(dict_config)
    validate_config(typed)
    return typed


def as_typed_config(config: Dict[str, Any] | AppConfig | None) -> AppConfig:
    """Accept a config dict, an AppConfig or None and return a validated AppConfig.

    Unlike load_typed_config this does not consult the environment; callers
    that already hold a config (CLI context, tests) pass it straight through.
    """
    if config is None:
        typed = AppConfig()
    elif isinstance(config, AppConfig):
        typed = config
    else:
        typed = AppConfig.from_dict(config)
    validate_config(typed)
    return typed


def validate_config(cfg: AppConfig) -> None:
    """Reject configurations the engine cannot honour.

    Args:
        cfg: Typed configuration

    Raises:
        InvalidInputError: Describing the first offending value
    """
    scoring = cfg.scoring
    if scoring.max_modules < 1:
        raise InvalidInputError(f"scoring.max_modules must be >= 1 (got {scoring.max_modules})")
    if scoring.score_ceiling <= 0:
        raise InvalidInputError(f"scoring.score_ceiling must be positive (got {scoring.score_ceiling})")
    for name, weight in scoring.weights.items():
        if weight <= 0:
            raise InvalidInputError(f"scoring.weights.{name} must be positive (got {weight})")
    for name, hardness in scoring.hardness.items():
        if hardness <= 0:
            raise InvalidInputError(f"scoring.hardness.{name} must be positive (got {hardness})")

    economy = cfg.economy
    for key in ("fee_base", "fee_hardness", "fee_min", "loot_fraction", "loot_cap"):
        if getattr(economy, key) < 0:
            raise InvalidInputError(f"economy.{key} must not be negative (got {getattr(economy, key)})")
    if not 0 < economy.success_floor < economy.success_ceiling < 1:
        raise InvalidInputError(
            "economy.success_floor and economy.success_ceiling must satisfy 0 < floor < ceiling < 1"
        )
    if economy.skill_curve_sharpness <= 0 or economy.rating_scale <= 0:
        raise InvalidInputError("economy.skill_curve_sharpness and economy.rating_scale must be positive")
    if not 0 < economy.fee_max_fraction_of_balance < 1:
        raise InvalidInputError("economy.fee_max_fraction_of_balance must be within (0, 1)")
    if economy.fee_min > economy.fee_max:
        raise InvalidInputError("economy.fee_min must not exceed economy.fee_max")
    for key in ("band_thresholds", "loot_thresholds", "success_thresholds"):
        bounds = getattr(economy, key)
        if len(bounds) != 2 or bounds[0] >= bounds[1]:
            raise InvalidInputError(f"economy.{key} must be two strictly increasing bounds (got {bounds})")

    generation = cfg.generation
    for key in ("balance_min", "balance_span", "difficulty_noise", "practice_balance"):
        if getattr(generation, key) < 0:
            raise InvalidInputError(f"generation.{key} must not be negative (got {getattr(generation, key)})")
    for bias in _BIASES:
        if bias not in generation.difficulty_ranges or bias not in generation.balance_multipliers:
            raise InvalidInputError(f"generation ranges missing difficulty bias '{bias}'")
        bounds = generation.difficulty_ranges[bias]
        if len(bounds) != 2:
            raise InvalidInputError(f"generation.difficulty_ranges.{bias} must be a [low, high] pair (got {bounds})")
        low, high = bounds
        if not 0 <= low <= high <= 1:
            raise InvalidInputError(
                f"generation.difficulty_ranges.{bias} must satisfy 0 <= low <= high <= 1 (got {[low, high]})"
            )
        if generation.balance_multipliers[bias] <= 0:
            raise InvalidInputError(f"generation.balance_multipliers.{bias} must be positive")
    if not 0 <= generation.practice_difficulty <= 1:
        raise InvalidInputError("generation.practice_difficulty must be within [0, 1]")
    if not generation.owner_names:
        raise InvalidInputError("generation.owner_names must not be empty")

    mm = cfg.matchmaking
    for key in ("value_weight", "ease_weight", "freshness_weight", "fairness_weight", "variety_weight"):
        if getattr(mm, key) < 0:
            raise InvalidInputError(f"matchmaking.{key} must not be negative")
    if mm.reference_balance <= 0:
        raise InvalidInputError("matchmaking.reference_balance must be positive")
    if mm.recent_window < 0:
        raise InvalidInputError("matchmaking.recent_window must not be negative")
    logger.debug("Configuration validated")


def _configure_logging(level_str: str) -> None:
    """Configure Python logging based on configured level."""
    level_str = level_str.upper()
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL,
    }
    level = level_map.get(level_str, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(message)s',
        force=True
    )


def coerce_scalar(value: str) -> Any:
    txt = value.strip()
    # JSON object or array
    if (txt.startswith('[') and txt.endswith(']')) or (txt.startswith('{') and txt.endswith('}')):
        try:
            return json.loads(txt)
        except json.JSONDecodeError:
            pass  # fall through to scalar heuristics
    lower = txt.lower()
    if lower in {"true", "yes"}:
        return True
    if lower in {"false", "no"}:
        return False
    if txt.isdigit() or (txt.startswith("-") and txt[1:].isdigit()):
        return int(txt)
    try:
        return float(txt)
    except ValueError:
        return txt

__all__ = ["load_config", "deep_merge", "load_typed_config", "as_typed_config", "validate_config", "coerce_scalar"]
