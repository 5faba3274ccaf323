from pathlib import Path
import textwrap

import pytest

from ssm.config import load_config, load_typed_config, deep_merge, coerce_scalar
from ssm.config_types import AppConfig
from ssm.errors import InvalidInputError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    import os
    for key in list(os.environ):
        if key.startswith('SSM__'):
            monkeypatch.delenv(key)
    monkeypatch.delenv('SSM_ENABLE_DOTENV', raising=False)


def test_deep_merge_simple():
    a = {'a': 1, 'b': {'x': 1, 'y': 2}}
    b = {'b': {'y': 99, 'z': 5}, 'c': 3}
    merged = deep_merge(a, b)
    assert merged['a'] == 1
    assert merged['b']['x'] == 1
    assert merged['b']['y'] == 99
    assert merged['b']['z'] == 5
    assert merged['c'] == 3
    # inputs untouched
    assert a['b'] == {'x': 1, 'y': 2}


def test_coerce_scalar():
    assert coerce_scalar('true') is True
    assert coerce_scalar('False') is False
    assert coerce_scalar('10') == 10
    assert coerce_scalar('-3') == -3
    assert isinstance(coerce_scalar('10.5'), float)
    assert coerce_scalar('[30, 60]') == [30, 60]
    assert coerce_scalar('{"easy": [0.1, 0.4]}') == {'easy': [0.1, 0.4]}
    assert coerce_scalar('foo') == 'foo'


def test_defaults_match_typed_defaults():
    assert load_config() == AppConfig().to_dict()


def test_env_override(monkeypatch):
    monkeypatch.setenv('SSM__MATCHMAKING__VALUE_WEIGHT', '0.4')
    monkeypatch.setenv('SSM__SCORING__WEIGHTS__PATTERN', '1.5')
    monkeypatch.setenv('SSM__ECONOMY__BAND_THRESHOLDS', '[30, 60]')
    cfg = load_typed_config()
    assert cfg.matchmaking.value_weight == pytest.approx(0.4)
    assert cfg.scoring.weights == {'pattern': 1.5}
    assert cfg.economy.band_thresholds == [30, 60]
    # untouched values keep defaults
    assert cfg.matchmaking.ease_weight == 0.25


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv('SSM__SCORING__MAX_MODULES', '4')
    cfg = load_config({'scoring': {'max_modules': 5}})
    assert cfg['scoring']['max_modules'] == 5


def test_invalid_env_value_rejected(monkeypatch):
    monkeypatch.setenv('SSM__SCORING__MAX_MODULES', '0')
    with pytest.raises(InvalidInputError):
        load_typed_config()


def test_load_config_dotenv_and_env(tmp_path: Path, monkeypatch):
    """Test that .env file is loaded and environment variables override it."""
    env_file = tmp_path / '.env'
    env_file.write_text(textwrap.dedent('''\
    # tuning
    SSM__LOG_LEVEL=WARNING
    SSM__ECONOMY__FEE_MIN=15  # inline comment
    SSM__MATCHMAKING__RECENT_WINDOW=10
    OTHER_APP__KEY=ignored
    '''), encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('SSM_ENABLE_DOTENV', '1')
    # env override
    monkeypatch.setenv('SSM__MATCHMAKING__RECENT_WINDOW', '5')
    cfg = load_config()
    # .env applied
    assert cfg['log_level'] == 'WARNING'
    assert cfg['economy']['fee_min'] == 15
    # env override applied after .env
    assert cfg['matchmaking']['recent_window'] == 5
    assert 'other_app' not in cfg


def test_dotenv_skipped_under_pytest(tmp_path: Path, monkeypatch):
    (tmp_path / '.env').write_text('SSM__ECONOMY__FEE_MIN=15\n', encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    cfg = load_config()
    assert cfg['economy']['fee_min'] == 10
