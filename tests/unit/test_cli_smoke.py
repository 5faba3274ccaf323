import json

from click.testing import CliRunner
from ssm.cli import cli
from ssm.version import __version__


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert 'safe-security-matchmaker' in result.output.lower()
    assert __version__ in result.output


def test_cli_help_lists_workflows():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'TYPICAL WORKFLOWS:' in result.output
    for command in ('score', 'feed', 'practice', 'config'):
        assert command in result.output


def test_score_command(test_config):
    runner = CliRunner()
    result = runner.invoke(
        cli, ['score', 'pattern:0.6', 'keypad:0.4', 'timing:0.8', '--balance', '1500'], obj=test_config
    )
    assert result.exit_code == 0, result.output
    assert 'Security score' in result.output
    assert 'Attack fee' in result.output


def test_score_command_fuzzy_name(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['score', 'pattern lok:0.5'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert 'Pattern Lock' in result.output


def test_score_command_bad_module(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['score', 'xyzzy:0.5'], obj=test_config)
    assert result.exit_code == 2
    assert 'Unknown challenge type' in result.output


def test_score_command_bad_difficulty(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['score', 'pattern:1.7'], obj=test_config)
    assert result.exit_code == 2


def test_score_command_negative_balance_points_at_option(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['score', 'pattern:0.5', '--balance', '-5'], obj=test_config)
    assert result.exit_code == 2
    assert '--balance' in result.output
    assert 'MODULES' not in result.output


def test_score_command_negative_rating_points_at_option(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['score', 'pattern:0.5', '--rating', '-1'], obj=test_config)
    assert result.exit_code == 2
    assert '--rating' in result.output
    assert 'MODULES' not in result.output


def test_feed_json_is_reproducible(test_config):
    runner = CliRunner()
    args = ['feed', '--count', '5', '--seed', '11', '--rating', '1100', '--json']
    first = runner.invoke(cli, args, obj=test_config)
    second = runner.invoke(cli, args, obj=test_config)
    assert first.exit_code == 0, first.output
    vaults = json.loads(first.stdout)
    assert len(vaults) == 5
    assert vaults == json.loads(second.stdout)
    for vault in vaults:
        assert vault['difficulty_band'] in {'soft', 'tricky', 'brutal'}
        assert 0 <= vault['attack_fee'] < vault['balance']


def test_feed_text_output(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['feed', '--count', '4', '--seed', '3', '--bias', 'easy'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert 'Opponent feed' in result.output
    assert 'soft' in result.output


def test_feed_restricted_types(test_config):
    runner = CliRunner()
    result = runner.invoke(
        cli, ['feed', '--count', '3', '--seed', '2', '--type', 'tetris', '--type', 'snake', '--json'],
        obj=test_config,
    )
    assert result.exit_code == 0, result.output
    for vault in json.loads(result.stdout):
        assert {m['type'] for m in vault['modules']} == {'tetris', 'snake'}


def test_feed_empty(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['feed', '--count', '0'], obj=test_config)
    assert result.exit_code == 0
    assert 'No opponents requested' in result.output


def test_feed_negative_count(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['feed', '--count', '-1'], obj=test_config)
    assert result.exit_code == 1
    assert 'Error:' in result.output


def test_practice_json(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['practice', '--seed', '1', '--json'], obj=test_config)
    assert result.exit_code == 0, result.output
    vault = json.loads(result.stdout)
    assert vault['id'] == 'practice-safe'
    assert vault['attack_fee'] == 0


def test_config_section(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['config', '--section', 'matchmaking'], obj=test_config)
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data['matchmaking']['value_weight'] == 0.30


def test_config_unknown_section(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['config', '-s', 'database'], obj=test_config)
    assert result.exit_code == 2
    assert 'Unknown section' in result.output
