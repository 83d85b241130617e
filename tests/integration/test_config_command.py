"""Integration tests for config command."""

import pytest
from click.testing import CliRunner
from toygit.cli.main import cli


class TestConfigCommand:
    """Tests for toygit config command."""

    @pytest.fixture(autouse=True)
    def inside_repo(self, repo, isolated_home, monkeypatch):
        monkeypatch.chdir(repo.work_tree)

    def test_config_set_and_get(self):
        """Test setting then reading a local value."""
        runner = CliRunner()

        result = runner.invoke(cli, ['config', 'set', 'user.name', 'Test User'])
        assert result.exit_code == 0

        result = runner.invoke(cli, ['config', 'get', 'user.name'])
        assert result.output.strip() == 'Test User'

    def test_config_get_nonexistent(self):
        """Test getting a nonexistent config value."""
        result = CliRunner().invoke(cli, ['config', 'get', 'nonexistent.key'])

        assert result.exit_code != 0
        assert 'Config key not found' in result.output

    def test_config_unset(self):
        """Test removing a value."""
        runner = CliRunner()
        runner.invoke(cli, ['config', 'set', 'test.key', 'value'])

        assert runner.invoke(cli, ['config', 'unset', 'test.key']).exit_code == 0
        assert runner.invoke(cli, ['config', 'get', 'test.key']).exit_code != 0

    def test_config_list(self):
        """Test listing all config values."""
        runner = CliRunner()
        runner.invoke(cli, ['config', 'set', 'user.email', 'test@test.com'])

        result = runner.invoke(cli, ['config', 'list'])

        assert result.exit_code == 0
        assert 'user.email=test@test.com' in result.output
        assert 'core.repositoryformatversion=0' in result.output

    def test_config_global(self, isolated_home):
        """Test global config flag."""
        runner = CliRunner()

        result = runner.invoke(cli, ['config', 'set', '--global', 'user.name', 'Global User'])
        assert result.exit_code == 0
        assert (isolated_home / '.toygitconfig').exists()

        result = runner.invoke(cli, ['config', 'get', '--global', 'user.name'])
        assert result.output.strip() == 'Global User'


def test_config_set_outside_repository(temp_dir, isolated_home, monkeypatch):
    """Test local writes need a repository."""
    monkeypatch.chdir(temp_dir)

    result = CliRunner().invoke(cli, ['config', 'set', 'user.name', 'x'])

    assert result.exit_code != 0
    assert 'Not a toygit repository' in result.output
