"""Integration tests for the migrate CLI commands."""

import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from viewforge.cli.main import cli

PROJECT_DIR = Path(__file__).parent.parent.parent


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run from a temp project root holding a copy of the shipped migrations."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    shutil.copytree(
        PROJECT_DIR / "migrations" / "versions",
        tmp_path / "migrations" / "versions",
        ignore=shutil.ignore_patterns("__pycache__"),
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestMigrateApply:
    def test_apply(self, runner, isolated_env):
        result = runner.invoke(cli, ["migrate", "apply"])
        assert result.exit_code == 0, result.output
        assert "Migrations applied successfully." in result.output
        assert "[x] 0001" in result.output
        assert "[x] 0002" in result.output

    def test_apply_to(self, runner, isolated_env):
        result = runner.invoke(cli, ["migrate", "apply", "--to", "0001"])
        assert result.exit_code == 0, result.output
        assert "1 applied, 1 pending" in result.output

    def test_no_migrations(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["migrate", "apply"])
        assert result.exit_code == 0
        assert "No migrations found." in result.output


class TestMigrateStatus:
    def test_status_pending(self, runner, isolated_env):
        result = runner.invoke(cli, ["migrate", "status"])
        assert result.exit_code == 0, result.output
        assert "0 applied, 2 pending" in result.output
        assert "[ ] 0002: collapse duplicate view slugs and enforce uniqueness" in result.output


class TestMigrateRollback:
    def test_rollback(self, runner, isolated_env):
        runner.invoke(cli, ["migrate", "apply"])
        result = runner.invoke(cli, ["migrate", "rollback"])
        assert result.exit_code == 0, result.output
        assert "Rollback successful." in result.output
        assert "[ ] 0002" in result.output


class TestMigrateStamp:
    def test_stamp(self, runner, isolated_env):
        result = runner.invoke(cli, ["migrate", "stamp"])
        assert result.exit_code == 0, result.output
        assert "Stamping database as revision 'head'" in result.output
        assert "2 applied, 0 pending" in result.output

    def test_stamp_revision(self, runner, isolated_env):
        result = runner.invoke(cli, ["migrate", "stamp", "-r", "0001"])
        assert result.exit_code == 0, result.output
        assert "1 applied, 1 pending" in result.output
