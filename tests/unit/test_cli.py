"""Tests for CLI module."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bibnorm.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "bibnorm" in result.output


@pytest.mark.unit
def test_cli_help_lists_commands(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("assemble", "purify", "change-case"):
        assert command in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# normalizer commands
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_purify_command(runner: CliRunner) -> None:
    """Test purify prints the sort key."""
    result = runner.invoke(cli, ["purify", "t{\\^e}te"])

    assert result.exit_code == 0
    assert result.output.strip() == "tete"


@pytest.mark.unit
def test_change_case_command(runner: CliRunner) -> None:
    """Test change-case prints the folded title."""
    result = runner.invoke(cli, ["change-case", "The {NASA} Mission"])

    assert result.exit_code == 0
    assert result.output.strip() == "The {NASA} mission"


# ---------------------------------------------------------------------------
# assemble command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_assemble_help(runner: CliRunner) -> None:
    """Test assemble command help."""
    result = runner.invoke(cli, ["assemble", "--help"])

    assert result.exit_code == 0
    assert "Assemble every entry" in result.output


@pytest.mark.unit
def test_assemble_requires_output(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test assemble fails without --output."""
    result = runner.invoke(cli, ["assemble", str(fixtures_dir / "sample_database.json")])

    assert result.exit_code != 0


@pytest.mark.unit
def test_assemble_rejects_invalid_database(runner: CliRunner, tmp_path: Path) -> None:
    """Test schema violations exit with status 1."""
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"entries": [{"id": "x"}]}), encoding="utf-8")

    result = runner.invoke(cli, ["assemble", str(bad), "-o", str(tmp_path / "out.jsonl")])

    assert result.exit_code == 1
    assert "Invalid raw database" in result.output
