"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from lastmod.cli import cli
from lastmod.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".lastmod" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "view"], env=env)

    assert result.exit_code == 0
    assert "scan:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "scan.exclude_pattern", "--value", "node_modules"], env=env)

    assert result.exit_code == 0
    assert "node_modules" in result.output
    assert "Updated scan.exclude_pattern" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.scan.exclude_pattern == "node_modules"


def test_config_set_rejects_unknown_key(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "scan.depth", "--value", "3"], env=env)

    assert result.exit_code != 0
    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.scan.exclude_pattern is None


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    manager = ConfigManager(config_path=_config_path(tmp_path))
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("verbose: false", "verbose: true")

    monkeypatch.setattr("lastmod.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["config", "edit"], env=env)

    assert result.exit_code == 0
    assert "updated" in result.output.lower()
    assert manager.load(include_env=False).scan.verbose is True


def test_config_set_same_value_reports_no_changes(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    first = runner.invoke(cli, ["config", "set", "scan.verbose", "--value", "true"], env=env)
    before = _config_path(tmp_path).read_text(encoding="utf-8")
    second = runner.invoke(cli, ["config", "set", "scan.verbose", "--value", "true"], env=env)

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "No changes applied; value already up to date." in second.output
    assert "Updated" not in second.output
    assert _config_path(tmp_path).read_text(encoding="utf-8") == before
