"""CLI tests for the `find` command."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from lastmod.cli import cli


@pytest.fixture()
def home_env(tmp_path: Path) -> dict[str, Any]:
    home = tmp_path / "home"
    home.mkdir()
    env = {key: value for key, value in os.environ.items() if not key.startswith("LASTMOD__")}
    env["HOME"] = str(home)
    return env


def _set_mtime(path: Path, year: int, month: int, day: int) -> None:
    stamp = datetime(year, month, day, 9, 30, 0).timestamp()
    os.utime(path, (stamp, stamp))


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "most recently changed" in result.output
    assert "find" in result.output


def test_find_help_exits_cleanly() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["find", "-h"])

    assert result.exit_code == 0
    assert "--min-date" in result.output
    assert "File:" not in result.output


def test_find_reports_single_file(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    target = root / "report.txt"
    target.write_text("data", encoding="utf-8")

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert f"File: {target} Date: " in result.output
    assert "Find summary" in result.output
    assert "directories=1, entries=1, eligible=1, issues=0" in result.output


def test_find_empty_directory_reports_nothing(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "empty"
    root.mkdir()

    result = CliRunner().invoke(cli, ["find", "--path", str(root)], env=home_env)

    assert result.exit_code == 0
    assert "No file found" in result.output


def test_find_min_date_after_tree_reports_nothing(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    sub = root / "sub"
    sub.mkdir(parents=True)
    (root / "a.txt").write_text("a", encoding="utf-8")
    (sub / "b.txt").write_text("b", encoding="utf-8")
    _set_mtime(root / "a.txt", 2024, 1, 1)
    _set_mtime(sub / "b.txt", 2024, 6, 1)
    _set_mtime(sub, 2024, 6, 1)

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "-b", "2024-12-01"], env=home_env)

    assert result.exit_code == 0
    assert "No file found" in result.output


def test_find_min_date_keeps_newer_entries(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    (root / "old.txt").write_text("a", encoding="utf-8")
    (root / "new.txt").write_text("b", encoding="utf-8")
    _set_mtime(root / "old.txt", 2024, 1, 1)

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "-b", "2024-12-01"], env=home_env)

    assert result.exit_code == 0
    assert f"File: {root / 'new.txt'}" in result.output


def test_find_exclusion_matching_everything(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    (root / "x_dir").mkdir(parents=True)
    (root / "x1.txt").write_text("1", encoding="utf-8")
    (root / "x_dir" / "x2.txt").write_text("2", encoding="utf-8")

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "-e", "x"], env=home_env)

    assert result.exit_code == 0
    assert "No file found" in result.output


def test_find_missing_path_fails_without_result(tmp_path: Path, home_env: dict[str, Any]) -> None:
    missing = tmp_path / "missing"

    result = CliRunner().invoke(cli, ["find", "-p", str(missing)], env=home_env)

    assert result.exit_code != 0
    assert "Cannot open" in result.output
    assert "File:" not in result.output
    assert "No file found" not in result.output


def test_find_missing_path_json_error(tmp_path: Path, home_env: dict[str, Any]) -> None:
    missing = tmp_path / "missing"

    result = CliRunner().invoke(cli, ["find", "-p", str(missing), "--json"], env=home_env)

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["error"]["code"] == "root_unreadable"


def test_find_requires_path() -> None:
    result = CliRunner().invoke(cli, ["find"])

    assert result.exit_code != 0
    assert "--path" in result.output


def test_find_rejects_unknown_option(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["find", "-p", str(tmp_path), "--since", "2024-01-01"])

    assert result.exit_code == 2


def test_find_rejects_malformed_date(tmp_path: Path, home_env: dict[str, Any]) -> None:
    result = CliRunner().invoke(cli, ["find", "-p", str(tmp_path), "-b", "2024/01/01"], env=home_env)

    assert result.exit_code == 1
    assert "Invalid date" in result.output
    assert "File:" not in result.output


def test_find_json_output(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    target = root / "only.txt"
    target.write_text("x", encoding="utf-8")

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "--json"], env=home_env)

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["found"] is True
    assert payload["path"] == str(target)
    assert payload["counts"] == {"directories": 1, "entries": 1, "eligible": 1, "issues": 0}
    assert payload["formatted"] == datetime.fromtimestamp(payload["timestamp"]).strftime("%Y-%m-%d %H:%M:%S")


def test_find_json_rejects_quiet(tmp_path: Path, home_env: dict[str, Any]) -> None:
    result = CliRunner().invoke(cli, ["find", "-p", str(tmp_path), "--json", "--quiet"], env=home_env)

    assert result.exit_code == 1
    assert json.loads(result.stdout)["error"]["code"] == "cli_error"


def test_find_quiet_omits_summary(tmp_path: Path, home_env: dict[str, Any]) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")

    result = CliRunner().invoke(cli, ["find", "-p", str(tmp_path), "--quiet"], env=home_env)

    assert result.exit_code == 0
    assert "File:" in result.output
    assert "summary" not in result.output


def test_find_verbose_reports_directories(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    (root / "nested").mkdir(parents=True)

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "-v"], env=home_env)

    assert result.exit_code == 0
    assert f"Searching {root}" in result.output
    assert f"Searching {root / 'nested'}" in result.output


def test_find_uses_configured_exclude_pattern(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    (root / "keep.txt").write_text("k", encoding="utf-8")
    (root / "ignored.log").write_text("i", encoding="utf-8")
    home_env["LASTMOD__SCAN__EXCLUDE_PATTERN"] = "keep"

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert f"File: {root / 'ignored.log'}" in result.output

    override = CliRunner().invoke(cli, ["find", "-p", str(root), "-e", "ignored"], env=home_env)

    assert f"File: {root / 'keep.txt'}" in override.output


def test_find_uses_configured_time_format(tmp_path: Path, home_env: dict[str, Any]) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    home_env["LASTMOD__CLI__TIME_FORMAT"] = "stamp=%Y"

    result = CliRunner().invoke(cli, ["find", "-p", str(tmp_path), "--quiet"], env=home_env)

    assert result.exit_code == 0
    assert "Date: stamp=" in result.output


def test_find_reports_unreadable_entries(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    (root / "real.txt").write_text("x", encoding="utf-8")
    (root / "dangling").symlink_to(root / "gone.txt")

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert f"File: {root / 'real.txt'}" in result.output
    assert "issues=1" in result.output


def _tree_with_undecodable_name(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    root.mkdir()
    try:
        fd = os.open(os.fsencode(root) + b"/bad\xffname.txt", os.O_CREAT | os.O_WRONLY, 0o644)
    except OSError:
        pytest.skip("filesystem rejects names that are not valid UTF-8")
    os.close(fd)
    return root


def test_find_prints_undecodable_names_with_escapes(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = _tree_with_undecodable_name(tmp_path)

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert f"File: {root}{os.sep}bad\\xffname.txt Date: " in result.output
    assert "issues=0" in result.output


def test_find_json_escapes_undecodable_names(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = _tree_with_undecodable_name(tmp_path)

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "--json"], env=home_env)

    assert result.exit_code == 0
    assert json.loads(result.stdout)["path"] == f"{root}{os.sep}bad\\xffname.txt"


def _tree_with_linked_directory(tmp_path: Path) -> Path:
    real = tmp_path / "real"
    real.mkdir()
    (real / "x.txt").write_text("x", encoding="utf-8")
    root = tmp_path / "tree"
    root.mkdir()
    (root / "link").symlink_to(real, target_is_directory=True)
    return root


def test_find_follows_symlinked_directories_by_default(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = _tree_with_linked_directory(tmp_path)

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert "directories=2, entries=2" in result.output


def test_find_no_follow_symlinks_reports_the_link(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = _tree_with_linked_directory(tmp_path)

    result = CliRunner().invoke(cli, ["find", "-p", str(root), "--no-follow-symlinks"], env=home_env)

    assert result.exit_code == 0
    assert f"File: {root / 'link'} Date: " in result.output
    assert "directories=1, entries=1" in result.output


def test_find_follow_symlinks_default_comes_from_config(tmp_path: Path, home_env: dict[str, Any]) -> None:
    root = _tree_with_linked_directory(tmp_path)
    home_env["LASTMOD__SCAN__FOLLOW_SYMLINKS"] = "false"

    result = CliRunner().invoke(cli, ["find", "-p", str(root)], env=home_env)

    assert result.exit_code == 0
    assert "directories=1, entries=1" in result.output


def test_find_verbose_missing_path_prints_only_the_error(tmp_path: Path, home_env: dict[str, Any]) -> None:
    missing = tmp_path / "missing"

    result = CliRunner().invoke(cli, ["find", "-p", str(missing), "-v"], env=home_env)

    assert result.exit_code == 1
    assert "Searching" not in result.output
    assert f"Cannot open {missing}" in result.output
