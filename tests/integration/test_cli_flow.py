import json
import time
from pathlib import Path
from unittest.mock import MagicMock

from typer.testing import CliRunner

from tiercache.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# temp_root: Path the CLI uses as its temporary directory (via cache.temp_root)
# mock_console_display: MagicMock (patches ConsoleDisplay)


def test_set_then_get_flow(runner: CliRunner, mock_console_display: MagicMock):
    """Values written by one invocation are read back from disk by the next."""
    result = runner.invoke(app, ["set", "user/1", '{"name": "Ada", "n": 1}'])
    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    mock_console_display.display_info.assert_called_once_with("Stored 'user/1'.")

    result = runner.invoke(app, ["get", "user/1"])
    assert result.exit_code == 0
    mock_console_display.display_output.assert_called_once_with({"name": "Ada", "n": 1})


def test_files_land_under_configured_root(runner: CliRunner, temp_root: Path, mock_console_display: MagicMock):
    result = runner.invoke(app, ["--name", "profiles", "--root", "app_cache", "set", "a:b", "42"])
    assert result.exit_code == 0

    record = json.loads((temp_root / "app_cache" / "profiles" / "a_b.json").read_text(encoding="utf-8"))
    assert record["data"] == 42


def test_get_missing_key_exits_non_zero(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["get", "missing"])

    assert result.exit_code == 1
    mock_console_display.display_warning.assert_called_once_with("No cached value for 'missing'.")


def test_has_flow(runner: CliRunner, mock_console_display: MagicMock):
    assert runner.invoke(app, ["has", "k"]).exit_code == 1
    runner.invoke(app, ["set", "k", "v"])
    assert runner.invoke(app, ["has", "k"]).exit_code == 0


def test_remove_flow(runner: CliRunner, mock_console_display: MagicMock):
    runner.invoke(app, ["set", "k", "v"])

    result = runner.invoke(app, ["remove", "k"])

    assert result.exit_code == 0
    assert runner.invoke(app, ["get", "k"]).exit_code == 1


def test_clear_flow(runner: CliRunner, temp_root: Path, mock_console_display: MagicMock):
    runner.invoke(app, ["set", "a", "1"])
    runner.invoke(app, ["set", "b", "2"])

    result = runner.invoke(app, ["clear"])

    assert result.exit_code == 0
    assert not (temp_root / "file_cache" / "default").exists()
    assert runner.invoke(app, ["get", "a"]).exit_code == 1


def test_ttl_and_cleanup_flow(runner: CliRunner, temp_root: Path, mock_console_display: MagicMock):
    runner.invoke(app, ["set", "short", "1", "--ttl", "0.001"])
    runner.invoke(app, ["set", "long", "2"])
    time.sleep(0.01)

    result = runner.invoke(app, ["cleanup"])

    assert result.exit_code == 0
    names = sorted(p.name for p in (temp_root / "file_cache" / "default").iterdir())
    assert names == ["long.json"]


def test_info_reports_expiry(runner: CliRunner, mock_console_display: MagicMock):
    runner.invoke(app, ["set", "k", "v", "--ttl", "600"])

    result = runner.invoke(app, ["info", "k"])

    assert result.exit_code == 0
    mock_console_display.display_entry_details.assert_called_once()
    key, _, remaining = mock_console_display.display_entry_details.call_args.args
    assert key == "k"
    assert 0 < remaining.total_seconds() <= 600


def test_info_without_memory_tier(runner: CliRunner, mock_console_display: MagicMock):
    runner.invoke(app, ["set", "k", "v"])

    result = runner.invoke(app, ["--no-memory", "info", "k"])

    assert result.exit_code == 1


def test_real_console_output(runner: CliRunner):
    runner.invoke(app, ["set", "doc", '{"answer": 42}'])

    result = runner.invoke(app, ["get", "doc"])

    assert result.exit_code == 0
    assert '"answer": 42' in result.stdout


def test_keys_with_markup_brackets(runner: CliRunner):
    result = runner.invoke(app, ["set", "a[/b]", "1"])
    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    assert "a[/b]" in result.stdout

    assert runner.invoke(app, ["has", "a[/b]"]).exit_code == 0

    result = runner.invoke(app, ["info", "[red]k[/red]"])
    assert result.exit_code == 1
    assert "[red]k[/red]" in result.stdout

    runner.invoke(app, ["set", "[red]k[/red]", "2"])
    result = runner.invoke(app, ["info", "[red]k[/red]"])
    assert result.exit_code == 0
    assert "[red]k[/red]" in result.stdout
