# SPDX-License-Identifier: MIT

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from chronicle import configuration
from chronicle.terminal.app import app

runner = CliRunner()


def test_root_help_lists_command_groups() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for group in ("entry", "quick-log", "calendar", "settings", "auth", "sync"):
        assert group in result.stdout


def test_first_run_creates_local_store() -> None:
    result = runner.invoke(app, ["entry", "list"])

    assert result.exit_code == 0
    assert "No entries yet. Start recording your thoughts!" in result.stdout
    assert configuration.APP_CONFIG_PATH.is_file()
    assert configuration.DATA_STORE_META_PATH.is_file()


def test_add_list_show_delete() -> None:
    added = runner.invoke(
        app, ["entry", "add", "Went running", "--type", "habit", "--tags", "run,run"]
    )
    assert added.exit_code == 0
    assert "Entry saved!" in added.stdout

    listed = runner.invoke(app, ["e", "ls"])
    assert listed.exit_code == 0
    assert "Went running" in listed.stdout
    assert "run" in listed.stdout

    shown = runner.invoke(app, ["entry", "show", "1"])
    assert shown.exit_code == 0
    assert "Went running" in shown.stdout

    deleted = runner.invoke(app, ["entry", "delete", "1"], input="y\n")
    assert deleted.exit_code == 0
    assert "Are you sure you want to delete this entry?" in deleted.stdout
    assert "Entry deleted" in deleted.stdout

    relisted = runner.invoke(app, ["entry", "list"])
    assert "No entries yet" in relisted.stdout


def test_declined_delete_keeps_the_entry() -> None:
    runner.invoke(app, ["entry", "add", "Keep me"])
    runner.invoke(app, ["entry", "list"])

    result = runner.invoke(app, ["entry", "delete", "1"], input="n\n")

    assert "Operation cancelled." in result.stdout
    assert "Keep me" in runner.invoke(app, ["entry", "list"]).stdout


def test_blank_entry_is_rejected() -> None:
    result = runner.invoke(app, ["entry", "add", "   "])

    assert result.exit_code == 1
    assert "Please enter some content" in result.stdout


def test_unknown_type_is_a_usage_error() -> None:
    result = runner.invoke(app, ["entry", "add", "x", "--type", "dream"])

    assert result.exit_code == 2


def test_show_before_listing_is_a_usage_error() -> None:
    result = runner.invoke(app, ["entry", "show", "7"])

    assert result.exit_code == 2


def test_list_by_type() -> None:
    runner.invoke(app, ["entry", "add", "Idea", "-t", "thought"])
    runner.invoke(app, ["entry", "add", "Party", "-t", "event"])

    result = runner.invoke(app, ["entry", "list", "--type", "thought"])

    assert "Idea" in result.stdout
    assert "Party" not in result.stdout


def test_clear_with_yes() -> None:
    runner.invoke(app, ["entry", "add", "one"])

    result = runner.invoke(app, ["entry", "clear", "--yes"])

    assert result.exit_code == 0
    assert "All entries deleted" in result.stdout
    assert "No entries yet" in runner.invoke(app, ["entry", "list"]).stdout


def test_quick_log_options_and_logging() -> None:
    added = runner.invoke(app, ["quick-log", "add-option", "habit", "Cold shower"])
    assert added.exit_code == 0
    assert "Custom option added" in added.stdout

    duplicate = runner.invoke(app, ["q", "ao", "habit", "Cold shower"])
    assert duplicate.exit_code == 1
    assert "Option already exists" in duplicate.stdout

    options = runner.invoke(app, ["quick-log", "options", "habit"])
    assert "Cold shower" in options.stdout

    logged = runner.invoke(app, ["quick-log", "log", "habit", "Cold shower"])
    assert logged.exit_code == 0
    assert "habit logged: Cold shower" in logged.stdout

    listed = runner.invoke(app, ["entry", "list", "--type", "habit"])
    assert "Cold shower" in listed.stdout
    assert "quick-log" in listed.stdout


def test_quick_log_rejects_non_quick_log_types() -> None:
    result = runner.invoke(app, ["quick-log", "options", "thought"])

    assert result.exit_code == 2


def test_builtin_quick_log_options_cannot_be_removed() -> None:
    result = runner.invoke(app, ["quick-log", "remove-option", "food", "Lunch"])

    assert result.exit_code == 1


def test_calendar_month_and_day() -> None:
    month = runner.invoke(app, ["calendar", "show", "--month", "2024-03"])
    assert month.exit_code == 0
    assert "March 2024" in month.stdout
    assert "0 day(s) with entries" in month.stdout

    previous = runner.invoke(app, ["cal", "show", "-m", "2024-01", "-p", "1"])
    assert "December 2023" in previous.stdout

    day = runner.invoke(app, ["calendar", "day", "2024-03-01"])
    assert day.exit_code == 0
    assert "No entries for Friday, March 1, 2024" in day.stdout


def test_calendar_counts_todays_entries() -> None:
    runner.invoke(app, ["entry", "add", "today"])

    month = runner.invoke(app, ["calendar", "show"])
    day = runner.invoke(app, ["calendar", "day", "today"])

    assert "1 day(s) with entries" in month.stdout
    assert "today" in day.stdout


def test_bad_month_is_a_usage_error() -> None:
    result = runner.invoke(app, ["calendar", "show", "--month", "2024-13"])

    assert result.exit_code == 2


def test_settings_export_and_import(tmp_path: Path) -> None:
    runner.invoke(app, ["entry", "add", "Exported"])
    runner.invoke(app, ["settings", "set", "--no-dark-mode"])

    exported = runner.invoke(app, ["settings", "export", str(tmp_path)])
    assert exported.exit_code == 0
    [export_file] = tmp_path.glob("chronicle_backup_*.json")
    document = json.loads(export_file.read_text())
    assert [record["content"] for record in document["entries"]] == ["Exported"]
    assert document["settings"] == {"dark_mode": False}

    declined = runner.invoke(app, ["settings", "import", str(export_file)], input="n\n")
    assert "This will import 1 entries. Continue?" in declined.stdout
    assert "Operation cancelled." in declined.stdout

    imported = runner.invoke(app, ["settings", "import", str(export_file), "--yes"])
    assert imported.exit_code == 0
    assert "Data imported successfully" in imported.stdout
    assert runner.invoke(app, ["entry", "list"]).stdout.count("Exported") == 2


def test_import_of_invalid_file_fails(tmp_path: Path) -> None:
    bad_file = tmp_path / "bad.json"
    bad_file.write_text(json.dumps({"entries": [{"type": "event"}]}))

    result = runner.invoke(app, ["settings", "import", str(bad_file), "--yes"])

    assert result.exit_code == 1
    assert "Invalid data format" in result.stdout


def test_settings_view_reports_local_mode() -> None:
    result = runner.invoke(app, ["settings", "view"])

    assert result.exit_code == 0
    assert "local storage" in result.stdout


def test_config_view_and_set(tmp_path: Path) -> None:
    viewed = runner.invoke(app, ["config", "view"])
    assert viewed.exit_code == 0
    assert "remote_url" in viewed.stdout
    assert "Not configured" in viewed.stdout

    updated = runner.invoke(app, ["config", "set", "--log-level", "ERROR"])
    assert updated.exit_code == 0
    assert "log_level: ERROR" in configuration.APP_CONFIG_PATH.read_text()


def test_auth_status_in_local_mode() -> None:
    result = runner.invoke(app, ["auth", "status"])

    assert result.exit_code == 0
    assert "Remote service not configured" in result.stdout


def test_sign_in_without_remote_fails() -> None:
    result = runner.invoke(app, ["auth", "sign-in", "ada@example.test"], input="pw\n")

    assert result.exit_code == 1
    assert "Remote service not configured" in result.stdout


def test_sync_status_without_divergence() -> None:
    result = runner.invoke(app, ["sync", "status"])

    assert result.exit_code == 0
    assert "Local and remote storage have not diverged" in result.stdout


def test_no_header_option() -> None:
    with_header = runner.invoke(app, ["entry", "list"])
    without_header = runner.invoke(app, ["--no-header", "entry", "list"])

    assert "chronicle" in with_header.stdout
    assert "chronicle" not in without_header.stdout


def test_quick_log_only_logs_catalog_options() -> None:
    unknown = runner.invoke(app, ["quick-log", "log", "habit", "Juggling"])
    assert unknown.exit_code == 1
    assert "not a habit quick-log option" in unknown.stdout

    blank = runner.invoke(app, ["quick-log", "log", "habit", "   "])
    assert blank.exit_code == 1

    assert "No entries yet" in runner.invoke(app, ["entry", "list"]).stdout


def test_quick_log_by_option_number() -> None:
    logged = runner.invoke(app, ["quick-log", "log", "food", "1"])

    assert logged.exit_code == 0
    assert "food logged:" in logged.stdout


def test_settings_set_dark_mode() -> None:
    result = runner.invoke(app, ["settings", "set", "--dark-mode"])
    assert result.exit_code == 0
    assert "Settings updated" in result.stdout

    assert "✓ Enabled" in runner.invoke(app, ["settings", "view"]).stdout
