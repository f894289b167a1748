"""
Smoke tests for the Typer CLI.
"""

import json

import pendulum
import pytest
from typer.testing import CliRunner

from doctorschedule.cli.app import app

runner = CliRunner()

CONFIG = """
timezone: Europe/Berlin
store_path: schedules.json
locations:
  - id: main
    name: Main Practice
    city: Berlin
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_list_locations(config_path):
    """Configured locations are listed."""
    result = runner.invoke(app, ["list-locations", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "Main Practice" in result.output


def test_preview_weekly_does_not_store(config_path):
    """A preview prints the plan and leaves the store untouched."""
    result = runner.invoke(
        app,
        ["preview", "-l", "main", "--doctor", "dr-house", "--day", "monday", "--config", str(config_path)],
    )

    assert result.exit_code == 0
    assert "No conflicts found." in result.output
    assert not (config_path.parent / "schedules.json").exists()


def test_create_then_create_again_skips_conflicts(config_path):
    """Creating the same schedules twice stores them only once."""
    next_year = pendulum.now("Europe/Berlin").add(years=1).format("YYYY-MM-DD")
    args = [
        "create", "-l", "Main Practice", "--doctor", "dr-house", "--date", next_year,
        "--start", "14:00", "--end", "18:00", "--config", str(config_path),
    ]

    first = runner.invoke(app, args)
    second = runner.invoke(app, args)

    assert first.exit_code == 0
    assert "14:00 - 18:00" in first.output
    assert second.exit_code == 0
    assert "Skipped 1 schedules due to conflicts." in second.output

    stored = json.loads((config_path.parent / "schedules.json").read_text(encoding="utf-8"))
    assert len(stored) == 1
    assert stored[0]["location_id"] == "main"


def test_date_and_day_are_exclusive(config_path):
    """Passing both --date and --day is an error."""
    result = runner.invoke(
        app,
        [
            "preview", "-l", "main", "--doctor", "dr-house", "--date", "2030-01-01",
            "--day", "monday", "--config", str(config_path),
        ],
    )

    assert result.exit_code == 1
    assert "Error" in result.output


def test_unknown_location(config_path):
    """Unknown locations are reported instead of raising."""
    result = runner.invoke(
        app,
        ["preview", "-l", "nowhere", "--doctor", "dr-house", "--day", "monday", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "Unknown location identifier" in result.output


def test_upcoming_with_empty_store(config_path):
    """An empty store shows no schedules."""
    result = runner.invoke(app, ["upcoming", "--bookable", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "no schedules" in result.output


def test_upcoming_skips_non_object_rows(config_path):
    """Rows that are not JSON objects are ignored instead of crashing."""
    (config_path.parent / "schedules.json").write_text("[null, 7]", encoding="utf-8")

    result = runner.invoke(app, ["upcoming", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "no schedules" in result.output


def test_zero_max_appointments_is_rejected(config_path):
    """An explicit -m 0 is validated, not replaced by the default."""
    result = runner.invoke(
        app,
        ["preview", "-l", "main", "--doctor", "dr-house", "--day", "monday", "-m", "0", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "Error" in result.output
    assert not (config_path.parent / "schedules.json").exists()


def test_empty_start_time_is_rejected(config_path):
    """An explicit empty --start is validated, not replaced by the default."""
    result = runner.invoke(
        app,
        ["preview", "-l", "main", "--doctor", "dr-house", "--day", "monday", "--start", "", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "HH:MM" in result.output


def test_missing_config(tmp_path):
    """A missing config file exits with an error."""
    result = runner.invoke(app, ["next", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1


def test_version():
    """The version command prints the package version."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
