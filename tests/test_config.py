"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from doctorschedule.config import AppConfig, DefaultsConfig

VALID_CONFIG = """
timezone: America/New_York
store_path: data/schedules.json
booking_cutoff_hours: 4
defaults:
  start_time: "08:30"
  end_time: "12:00"
  max_appointments: 6
locations:
  - id: main
    name: Main Practice
    city: Berlin
  - id: north
    name: North Clinic
"""


def _write(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        """Test loading a complete config file."""
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        assert config.timezone == "America/New_York"
        assert config.booking_cutoff_hours == 4
        assert config.defaults.start_time == "08:30"
        assert config.defaults.max_appointments == 6
        assert [location.id for location in config.locations] == ["main", "north"]

    def test_relative_store_path_resolved_against_config(self, tmp_path):
        """Test that store_path is relative to the config file."""
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        assert config.store_path == tmp_path / "data" / "schedules.json"

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test that an empty file yields the default config."""
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config.timezone == "Europe/Berlin"
        assert config.defaults.start_time == "09:00"
        assert config.locations == []

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that broken YAML raises ValueError."""
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "locations: [unclosed"))

    def test_non_mapping_root(self, tmp_path):
        """Test that a list at the root is rejected."""
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))

    def test_unknown_timezone(self):
        """Test that unknown IANA names are rejected."""
        with pytest.raises(ValidationError):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_duplicate_location_ids(self):
        """Test that location ids must be unique."""
        with pytest.raises(ValidationError, match="Duplicate location id"):
            AppConfig(locations=[{"id": "a", "name": "One"}, {"id": "a", "name": "Two"}])

    def test_duplicate_location_names(self):
        """Test that location names must be unique, ignoring case."""
        with pytest.raises(ValidationError, match="Duplicate location name"):
            AppConfig(locations=[{"id": "a", "name": "Main"}, {"id": "b", "name": "MAIN"}])

    def test_find_and_resolve_location(self, tmp_path):
        """Test resolving by id and by name."""
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        assert config.resolve_location("north") == "north"
        assert config.resolve_location("main practice") == "main"
        assert config.find_location("Main Practice").display_name() == "Main Practice, Berlin"
        assert config.find_location("elsewhere") is None

        with pytest.raises(ValueError, match="Unknown location identifier"):
            config.resolve_location("elsewhere")


class TestDefaultsConfig:
    """Tests for DefaultsConfig."""

    def test_invalid_time(self):
        """Test that times must be HH:MM."""
        with pytest.raises(ValidationError):
            DefaultsConfig(start_time="9am")

    def test_end_before_start(self):
        """Test that the default window must open before it closes."""
        with pytest.raises(ValidationError, match="end_time must be later"):
            DefaultsConfig(start_time="17:00", end_time="09:00")

    def test_max_appointments_positive(self):
        """Test that max_appointments must be positive."""
        with pytest.raises(ValidationError):
            DefaultsConfig(max_appointments=0)
