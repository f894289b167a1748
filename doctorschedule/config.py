"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.time_parsing import is_valid_time, parse_time


class DefaultsConfig(BaseModel):
    """Default values for new schedules."""
    start_time: str = "09:00"
    end_time: str = "17:00"
    max_appointments: int = 10

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate the value is an HH:MM time of day."""
        if not is_valid_time(v):
            raise ValueError(f"Time must be formatted as HH:MM, got {v!r}")
        return v

    @field_validator("max_appointments")
    @classmethod
    def validate_max_appointments(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_appointments must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_times_order(self) -> "DefaultsConfig":
        """Ensure the default window opens before it closes."""
        if parse_time(self.end_time) <= parse_time(self.start_time):
            raise ValueError("end_time must be later than start_time")
        return self


class Location(BaseModel):
    """A practice location where a doctor holds schedules."""
    id: str
    name: str
    address: str = ""
    city: str = ""

    def display_name(self) -> str:
        """Get display name."""
        return f"{self.name}, {self.city}" if self.city else self.name


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    store_path: Path = Path("schedules.json")
    booking_cutoff_hours: int = 6
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    locations: List[Location] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("booking_cutoff_hours")
    @classmethod
    def validate_cutoff(cls, value: int) -> int:
        if value < 0:
            raise ValueError("booking_cutoff_hours must not be negative")
        return value

    @field_validator("locations")
    @classmethod
    def validate_locations(cls, value: List[Location]) -> List[Location]:
        """Ensure location ids and names are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for location in value:
            name_key = location.name.lower()
            if location.id in seen_ids:
                raise ValueError(f"Duplicate location id detected: {location.id}")
            if name_key in seen_names:
                raise ValueError(f"Duplicate location name detected: {location.name}")
            seen_ids.add(location.id)
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``store_path`` is resolved against the config file's
        directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.store_path.is_absolute():
            config.store_path = config_path.parent / config.store_path
        return config

    def find_location(self, identifier: str) -> Location | None:
        """Find a location by id or by (case-insensitive) name."""
        for location in self.locations:
            if location.id == identifier or location.name.lower() == identifier.lower():
                return location
        return None

    def resolve_location(self, identifier: str) -> str:
        """
        Resolve a location identifier (id or name) to its id.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        location = self.find_location(identifier)
        if location:
            return location.id

        raise ValueError(
            f"Unknown location identifier: '{identifier}'. "
            f"Use a configured location id or name."
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
