"""
Configuration management for Financial Echo Collector.

Loads settings from JSON templates and environment variables.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any


WEEKDAYS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


@dataclass
class Config:
    """Application configuration."""

    # Database
    database_path: str = "data/echoes.db"

    # Export
    export_dir: str = "data/exports"

    # Weekly reflection reminder (from settings JSON)
    reminder_enabled: bool = True
    reminder_weekday: str = "sunday"
    reminder_hour: int = 10

    # Timezone
    timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"

    # Settings template name
    settings_template: str = "default"

    @classmethod
    def _load_json(cls, json_path: Path) -> Dict[str, Any]:
        """Load JSON configuration file."""
        if not json_path.exists():
            raise FileNotFoundError(f"Config file not found: {json_path}")

        with open(json_path, 'r') as f:
            return json.load(f)

    @classmethod
    def from_env(cls, config_dir: Optional[Path] = None) -> "Config":
        """Load configuration from JSON template + environment variables."""
        config_dir = Path(config_dir) if config_dir else Path("config")

        template_name = os.getenv("SETTINGS_TEMPLATE", "default")
        template_path = config_dir / "settings" / f"{template_name}.json"
        settings = cls._load_json(template_path)

        reminder = settings.get("reminder", {})

        weekday = str(reminder.get("weekday", "sunday")).lower()
        if weekday not in WEEKDAYS:
            raise ValueError(f"Invalid reminder weekday in {template_path}: {weekday}")

        hour = int(reminder.get("hour", 10))
        if not 0 <= hour <= 23:
            raise ValueError(f"Invalid reminder hour in {template_path}: {hour}")

        config = cls(
            database_path=os.getenv(
                "ECHO_DB_PATH", settings.get("database_path", "data/echoes.db")
            ),
            export_dir=os.getenv(
                "EXPORT_DIR", settings.get("export_dir", "data/exports")
            ),

            # From settings JSON
            reminder_enabled=bool(reminder.get("enabled", True)),
            reminder_weekday=weekday,
            reminder_hour=hour,

            timezone=os.getenv("TIMEZONE", "UTC"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),

            settings_template=template_name,
        )

        return config

    def get_settings_summary(self) -> str:
        """Get a summary of current settings."""
        reminder = (
            f"{self.reminder_weekday.capitalize()} at {self.reminder_hour:02d}:00"
            if self.reminder_enabled
            else "Off"
        )
        return f"""Settings: {self.settings_template}

Storage:
  Database: {self.database_path}
  Exports: {self.export_dir}

Reflection Reminder: {reminder}
Timezone: {self.timezone}
Log Level: {self.log_level}
"""
