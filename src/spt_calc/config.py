"""Configuration management for the SPT calculator."""

import json
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "SPT_CALC_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".spt-calc"

# Supported export formats
EXPORT_FORMAT_MARKDOWN = "md"
EXPORT_FORMAT_PDF = "pdf"

# Tax years the calculator accepts
MIN_TAX_YEAR = 1900
MAX_TAX_YEAR = 2100


def _default_config_dir() -> Path:
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return DEFAULT_CONFIG_DIR


class Config:
    """Manages application configuration."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or _default_config_dir()
        self.config_file = self.config_dir / "config.json"
        self._config: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from file."""
        if self.config_file.exists():
            with open(self.config_file) as f:
                self._config = {**self._default_config(), **json.load(f)}
        else:
            self._config = self._default_config()

    def _save(self) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._config, f, indent=2)

    def _default_config(self) -> dict[str, Any]:
        """Return default configuration."""
        return {
            "tax_year": datetime.now().year,
            "reference_date": None,  # ISO date pinning "today" for open-ended periods
            "export_format": EXPORT_FORMAT_MARKDOWN,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        self._config[key] = value
        self._save()

    @property
    def tax_year(self) -> int:
        """Get the default tax year."""
        return int(self._config.get("tax_year", datetime.now().year))

    @tax_year.setter
    def tax_year(self, year: int) -> None:
        """Set the default tax year."""
        year = int(year)
        if not MIN_TAX_YEAR <= year <= MAX_TAX_YEAR:
            raise ValueError(f"Tax year must be between {MIN_TAX_YEAR} and {MAX_TAX_YEAR}")
        self.set("tax_year", year)

    @property
    def reference_date(self) -> date | None:
        """Get the pinned reference date, if any."""
        value = self._config.get("reference_date")
        if not value:
            return None
        return date.fromisoformat(value)

    @reference_date.setter
    def reference_date(self, value: date | str | None) -> None:
        """Pin (or clear with None) the date used as "today"."""
        if value is None or value == "":
            self.set("reference_date", None)
            return
        if isinstance(value, str):
            try:
                value = date.fromisoformat(value)
            except ValueError:
                raise ValueError(f"Invalid reference date: {value} (expected YYYY-MM-DD)")
        self.set("reference_date", value.isoformat())

    @property
    def export_format(self) -> str:
        """Get the default export format."""
        return self._config.get("export_format", EXPORT_FORMAT_MARKDOWN)

    @export_format.setter
    def export_format(self, fmt: str) -> None:
        """Set the default export format."""
        fmt = fmt.lower()
        if fmt not in (EXPORT_FORMAT_MARKDOWN, EXPORT_FORMAT_PDF):
            raise ValueError(f"Invalid export format: {fmt}")
        self.set("export_format", fmt)

    def today(self) -> date:
        """The date open-ended periods run through: pinned reference date or the system date."""
        return self.reference_date or date.today()

    def update(self, key: str, value: str) -> None:
        """
        Set a known key from its string form, validating the value.

        Args:
            key: Configuration key (tax_year, reference_date, export_format)
            value: Raw value as typed by the user

        Raises:
            ValueError: If the key is unknown or the value is invalid
        """
        if key == "tax_year":
            try:
                year = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid tax year: {value}") from e
            self.tax_year = year
        elif key == "reference_date":
            self.reference_date = None if value.lower() in ("", "none", "today") else value
        elif key == "export_format":
            self.export_format = value
        else:
            raise ValueError(f"Unknown configuration key: {key}")


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next access reloads it."""
    global _config
    _config = None
