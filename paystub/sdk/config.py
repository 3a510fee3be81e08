"""Configuration management for Paystub Calc.

Configuration lives in a single settings.json file:
   - tax_rules_dir: directory of replacement tax rule YAML files
   - default_output_format: CLI output preference (table, json, csv)

Config directory resolution:
1. PAYSTUB_CONFIG_PATH environment variable (if set)
2. ~/.config/paystub-calc/ (XDG_CONFIG_HOME fallback)

Tax rules resolution:
1. settings.json "tax_rules_dir" key (if set via CLI)
2. tax_rules/ bundled with the package
"""

import json
import logging
import os
from pathlib import Path
from typing import Any


APP_NAME = "paystub-calc"
SETTINGS_FILENAME = "settings.json"
BUNDLED_TAX_RULES_DIR = Path(__file__).parent.parent / "tax_rules"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class ConfigError(Exception):
    """Raised when settings.json holds an unusable value."""
    pass


def configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYSTUB_CONFIG_PATH environment variable
    2. ~/.config/paystub-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAYSTUB_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        ConfigError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        try:
            settings = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {settings_file}: {e}")

    if not isinstance(settings, dict):
        raise ConfigError(f"{settings_file} must contain a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_tax_rules_dir() -> Path:
    """Get the directory holding tax rule YAML files.

    Returns:
        The configured tax_rules_dir, or the bundled tax_rules/ directory

    Raises:
        ConfigError: If tax_rules_dir is set but is not a directory
    """
    custom = get_setting("tax_rules_dir")
    if not custom:
        return BUNDLED_TAX_RULES_DIR

    path = Path(custom).expanduser()
    if not path.is_dir():
        raise ConfigError(
            f"tax_rules_dir is not a directory: {path}\n\n"
            f"Update with: paystub settings tax-rules-dir /path/to/rules\n"
            f"Or revert with: paystub settings tax-rules-dir --clear"
        )
    return path
