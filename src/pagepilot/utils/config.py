"""Configuration management for PagePilot."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from pagepilot.utils.exceptions import ConfigurationError

WAIT_UNTIL_CHOICES = ("load", "domcontentloaded", "networkidle", "commit")
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class AppConfig:
    """Application configuration."""

    host: str = "127.0.0.1"
    port: int = 3000
    headless: bool = False
    cdp_url: str | None = None
    stealth: bool = False
    navigation_timeout: int = 60000  # ms
    network_idle_timeout: int = 30000  # ms
    settle_delay: int = 5000  # ms
    click_timeout: int = 15000  # ms
    key_delay: int = 100  # ms
    wait_until: str = "domcontentloaded"
    log_level: str = "INFO"


class ConfigLoader:
    """Loads configuration from environment variables."""

    @staticmethod
    def load() -> AppConfig:
        """Load configuration from environment.

        Raises:
            ConfigurationError: If a value is present but invalid.
        """
        load_dotenv()  # Load .env file if present

        wait_until = os.environ.get("PAGEPILOT_WAIT_UNTIL", "domcontentloaded")
        if wait_until not in WAIT_UNTIL_CHOICES:
            raise ConfigurationError(
                f"Invalid value for PAGEPILOT_WAIT_UNTIL: '{wait_until}' "
                f"(expected one of {', '.join(WAIT_UNTIL_CHOICES)})"
            )

        log_level = os.environ.get("PAGEPILOT_LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVEL_CHOICES:
            raise ConfigurationError(
                f"Invalid value for PAGEPILOT_LOG_LEVEL: '{log_level}'"
            )

        return AppConfig(
            host=os.environ.get("PAGEPILOT_HOST", "127.0.0.1"),
            port=ConfigLoader._get_int_env("PAGEPILOT_PORT", 3000),
            headless=ConfigLoader._get_bool_env("PAGEPILOT_HEADLESS", False),
            cdp_url=os.environ.get("PAGEPILOT_CDP_URL") or None,
            stealth=ConfigLoader._get_bool_env("PAGEPILOT_STEALTH", False),
            navigation_timeout=ConfigLoader._get_int_env(
                "PAGEPILOT_NAVIGATION_TIMEOUT", 60000
            ),
            network_idle_timeout=ConfigLoader._get_int_env(
                "PAGEPILOT_NETWORK_IDLE_TIMEOUT", 30000
            ),
            settle_delay=ConfigLoader._get_int_env("PAGEPILOT_SETTLE_DELAY", 5000),
            click_timeout=ConfigLoader._get_int_env("PAGEPILOT_CLICK_TIMEOUT", 15000),
            key_delay=ConfigLoader._get_int_env("PAGEPILOT_KEY_DELAY", 100),
            wait_until=wait_until,
            log_level=log_level,
        )

    @staticmethod
    def _get_int_env(name: str, default: int) -> int:
        """Get an integer environment variable.

        Args:
            name: The environment variable name.
            default: The default value if not set.

        Returns:
            The integer value.

        Raises:
            ConfigurationError: If the value is not a valid integer.
        """
        value = os.environ.get(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for {name}: '{value}' is not a valid integer"
            ) from e

    @staticmethod
    def _get_bool_env(name: str, default: bool) -> bool:
        """Get a boolean environment variable.

        Raises:
            ConfigurationError: If the value is not a recognized boolean.
        """
        value = os.environ.get(name)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"Invalid value for {name}: '{value}' is not a valid boolean"
        )
