"""
Configuration management with environment variables + .env.local fallback.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid {name}={value!r}, using {default}")
        return default


@dataclass
class Settings:
    """
    Application settings.

    Priority: Environment Variable > .env.local > .env > Default
    """
    # Apps Script web app serving the spreadsheet
    apps_script_url: str = ""
    use_apps_script: bool = True
    request_timeout: float = 15.0

    # Local cache
    cache_path: str = ".ballotsync/cache.json"

    # Connectivity
    connectivity_probe_url: str = ""
    probe_timeout: float = 3.0

    # Slack alerts
    slack_webhook_url: str = ""
    slack_channel: str = "#ballotsync-alerts"

    # Runtime
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            apps_script_url=os.getenv("APPS_SCRIPT_URL", ""),
            use_apps_script=_env_bool("USE_APPS_SCRIPT", True),
            request_timeout=_env_float("REQUEST_TIMEOUT", 15.0),
            cache_path=os.getenv("CACHE_PATH", ".ballotsync/cache.json"),
            connectivity_probe_url=os.getenv("CONNECTIVITY_PROBE_URL", ""),
            probe_timeout=_env_float("PROBE_TIMEOUT", 3.0),
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL", ""),
            slack_channel=os.getenv("SLACK_CHANNEL", "#ballotsync-alerts"),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    # Placeholder values that indicate unconfigured settings
    PLACEHOLDER_VALUES = {
        "https://script.google.com/macros/s/YOUR_DEPLOYMENT_ID/exec",
        "YOUR_APPS_SCRIPT_URL",
    }

    def _is_placeholder(self, value: str) -> bool:
        return value in self.PLACEHOLDER_VALUES

    def is_configured(self) -> bool:
        """Check if the Apps Script endpoint is enabled and has a real URL."""
        url = self.apps_script_url.strip()
        return bool(self.use_apps_script and url and not self._is_placeholder(url))

    def config_status(self) -> bool:
        """Log whether the endpoint is configured and return the result."""
        if not self.is_configured():
            logger.warning("Apps Script endpoint not configured. Using cached or default data.")
            return False

        logger.info("Apps Script endpoint configured.")
        return True

    def validate(self) -> list[str]:
        """
        Validate settings.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.use_apps_script:
            errors.append("USE_APPS_SCRIPT is disabled")
        elif not self.apps_script_url or self._is_placeholder(self.apps_script_url):
            errors.append("APPS_SCRIPT_URL is required")
        elif not self.apps_script_url.startswith(("http://", "https://")):
            errors.append("APPS_SCRIPT_URL must be an http(s) URL")

        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        if not self.cache_path:
            errors.append("CACHE_PATH is required")

        return errors


def _load_dotenv():
    """Load .env.local file if it exists."""
    # Try .env.local first, then .env
    env_local = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env.local")
    env_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")

    if os.path.exists(env_local):
        load_dotenv(env_local)
        logger.debug(f"Loaded settings from {env_local}")
    elif os.path.exists(env_file):
        load_dotenv(env_file)
        logger.debug(f"Loaded settings from {env_file}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings (cached)."""
    _load_dotenv()
    logger.info("Loading settings from environment")
    return Settings.from_environment()
