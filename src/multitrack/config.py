import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name, default=False, environ=None):
    environ = os.environ if environ is None else environ
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUTHY


def env_int(name, default, environ=None):
    environ = os.environ if environ is None else environ
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r, not an integer; using %d", name, value, default)
        return default


@dataclass(frozen=True)
class Settings:
    scrape_enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    nav_timeout_ms: int = 30000
    settle_timeout_ms: int = 20000
    headless: bool = True
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls, environ=None):
        """Read settings once at startup; nothing downstream touches the environment."""
        environ = os.environ if environ is None else environ
        return cls(
            scrape_enabled=env_flag("USE_SCRAPE", False, environ),
            host=environ.get("HOST", "0.0.0.0"),
            port=env_int("PORT", 5000, environ),
            nav_timeout_ms=env_int("NAV_TIMEOUT_MS", 30000, environ),
            settle_timeout_ms=env_int("SETTLE_TIMEOUT_MS", 20000, environ),
            headless=env_flag("HEADLESS", True, environ),
            log_dir=environ.get("LOG_DIR") or None,
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            debug=env_flag("DEBUG", False, environ),
        )


def load_settings(env_file=".env"):
    """
    Settings from the environment, filled in from a .env file when one exists.
    Variables already set in the environment win over the file.
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.info("Loaded environment defaults from %s", env_path)
    return Settings.from_env()


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
