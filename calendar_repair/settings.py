"""Job configuration management."""

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


_SCHEME_PATTERN = re.compile(r"^https?://")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def derive_instance_suffix(wwwroot: str) -> str:
    """Strip the http(s) scheme from the public base URL."""
    return _SCHEME_PATTERN.sub("", wwwroot)


@dataclass(frozen=True)
class Settings:
    """Job settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./calendar.db"
    fetch_size: int = 500

    # Instance
    wwwroot: str = "http://localhost"
    instance_suffix: Optional[str] = None  # Overrides the suffix derived from wwwroot

    # Clean-up
    delete_batch_size: int = 1000
    progress_every: int = 100
    progress_width: int = 50

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.fetch_size < 1:
            raise ValueError("FETCH_SIZE must be greater than or equal to 1")
        if self.delete_batch_size < 1:
            raise ValueError("DELETE_BATCH_SIZE must be greater than or equal to 1")
        if self.progress_every < 1:
            raise ValueError("PROGRESS_EVERY must be greater than or equal to 1")
        if self.progress_width < 1:
            raise ValueError("PROGRESS_WIDTH must be greater than or equal to 1")
        if self.instance_suffix is not None and not self.instance_suffix:
            raise ValueError("INSTANCE_SUFFIX must not be empty when set")
        if self.log_format not in ("json", "text"):
            raise ValueError(f"LOG_FORMAT must be 'json' or 'text', got {self.log_format!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

    @property
    def instance_suffix_or_default(self) -> str:
        """Explicit instance suffix, or the scheme-stripped wwwroot."""
        if self.instance_suffix:
            return self.instance_suffix
        return derive_instance_suffix(self.wwwroot)


def load_settings_from_env() -> Settings:
    """Load settings from environment variables."""
    load_dotenv()

    def get_int(key: str, default: int) -> int:
        return int(os.getenv(key, str(default)))

    return Settings(
        # Database
        database_url=os.getenv("DATABASE_URL", "sqlite:///./calendar.db"),
        fetch_size=get_int("FETCH_SIZE", 500),

        # Instance
        wwwroot=os.getenv("WWWROOT", "http://localhost"),
        instance_suffix=os.getenv("INSTANCE_SUFFIX") or None,

        # Clean-up
        delete_batch_size=get_int("DELETE_BATCH_SIZE", 1000),
        progress_every=get_int("PROGRESS_EVERY", 100),
        progress_width=get_int("PROGRESS_WIDTH", 50),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "text"),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()


def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    get_settings.cache_clear()
