"""Environment-backed settings for pipeline runs."""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_PRIOR_DAYS = 7
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    prior_days: int = DEFAULT_PRIOR_DAYS
    log_level: str = DEFAULT_LOG_LEVEL

    def updated_after(self, now: datetime | None = None) -> datetime:
        """Cutoff for showing closed items: only recently updated ones pass."""
        current = now or datetime.now(timezone.utc)
        return current - timedelta(days=self.prior_days)


def load_settings() -> Settings:
    load_dotenv()
    raw_days = os.getenv("ISSUE_GRAPH_PRIOR_DAYS")
    prior_days = DEFAULT_PRIOR_DAYS
    if raw_days:
        try:
            prior_days = int(raw_days)
        except ValueError as error:
            raise ConfigError(f"ISSUE_GRAPH_PRIOR_DAYS must be an integer, got {raw_days!r}") from error
        if prior_days < 0:
            raise ConfigError("ISSUE_GRAPH_PRIOR_DAYS must not be negative")

    log_level = os.getenv("ISSUE_GRAPH_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"ISSUE_GRAPH_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    return Settings(prior_days=prior_days, log_level=log_level)
