"""Configuration management for the studio payroll engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from studio_payroll.months import Clock


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    timezone: str
    payment_day: int
    host: str
    port: int
    debug: bool
    log_level: str

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    def clock(self) -> Clock:
        """Wall clock in the studio timezone.

        The current payroll month is decided by this clock, so a studio east
        of UTC rolls over to the new month at its own midnight.
        """
        tz = ZoneInfo(self.timezone)
        return lambda: datetime.now(tz)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        payment_day = int(os.getenv("PAYMENT_DAY", "5"))
        if not 1 <= payment_day <= 31:
            raise ValueError(f"PAYMENT_DAY must be between 1 and 31, got {payment_day}")

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./studio_payroll.db",
            ),
            timezone=os.getenv("STUDIO_TIMEZONE", "UTC"),
            payment_day=payment_day,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
