"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class GameConfig:
    """Table defaults."""

    default_bet_amount: Decimal = field(
        default_factory=lambda: Decimal(os.getenv("BJ_DEFAULT_BET", "5.00"))
    )
    history_size: int = field(
        default_factory=lambda: int(os.getenv("BJ_HISTORY_SIZE", "10"))
    )


@dataclass(frozen=True)
class ServiceConfig:
    """Provably fair / account service connection."""

    base_url: str = field(
        default_factory=lambda: os.getenv("FAIR_API_URL", "http://localhost:3000")
    )
    token: str | None = field(default_factory=lambda: os.getenv("FAIR_API_TOKEN"))
    timeout: float = field(
        default_factory=lambda: float(os.getenv("FAIR_API_TIMEOUT", "10"))
    )
    require_session: bool = field(
        default_factory=lambda: _env_flag("FAIR_REQUIRE_SESSION", "true")
    )

    @property
    def headers(self) -> dict[str, str]:
        """Build request headers, with bearer auth when a token is set."""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))

    game: GameConfig = field(default_factory=GameConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def configure_logging(cfg: LoggingConfig | None = None) -> None:
    """Apply the configured level and format to the root logger."""
    cfg = cfg or config.logging
    logging.basicConfig(level=getattr(logging, cfg.level, logging.INFO), format=cfg.format)


# Global configuration instance
config = AppConfig()
