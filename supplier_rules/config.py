"""Configuration management using pydantic-settings."""
import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import structlog


class EngineSettings(BaseSettings):
    """Rule interpreter settings loaded from environment variables.

    All settings prefixed with RULES_ (e.g., RULES_LOG_LEVEL=DEBUG)
    """

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (false = human readable console output)"
    )
    default_culture: str = Field(
        default="invariant",
        description="Formatting context handed to every cell context"
    )
    trace_actions: bool = Field(
        default=False,
        description="Record one trace line per executed action for every rule"
    )

    model_config = SettingsConfigDict(
        env_prefix="RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = EngineSettings()


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog on top of the standard library logger."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_json)
