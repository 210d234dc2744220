"""Configuration system for the mq command-line tool."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """mq Tool Configuration."""

    # Queue creation defaults
    default_max_messages: int = Field(
        default=10,
        ge=1,
        description="Maximum number of messages for newly created queues",
    )
    default_max_message_size: int = Field(
        default=1024,
        ge=1,
        description="Message size in bytes for newly created queues",
    )
    create_mode: int = Field(
        default=0o644,
        ge=0,
        le=0o777,
        description="Permission bits for newly created queues",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level when --verbose is not given (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit diagnostics as JSON lines on stderr",
    )

    model_config = {
        "env_prefix": "MQ_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Settings singleton with dependency injection support
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Returns:
        The Settings instance.

    Example:
        from mq_tool.config import get_settings
        settings = get_settings()
        print(settings.default_max_message_size)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing).

    Args:
        new_settings: The new Settings instance to use.
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None

