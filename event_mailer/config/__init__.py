"""Configuration management module for the event mailer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config
from .models import (
    DEFAULT_SPORTS,
    AppConfig,
    DigitGrouping,
    EmailConfig,
    EventConfig,
    FeeConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "EventConfig",
    "FeeConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_SPORTS",
    # Enums
    "DigitGrouping",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
