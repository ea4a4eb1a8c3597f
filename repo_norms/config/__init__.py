"""Configuration management module for the repository norms analyzer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .fields import (
    DEFAULT_FIELDS,
    DEFAULT_IGNORE_FIELDS,
    FieldConfig,
    FieldKind,
    FieldSpec,
)
from .loader import load_app_config, load_config, parse_app_config, validate_config_file
from .models import (
    AppConfig,
    DeviationSettings,
    GitHubSettings,
    LogFormat,
    LogLevel,
    LoggingConfig,
    ReportSettings,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_app_config",
    "parse_app_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "DeviationSettings",
    "ReportSettings",
    "GitHubSettings",
    "LoggingConfig",
    "EnvironmentConfig",
    # Field table
    "FieldConfig",
    "FieldKind",
    "FieldSpec",
    "DEFAULT_FIELDS",
    "DEFAULT_IGNORE_FIELDS",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
