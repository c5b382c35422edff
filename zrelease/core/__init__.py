"""Core types shared by every layer."""

from .config import (
    ConfigError,
    ReleaseConfig,
    ToolCommands,
    load_config,
    load_config_or_default,
    with_env_overrides,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "ReleaseConfig",
    "ToolCommands",
    "load_config",
    "load_config_or_default",
    "with_env_overrides",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
