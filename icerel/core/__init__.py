"""Core types: results, exit codes, configuration."""

from .config import ConfigError, ReleaseConfig, load_config, load_project_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_project_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
