"""Core domain types: results, exit codes, configuration."""

from .config import BuilderConfig, ConfigError, apply_ci_override, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "BuilderConfig",
    "ConfigError",
    "apply_ci_override",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
