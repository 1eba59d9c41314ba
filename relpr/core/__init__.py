"""Core domain types and logic."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .errors import ErrorCode
from .github import GitHubContext, load_github_context
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # github
    "GitHubContext",
    "load_github_context",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
