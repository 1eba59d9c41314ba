"""Platform abstraction layer."""

from .process import (
    ProcessError,
    env_with,
    run,
)

__all__ = [
    # process
    "ProcessError",
    "env_with",
    "run",
]
