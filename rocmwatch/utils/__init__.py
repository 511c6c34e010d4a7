"""rocmwatch utilities - logging and environment helpers."""

from rocmwatch.utils.env import (
    EnvVarError,
    EnvVarTypeError,
    get_env,
)
from rocmwatch.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "get_env",
    # Logger
    "LogLevel",
    "Logger",
    "LoggerNotConfiguredError",
]
