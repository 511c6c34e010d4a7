"""Runtime settings read from ROCMWATCH_* environment variables."""

from __future__ import annotations

from dataclasses import dataclass

from rocmwatch.models.constants import (
    DEFAULT_DISCRETE_POWER_WATTS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ROCM_SMI_NAME,
)
from rocmwatch.utils.env import EnvVarTypeError, get_env
from rocmwatch.utils.logger import LogLevel


@dataclass(frozen=True)
class Settings:
    """Collector settings.

    Attributes:
        log_level: Logger level name.
        smi_executable: rocm-smi executable name or absolute path.
        timeout_seconds: Per-invocation timeout, None for no timeout.
        interval_seconds: Polling interval for the telemetry daemon.
        extra_integrated_keywords: Codename fragments added to the
            built-in integrated-GPU keywords.
        discrete_power_watts: Average power above which an unclassified
            GPU is treated as discrete.
    """

    log_level: str = "INFO"
    smi_executable: str = ROCM_SMI_NAME
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    extra_integrated_keywords: tuple[str, ...] = ()
    discrete_power_watts: float = DEFAULT_DISCRETE_POWER_WATTS


def load_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        EnvVarTypeError: If a numeric variable cannot be parsed or the log
            level is not a known level name.
    """
    log_level = get_env("ROCMWATCH_LOG_LEVEL", default="INFO").upper()
    try:
        LogLevel(log_level)
    except ValueError as e:
        raise EnvVarTypeError("ROCMWATCH_LOG_LEVEL", log_level, LogLevel) from e

    timeout = get_env("ROCMWATCH_TIMEOUT", default=DEFAULT_TIMEOUT_SECONDS, as_type=float)
    keywords = get_env("ROCMWATCH_IGPU_KEYWORDS", default=[], as_type=list)

    return Settings(
        log_level=log_level,
        smi_executable=get_env("ROCMWATCH_SMI", default=ROCM_SMI_NAME),
        timeout_seconds=timeout if timeout > 0 else None,
        interval_seconds=get_env(
            "ROCMWATCH_INTERVAL", default=DEFAULT_INTERVAL_SECONDS, as_type=float
        ),
        extra_integrated_keywords=tuple(k.lower() for k in keywords),
        discrete_power_watts=get_env(
            "ROCMWATCH_DISCRETE_POWER_W",
            default=DEFAULT_DISCRETE_POWER_WATTS,
            as_type=float,
        ),
    )
