"""Entry points for presentation layers (CLI, dashboards, desktop shells).

Each call is self-contained: it reads settings, runs rocm-smi and returns
freshly built records. Nothing is cached between calls.
"""

from __future__ import annotations

from rocmwatch.backends.classify import GpuClassifier
from rocmwatch.backends.errors import MalformedDocumentError, RocmSmiError
from rocmwatch.backends.processes import fetch_process_list
from rocmwatch.backends.rocm_smi import RocmSmiClient
from rocmwatch.backends.snapshot import collect_full_snapshot
from rocmwatch.config import Settings, load_settings
from rocmwatch.models.device_models import (
    DeviceRecord,
    ProcessUsageRecord,
    ToolCheckResult,
)
from rocmwatch.utils.logger import Logger


def _prepare(settings: Settings | None) -> Settings:
    """Load settings and configure logging if the host application has not."""
    settings = settings or load_settings()
    if not Logger.is_configured():
        Logger.configure(level=settings.log_level, output="stderr")
    return settings


def get_full_snapshot(settings: Settings | None = None) -> list[DeviceRecord]:
    """Return the merged, classified device list.

    Raises:
        InvocationFailure: If rocm-smi cannot be run.
        MalformedDocumentError: If rocm-smi output has an unexpected shape.
    """
    settings = _prepare(settings)
    return collect_full_snapshot(
        RocmSmiClient.from_settings(settings),
        GpuClassifier.from_settings(settings),
    )


def get_process_list(settings: Settings | None = None) -> list[ProcessUsageRecord]:
    """Return processes currently holding GPU memory.

    An unparseable document yields an empty list; failing to run rocm-smi
    is still raised.

    Raises:
        InvocationFailure: If rocm-smi cannot be run.
    """
    settings = _prepare(settings)
    try:
        return fetch_process_list(RocmSmiClient.from_settings(settings))
    except MalformedDocumentError as e:
        Logger.get("api").warning(f"Ignoring process list: {e}")
        return []


def check_tool_availability(settings: Settings | None = None) -> ToolCheckResult:
    """Locate rocm-smi and read its version.

    Never raises for tool problems: a missing tool gives an empty result and
    an unreadable version gives ``version=None``.
    """
    settings = _prepare(settings)
    client = RocmSmiClient.from_settings(settings)

    path = client.locate()
    if path is None:
        Logger.get("api").debug(f"{client.executable} not found on PATH")
        return ToolCheckResult()

    try:
        version = RocmSmiClient(path, settings.timeout_seconds).query_version()
    except RocmSmiError as e:
        Logger.get("api").debug(f"Could not read rocm-smi version: {e}")
        version = None

    return ToolCheckResult(path=path, version=version)
