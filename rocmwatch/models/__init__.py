"""Pydantic models for structured output."""

from rocmwatch.models.constants import GpuKind
from rocmwatch.models.device_models import (
    DeviceRecord,
    ProcessUsageRecord,
    ToolCheckResult,
    ToolVersion,
)

__all__ = [
    "DeviceRecord",
    "GpuKind",
    "ProcessUsageRecord",
    "ToolCheckResult",
    "ToolVersion",
]
