"""Pydantic models for rocm-smi devices, GPU processes and tool metadata."""

from __future__ import annotations

import json
import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from rocmwatch.models.constants import (
    FIELD_AVG_POWER,
    FIELD_CARD_SERIES,
    FIELD_CARD_VENDOR,
    FIELD_DEVICE_NAME,
    FIELD_FAN_RPM,
    FIELD_GFX_VERSION,
    FIELD_GPU_USE,
    FIELD_MAX_POWER,
    FIELD_MCLK,
    FIELD_MEMORY_VENDOR,
    FIELD_SCLK,
    FIELD_SMI_LIB_VERSION,
    FIELD_SMI_VERSION,
    FIELD_SUBSYSTEM_ID,
    FIELD_TEMP_EDGE,
    FIELD_TEMP_JUNCTION,
    FIELD_TEMP_MEMORY,
    FIELD_VRAM_ALLOCATED,
    UNKNOWN_PROCESS_STATE,
    GpuKind,
)
from rocmwatch.utils.coercion import coerce_float, coerce_str, coerce_uint

OptionalFloat = Annotated[float | None, BeforeValidator(coerce_float)]
OptionalUInt = Annotated[int | None, BeforeValidator(coerce_uint)]
OptionalStr = Annotated[str | None, BeforeValidator(coerce_str)]

_PID_KEY = re.compile(r"PID([0-9]+)")
_UINT_TOKEN = re.compile(r"[0-9]+")


def _parse_token(token: str) -> int | None:
    return int(token) if _UINT_TOKEN.fullmatch(token) else None


class DeviceRecord(BaseModel):
    """One GPU as reported by rocm-smi.

    Every attribute is optional: rocm-smi output depends on the tool release
    and the hardware, and a device that reveals nothing is still a device.
    Fields are bound to the tool's own field names through aliases.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    device_key: str | None = Field(
        None, description="Top-level document key (e.g., 'card0')"
    )

    # Identity
    product: OptionalStr = Field(None, alias=FIELD_DEVICE_NAME)
    card_series: OptionalStr = Field(None, alias=FIELD_CARD_SERIES)
    subsystem: OptionalStr = Field(None, alias=FIELD_SUBSYSTEM_ID)
    vendor: OptionalStr = Field(None, alias=FIELD_CARD_VENDOR)
    gfx_version: OptionalStr = Field(None, alias=FIELD_GFX_VERSION)

    # Thermal, degrees C
    temp_edge: OptionalFloat = Field(None, alias=FIELD_TEMP_EDGE)
    temp_hotspot: OptionalFloat = Field(None, alias=FIELD_TEMP_JUNCTION)
    temp_mem: OptionalFloat = Field(None, alias=FIELD_TEMP_MEMORY)

    # Clocks, MHz
    sclk_mhz: OptionalUInt = Field(None, alias=FIELD_SCLK)
    mclk_mhz: OptionalUInt = Field(None, alias=FIELD_MCLK)

    # VRAM, derived from byte counts after the merge
    vram_total_mb: int | None = Field(None, description="Total VRAM in MB", ge=0)
    vram_used_mb: int | None = Field(None, description="Used VRAM in MB", ge=0)

    fan_rpm: OptionalUInt = Field(None, alias=FIELD_FAN_RPM)

    # Power, watts
    power_cap: OptionalFloat = Field(None, alias=FIELD_MAX_POWER)
    power_avg: OptionalFloat = Field(None, alias=FIELD_AVG_POWER)

    # Utilization, percent
    gpu_util: OptionalUInt = Field(None, alias=FIELD_GPU_USE)
    vram_util: OptionalUInt = Field(None, alias=FIELD_VRAM_ALLOCATED)

    vram_vendor: OptionalStr = Field(None, alias=FIELD_MEMORY_VENDOR)

    kind: GpuKind | None = Field(
        None, description="Discrete/Integrated classification, set after merge"
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the presentation payload keyed by rocm-smi field names.

        ``kind`` is left out until the device has been classified.
        """
        exclude = {"kind"} if self.kind is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize :meth:`to_dict` to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


class ProcessUsageRecord(BaseModel):
    """One process holding GPU memory, from ``rocm-smi --showpids``."""

    model_config = ConfigDict(frozen=True)

    pid: int = Field(..., description="Process ID", ge=0)
    name: str = Field(..., description="Executable name", min_length=1)
    gpu_index: int = Field(..., description="GPU index", ge=0)
    vram_bytes: int = Field(..., description="VRAM held by the process", ge=0)
    engine_usage: int = Field(0, description="GPU engine usage percent", ge=0)
    state: str = Field(UNKNOWN_PROCESS_STATE, description="Process state")

    @classmethod
    def from_entry(cls, key: str, value: str) -> ProcessUsageRecord | None:
        """Build a record from one ``system`` entry.

        Args:
            key: Entry key, e.g. ``"PID144763"``.
            value: Entry value, e.g. ``"ollama, 1, 6352367616, 0, unknown"``.

        Returns
        -------
            ProcessUsageRecord, or None if the pid, name, GPU index or VRAM
            bytes cannot be parsed. Engine usage falls back to 0 and state
            to "unknown".
        """
        match = _PID_KEY.fullmatch(key)
        if match is None:
            return None

        parts = [part.strip() for part in value.split(",")]
        if len(parts) < 3:
            return None

        name = parts[0]
        gpu_index = _parse_token(parts[1])
        vram_bytes = _parse_token(parts[2])
        if not name or gpu_index is None or vram_bytes is None:
            return None

        engine_usage = _parse_token(parts[3]) if len(parts) > 3 else None
        state = parts[4] if len(parts) > 4 and parts[4] else UNKNOWN_PROCESS_STATE

        return cls(
            pid=int(match.group(1)),
            name=name,
            gpu_index=gpu_index,
            vram_bytes=vram_bytes,
            engine_usage=engine_usage if engine_usage is not None else 0,
            state=state,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation of the process."""
        return self.model_dump(mode="json")


class ToolVersion(BaseModel):
    """Version strings reported by ``rocm-smi --version --json``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tool_version: str = Field(..., alias=FIELD_SMI_VERSION)
    library_version: str = Field(..., alias=FIELD_SMI_LIB_VERSION)


class ToolCheckResult(BaseModel):
    """Where rocm-smi lives and which version it is."""

    path: str | None = Field(None, description="Resolved rocm-smi path")
    version: ToolVersion | None = Field(
        None, description="Parsed version info, None if unavailable"
    )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation of the check."""
        return self.model_dump(mode="json")
