"""Merged per-device snapshot built from several rocm-smi queries.

``rocm-smi -a`` does not report everything, so four queries run
concurrently (base properties, clocks, VRAM, max power). Their documents are
merged per device key, decoded into DeviceRecord, completed with fields
derived from the raw merged document, and classified.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import ValidationError

from rocmwatch.backends.classify import GpuClassifier
from rocmwatch.backends.errors import MalformedDocumentError
from rocmwatch.backends.merge import merge_all
from rocmwatch.backends.rocm_smi import RocmSmiClient, parse_document
from rocmwatch.models.constants import (
    BASE_ARGS,
    BYTES_PER_MB,
    CLOCK_ARGS,
    DEVICE_KEY_PREFIX,
    FIELD_MAX_POWER,
    FIELD_VRAM_TOTAL_BYTES,
    FIELD_VRAM_USED_BYTES,
    MAX_POWER_ARGS,
    MEMORY_ARGS,
)
from rocmwatch.models.device_models import DeviceRecord
from rocmwatch.utils.coercion import coerce_float, coerce_uint
from rocmwatch.utils.logger import Logger

# (source label, rocm-smi arguments); the first entry is the merge base
SNAPSHOT_QUERIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("base", BASE_ARGS),
    ("clocks", CLOCK_ARGS),
    ("memory", MEMORY_ARGS),
    ("max_power", MAX_POWER_ARGS),
)

# rocm-smi field names DeviceRecord binds to
_TOOL_FIELDS = frozenset(
    field.alias for field in DeviceRecord.model_fields.values() if field.alias
)


def _bytes_to_mb(value: Any) -> int | None:
    """Convert a byte count (number or numeric string) to whole megabytes."""
    byte_count = coerce_uint(value)
    if byte_count is None:
        return None
    return byte_count // BYTES_PER_MB


def decode_device(
    key: str,
    merged: Any,
    classifier: GpuClassifier | None = None,
) -> DeviceRecord:
    """Decode one merged device object into a classified DeviceRecord.

    Args:
        key: Device key (e.g., "card0").
        merged: Merged property bag for the device.
        classifier: Classification heuristic, defaults to GpuClassifier().

    Returns
    -------
        DeviceRecord with VRAM sizes, power cap and kind filled in.

    Raises
    ------
        MalformedDocumentError: If the device value is not an object.
    """
    if not isinstance(merged, Mapping):
        raise MalformedDocumentError(
            key, f"expected an object, got {type(merged).__name__}"
        )

    log = Logger.get("rocm.snapshot")
    raw_fields = {name: value for name, value in merged.items() if name in _TOOL_FIELDS}

    try:
        record = DeviceRecord.model_validate(raw_fields)
    except ValidationError as e:
        raise MalformedDocumentError(key, str(e)) from e

    decoded = record.model_dump(by_alias=True)
    for name, value in raw_fields.items():
        if value is not None and decoded.get(name) is None:
            log.debug(f"{key}: could not decode {name!r} from {value!r}")

    # Derived from the raw merged document, not from the typed record
    record = record.model_copy(
        update={
            "device_key": key,
            "vram_total_mb": _bytes_to_mb(merged.get(FIELD_VRAM_TOTAL_BYTES)),
            "vram_used_mb": _bytes_to_mb(merged.get(FIELD_VRAM_USED_BYTES)),
            "power_cap": coerce_float(merged.get(FIELD_MAX_POWER)),
        }
    )

    classifier = classifier or GpuClassifier()
    return record.model_copy(update={"kind": classifier(record)})


def build_snapshot(
    base: str | bytes,
    clocks: str | bytes,
    memory: str | bytes,
    max_power: str | bytes,
    classifier: GpuClassifier | None = None,
) -> list[DeviceRecord]:
    """Merge the four rocm-smi outputs and decode every device.

    Non-device sections such as ``system`` are skipped. Devices keep the
    base document's key order.

    Raises
    ------
        MalformedDocumentError: If any document, or any device entry, has
            the wrong shape.
    """
    root = parse_document(base, "base")
    supplements = [
        parse_document(raw, source)
        for raw, (source, _) in zip(
            (clocks, memory, max_power), SNAPSHOT_QUERIES[1:], strict=True
        )
    ]
    merge_all(root, supplements)

    return [
        decode_device(key, value, classifier)
        for key, value in root.items()
        if key.startswith(DEVICE_KEY_PREFIX)
    ]


def collect_full_snapshot(
    client: RocmSmiClient | None = None,
    classifier: GpuClassifier | None = None,
) -> list[DeviceRecord]:
    """Query rocm-smi four ways concurrently and return the merged snapshot.

    All four invocations run to completion before any failure is raised.
    There is no partial snapshot: one failed query fails the call.

    Raises
    ------
        InvocationFailure: If any rocm-smi invocation fails.
        MalformedDocumentError: If any output has the wrong shape.
    """
    client = client or RocmSmiClient()
    log = Logger.get("rocm.snapshot")

    with ThreadPoolExecutor(
        max_workers=len(SNAPSHOT_QUERIES), thread_name_prefix="rocm-smi"
    ) as pool:
        futures = [pool.submit(client.run, args) for _, args in SNAPSHOT_QUERIES]
    # leaving the executor joins every query

    outputs = [future.result() for future in futures]
    devices = build_snapshot(*outputs, classifier=classifier)
    log.debug(f"Collected snapshot of {len(devices)} device(s)")
    return devices
