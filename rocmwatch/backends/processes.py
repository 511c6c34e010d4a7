"""GPU process list from ``rocm-smi --showpids --json``.

The process list lives in the ``system`` section, one entry per process:

    {"system": {"PID144763": "ollama, 1, 6352367616, 0, unknown"}}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rocmwatch.backends.rocm_smi import RocmSmiClient
from rocmwatch.models.constants import PIDS_ARGS, SYSTEM_SECTION
from rocmwatch.models.device_models import ProcessUsageRecord
from rocmwatch.utils.logger import Logger


def parse_process_list(document: Mapping[str, Any]) -> list[ProcessUsageRecord]:
    """Extract process usage records from a ``--showpids`` document.

    Entries that are not ``PID<digits>`` keys with string values are
    ignored, and rows missing a pid, name, GPU index or VRAM byte count
    are dropped without affecting the others.

    Args:
        document: Parsed root document.

    Returns
    -------
        Records in document order; empty if there is no ``system`` section.
    """
    section = document.get(SYSTEM_SECTION)
    if not isinstance(section, Mapping):
        return []

    log = Logger.get("rocm.pids")
    records: list[ProcessUsageRecord] = []
    for key, value in section.items():
        if not isinstance(value, str) or not key.startswith("PID"):
            continue
        record = ProcessUsageRecord.from_entry(key, value)
        if record is None:
            log.debug(f"Dropped malformed process entry {key}={value!r}")
            continue
        records.append(record)
    return records


def fetch_process_list(client: RocmSmiClient | None = None) -> list[ProcessUsageRecord]:
    """Run ``rocm-smi --showpids --json`` and parse the result.

    Raises
    ------
        InvocationFailure: If rocm-smi cannot be run.
        MalformedDocumentError: If the output is not a JSON object.
    """
    client = client or RocmSmiClient()
    return parse_process_list(client.query(PIDS_ARGS, "pids"))
