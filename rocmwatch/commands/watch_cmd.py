"""Watch command - prints every polling tick until interrupted."""

from __future__ import annotations

import json
import sys
import threading
from typing import Any

import click

from rocmwatch.backends.classify import GpuClassifier
from rocmwatch.backends.rocm_smi import RocmSmiClient
from rocmwatch.config import load_settings
from rocmwatch.models.constants import (
    FIELD_AVG_POWER,
    FIELD_DEVICE_NAME,
    FIELD_GPU_USE,
    GPU_PIDS_UPDATE_EVENT,
    GPU_UPDATE_EVENT,
)
from rocmwatch.monitoring import TelemetryDaemon

_LIVENESS_CHECK_SECONDS = 0.2


def _emit(event: str, payload: list[dict[str, Any]], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps({"event": event, "payload": payload}))
        return

    if event == GPU_UPDATE_EVENT:
        for device in payload:
            click.echo(
                f"{device.get('device_key')}: {device.get(FIELD_DEVICE_NAME) or 'Unknown Device'}"
                f" [{device.get('kind', 'Unknown')}]"
                f" use={device.get(FIELD_GPU_USE)}%"
                f" power={device.get(FIELD_AVG_POWER)}W"
                f" vram={device.get('vram_used_mb')}/{device.get('vram_total_mb')}MB"
            )
    else:
        click.echo(f"  {len(payload)} GPU process(es)")


def run_watch(
    interval_seconds: float | None = None,
    count: int | None = None,
    output_format: str = "text",
) -> None:
    """Poll rocm-smi and print each update.

    Exits with status 1 when no snapshot succeeded, or when the polling
    thread stopped on its own.

    Args:
        interval_seconds: Polling interval (defaults to ROCMWATCH_INTERVAL).
        count: Stop after this many ticks, failed ones included
            (None = until Ctrl+C).
        output_format: "text" or "json" (one JSON event per line).
    """
    settings = load_settings()
    interval = interval_seconds or settings.interval_seconds
    ticks = 0
    snapshots = 0
    done = threading.Event()

    def on_devices(payload: list[dict[str, Any]]) -> None:
        _emit(GPU_UPDATE_EVENT, payload, output_format)

    def on_processes(payload: list[dict[str, Any]]) -> None:
        _emit(GPU_PIDS_UPDATE_EVENT, payload, output_format)

    def on_tick(snapshot_ok: bool) -> None:
        nonlocal ticks, snapshots
        ticks += 1
        if snapshot_ok:
            snapshots += 1
        if count is not None and ticks >= count:
            done.set()

    daemon = TelemetryDaemon(
        interval_seconds=interval,
        snapshot_listener=on_devices,
        process_listener=on_processes,
        client=RocmSmiClient.from_settings(settings),
        classifier=GpuClassifier.from_settings(settings),
        tick_listener=on_tick,
    )
    daemon.start()
    try:
        # A listener that raises ends the polling thread without setting done
        while not done.wait(_LIVENESS_CHECK_SECONDS):
            if not daemon.is_alive():
                click.echo("Error: polling stopped unexpectedly", err=True)
                sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nStopping rocmwatch...", err=True)
    finally:
        daemon.stop()

    if snapshots == 0:
        click.echo(f"Error: no GPU snapshot succeeded in {ticks} tick(s)", err=True)
        sys.exit(1)
