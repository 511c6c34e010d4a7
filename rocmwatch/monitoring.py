"""Polling daemon that refreshes the GPU snapshot and process list."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from rocmwatch.backends.classify import GpuClassifier
from rocmwatch.backends.errors import RocmSmiError
from rocmwatch.backends.processes import fetch_process_list
from rocmwatch.backends.rocm_smi import RocmSmiClient
from rocmwatch.backends.snapshot import collect_full_snapshot
from rocmwatch.models.constants import DEFAULT_INTERVAL_SECONDS
from rocmwatch.utils.logger import Logger

Payload = list[dict[str, Any]]
PayloadListener = Callable[[Payload], None]
TickListener = Callable[[bool], None]


class TelemetryDaemon:
    """Daemon that collects a device snapshot and process list every interval.

    Each tick is independent. When a pipeline fails the previous payload is
    kept and the listener is not called for that pipeline.
    """

    def __init__(
        self,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        snapshot_listener: PayloadListener | None = None,
        process_listener: PayloadListener | None = None,
        client: RocmSmiClient | None = None,
        classifier: GpuClassifier | None = None,
        tick_listener: TickListener | None = None,
    ):
        """Create a telemetry daemon thread.

        Args:
            interval_seconds: Polling interval in seconds. Must be positive.
            snapshot_listener: Called with serialized devices each tick.
            process_listener: Called with serialized processes each tick.
            client: rocm-smi client shared by both pipelines.
            classifier: Classification heuristic for the snapshot.
            tick_listener: Called after every tick, successful or not, with
                whether the snapshot pipeline succeeded.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self.interval_seconds = interval_seconds
        self._snapshot_listener = snapshot_listener
        self._process_listener = process_listener
        self._tick_listener = tick_listener
        self._client = client or RocmSmiClient()
        self._classifier = classifier or GpuClassifier()
        self._logger = Logger.get("monitor")

        self._stop_event = threading.Event()
        self._payload_lock = threading.Lock()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread_started = False
        self._latest_devices: Payload | None = None
        self._latest_processes: Payload | None = None

    def start(self) -> None:
        """Start the background polling thread."""
        if self._thread_started:
            return
        self._thread_started = True
        self._thread.start()

    def stop(self) -> None:
        """Stop polling; an in-flight rocm-smi call finishes first."""
        if not self._thread_started:
            return
        self._stop_event.set()
        self._thread.join()

    def is_alive(self) -> bool:
        """Return True while the polling thread is running."""
        return self._thread.is_alive()

    def get_latest_devices(self) -> Payload | None:
        """Return the last successful device payload, if any."""
        with self._payload_lock:
            return self._latest_devices

    def get_latest_processes(self) -> Payload | None:
        """Return the last successful process payload, if any."""
        with self._payload_lock:
            return self._latest_processes

    def run_once(self) -> bool:
        """Run one tick of both pipelines.

        Returns
        -------
            True if the snapshot pipeline succeeded this tick.
        """
        snapshot_ok = False
        try:
            devices = [
                device.to_dict()
                for device in collect_full_snapshot(self._client, self._classifier)
            ]
        except RocmSmiError as e:
            self._logger.warning(f"Snapshot failed, keeping previous data: {e}")
        else:
            with self._payload_lock:
                self._latest_devices = devices
            snapshot_ok = True
            if self._snapshot_listener:
                self._snapshot_listener(devices)

        try:
            processes = [p.to_dict() for p in fetch_process_list(self._client)]
        except RocmSmiError as e:
            self._logger.warning(f"Process list failed, keeping previous data: {e}")
        else:
            with self._payload_lock:
                self._latest_processes = processes
            if self._process_listener:
                self._process_listener(processes)

        if self._tick_listener:
            self._tick_listener(snapshot_ok)
        return snapshot_ok

    def _run(self) -> None:
        while not self._stop_event.is_set():
            start = time.time()
            self.run_once()
            remaining = self.interval_seconds - (time.time() - start)
            if remaining > 0:
                self._stop_event.wait(remaining)
