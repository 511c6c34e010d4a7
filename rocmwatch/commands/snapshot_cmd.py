"""Snapshot and process-list commands - one-shot rocm-smi reports."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import yaml

from rocmwatch.api import get_full_snapshot, get_process_list
from rocmwatch.backends.errors import RocmSmiError
from rocmwatch.models.device_models import DeviceRecord, ProcessUsageRecord


def _fmt(value, unit: str = "", precision: int | None = None) -> str:
    """Render an optional value, 'n/a' when absent."""
    if value is None:
        return "n/a"
    if precision is not None:
        return f"{value:.{precision}f}{unit}"
    return f"{value}{unit}"


def render_devices_text(devices: list[DeviceRecord]) -> str:
    """Render devices as a human-readable report."""
    if not devices:
        return "No GPUs reported by rocm-smi."

    lines: list[str] = []
    for device in devices:
        kind = device.kind.value if device.kind else "Unknown"
        lines.append(f"{device.device_key}: {device.product or 'Unknown Device'} [{kind}]")
        lines.append("-" * 60)
        if device.card_series:
            lines.append(f"  Series:        {device.card_series}")
        if device.gfx_version:
            lines.append(f"  GFX:           {device.gfx_version}")
        lines.append(
            f"  Temperature:   edge {_fmt(device.temp_edge, '°C', 1)}, "
            f"hotspot {_fmt(device.temp_hotspot, '°C', 1)}, "
            f"memory {_fmt(device.temp_mem, '°C', 1)}"
        )
        lines.append(
            f"  Clocks:        sclk {_fmt(device.sclk_mhz, ' MHz')}, "
            f"mclk {_fmt(device.mclk_mhz, ' MHz')}"
        )
        lines.append(
            f"  VRAM:          {_fmt(device.vram_used_mb)} / "
            f"{_fmt(device.vram_total_mb)} MB ({_fmt(device.vram_util, '%')})"
        )
        lines.append(
            f"  Power:         {_fmt(device.power_avg, ' W', 1)} "
            f"(cap {_fmt(device.power_cap, ' W', 1)})"
        )
        lines.append(f"  GPU use:       {_fmt(device.gpu_util, '%')}")
        lines.append(f"  Fan:           {_fmt(device.fan_rpm, ' RPM')}")
        if device.vram_vendor:
            lines.append(f"  VRAM vendor:   {device.vram_vendor}")
        lines.append("")
    return "\n".join(lines).rstrip()


def render_processes_text(processes: list[ProcessUsageRecord]) -> str:
    """Render processes as a table."""
    if not processes:
        return "No GPU processes."

    lines = [f"{'PID':>8}  {'NAME':<24} {'GPU':>3}  {'VRAM (MB)':>10}  {'ENGINE':>6}  STATE"]
    for proc in processes:
        lines.append(
            f"{proc.pid:>8}  {proc.name[:24]:<24} {proc.gpu_index:>3}  "
            f"{proc.vram_bytes / 1_048_576:>10.1f}  {proc.engine_usage:>5}%  {proc.state}"
        )
    return "\n".join(lines)


def run_snapshot(output_format: str = "text", output_file: str | None = None) -> None:
    """Collect one merged snapshot and print or export it.

    Args:
        output_format: "text", "json" or "yaml".
        output_file: Optional path to write the JSON payload to.
    """
    try:
        devices = get_full_snapshot()
    except RocmSmiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    payload = [device.to_dict() for device in devices]

    if output_format == "json":
        click.echo(json.dumps(payload, indent=2))
    elif output_format == "yaml":
        click.echo(yaml.dump(payload, default_flow_style=False, sort_keys=False))
    else:
        click.echo(render_devices_text(devices))

    if output_file:
        Path(output_file).write_text(json.dumps(payload, indent=2))
        click.echo(f"\nSnapshot written to: {output_file}", err=True)


def run_processes(output_format: str = "text") -> None:
    """Print the processes currently using GPUs."""
    try:
        processes = get_process_list()
    except RocmSmiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps([p.to_dict() for p in processes], indent=2))
    else:
        click.echo(render_processes_text(processes))
