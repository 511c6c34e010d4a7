#!/usr/bin/env python3
"""rocmwatch CLI - AMD GPU telemetry from rocm-smi."""

import click

from rocmwatch.config import load_settings
from rocmwatch.utils.env import EnvVarError
from rocmwatch.utils.logger import Logger


@click.group()
def rocmwatch():
    """rocmwatch command-line tool for AMD GPU telemetry."""
    try:
        settings = load_settings()
    except EnvVarError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    if not Logger.is_configured():
        # Logs go to stderr so JSON on stdout stays machine-readable
        Logger.configure(level=settings.log_level, output="stderr", timestamps=True)


@rocmwatch.command()
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["text", "json", "yaml"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.Path(),
    default=None,
    help="Also write the JSON snapshot to this file",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def snapshot(fmt, output_file, verbose):
    """Show one merged, classified GPU snapshot."""
    from rocmwatch.commands.snapshot_cmd import run_snapshot

    if verbose:
        Logger.set_level("DEBUG")

    run_snapshot(output_format=fmt.lower(), output_file=output_file)


@rocmwatch.command()
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
def processes(fmt):
    """List processes currently using GPU memory."""
    from rocmwatch.commands.snapshot_cmd import run_processes

    run_processes(output_format=fmt.lower())


@rocmwatch.command()
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def check(as_json):
    """Locate rocm-smi and report its version."""
    from rocmwatch.commands.check_cmd import run_check

    run_check(as_json=as_json)


@rocmwatch.command()
@click.option(
    "--interval",
    "-i",
    type=float,
    default=None,
    help="Polling interval in seconds (default: ROCMWATCH_INTERVAL or 1.0)",
)
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many snapshots",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format; json prints one event per line",
)
def watch(interval, count, fmt):
    r"""Poll rocm-smi and print every update.

    \b
    Examples:
      rocmwatch watch                 # Refresh every second until Ctrl+C
      rocmwatch watch -i 5 -n 3       # Three snapshots, five seconds apart
      rocmwatch watch -f json         # gpu-update / gpu-pids-update events
    """
    from rocmwatch.commands.watch_cmd import run_watch

    if interval is not None and interval <= 0:
        raise click.BadParameter("must be greater than zero", param_hint="--interval")

    run_watch(interval_seconds=interval, count=count, output_format=fmt.lower())


@rocmwatch.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display rocmwatch version information."""
    from rocmwatch.commands.version_cmd import run_version

    run_version(verbose=verbose)


if __name__ == "__main__":
    rocmwatch()
