"""Check command - reports where rocm-smi is and which version it is."""

import json
import sys

import click

from rocmwatch.api import check_tool_availability


def run_check(as_json: bool = False) -> None:
    """Print rocm-smi availability; exit 1 when it is missing."""
    result = check_tool_availability()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.path is None:
        click.echo("rocm-smi: not found on PATH")
    else:
        click.echo(f"rocm-smi:      {result.path}")
        if result.version is None:
            click.echo("version:       unavailable")
        else:
            click.echo(f"ROCm SMI:      {result.version.tool_version}")
            click.echo(f"ROCm SMI lib:  {result.version.library_version}")

    if result.path is None:
        sys.exit(1)
