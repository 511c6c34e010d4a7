"""Shared fixtures for rocmwatch tests."""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from types import SimpleNamespace

import pytest

from rocmwatch.models.constants import (
    BASE_ARGS,
    CLOCK_ARGS,
    MAX_POWER_ARGS,
    MEMORY_ARGS,
    PIDS_ARGS,
    VERSION_ARGS,
)
from rocmwatch.utils.logger import Logger

FIXTURES = Path(__file__).parent / "fixtures"

FIXTURE_FOR_ARGS = {
    BASE_ARGS: "rocm_smi_all.json",
    CLOCK_ARGS: "rocm_smi_clocks.json",
    MEMORY_ARGS: "rocm_smi_meminfo.json",
    MAX_POWER_ARGS: "rocm_smi_maxpower.json",
    PIDS_ARGS: "rocm_smi_pids.json",
    VERSION_ARGS: "rocm_smi_version.json",
}


def load_fixture(name: str) -> str:
    """Return the text of a rocm-smi output fixture."""
    return (FIXTURES / name).read_text()


@pytest.fixture(autouse=True)
def log_output() -> StringIO:
    """Configure the Logger for every test and expose what it wrote."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    return output


@pytest.fixture
def fake_rocm_smi(monkeypatch: pytest.MonkeyPatch):
    """Replace subprocess.run with canned rocm-smi output.

    Returns a namespace with ``overrides`` (args tuple -> stdout text) and
    ``calls``, every command that was run.
    """
    overrides: dict[tuple[str, ...], str] = {}
    calls: list[list[str]] = []

    def fake_run(cmd, **_kwargs):
        calls.append(list(cmd))
        args = tuple(cmd[1:])
        if args in overrides:
            stdout = overrides[args]
        else:
            stdout = load_fixture(FIXTURE_FOR_ARGS[args])
        return SimpleNamespace(returncode=0, stdout=stdout.encode(), stderr=None)

    monkeypatch.setattr("subprocess.run", fake_run)
    return SimpleNamespace(overrides=overrides, calls=calls)


@pytest.fixture
def read_fixture():
    """Return the fixture loader for tests that build documents by hand."""
    return load_fixture
