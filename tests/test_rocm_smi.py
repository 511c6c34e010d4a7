"""Tests for the rocm-smi subprocess client."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from rocmwatch.backends.errors import (
    InvocationFailure,
    MalformedDocumentError,
    ToolNotFoundError,
)
from rocmwatch.backends.rocm_smi import RocmSmiClient, parse_document
from rocmwatch.config import Settings
from rocmwatch.models.constants import VERSION_ARGS


def test_parse_document_requires_json_object():
    """Only JSON objects are valid root documents."""
    assert parse_document('{"card0": {}}', "base") == {"card0": {}}
    assert parse_document(b'{"system": {}}', "pids") == {"system": {}}

    with pytest.raises(MalformedDocumentError) as excinfo:
        parse_document("[]", "clocks")
    assert excinfo.value.source == "clocks"

    with pytest.raises(MalformedDocumentError):
        parse_document("", "base")


def test_run_discards_stderr_and_passes_timeout(monkeypatch: pytest.MonkeyPatch):
    """stdout is captured, stderr dropped and the timeout forwarded."""
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen.update(kwargs)
        return SimpleNamespace(returncode=0, stdout=b'{"card0": {}}')

    monkeypatch.setattr("subprocess.run", fake_run)

    client = RocmSmiClient("/opt/rocm/bin/rocm-smi", timeout=3.0)
    assert client.run(["-a", "--json"]) == '{"card0": {}}'
    assert seen["cmd"] == ["/opt/rocm/bin/rocm-smi", "-a", "--json"]
    assert seen["stdout"] is subprocess.PIPE
    assert seen["stderr"] is subprocess.DEVNULL
    assert seen["timeout"] == 3.0


def test_nonzero_exit_still_returns_output(monkeypatch: pytest.MonkeyPatch, log_output):
    """rocm-smi exits non-zero for unsupported sensors; the output is kept."""

    def fake_run(_cmd, **_kwargs):
        return SimpleNamespace(returncode=2, stdout=b'{"card0": {"Fan RPM": "N/A"}}')

    monkeypatch.setattr("subprocess.run", fake_run)

    client = RocmSmiClient()
    assert client.query(["-a", "--json"], "base") == {"card0": {"Fan RPM": "N/A"}}
    assert "exited with status 2" in log_output.getvalue()


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (FileNotFoundError("rocm-smi"), ToolNotFoundError),
        (PermissionError("denied"), InvocationFailure),
        (subprocess.TimeoutExpired(["rocm-smi"], 1.0), InvocationFailure),
    ],
)
def test_run_failures_become_invocation_failures(
    monkeypatch: pytest.MonkeyPatch, error, expected
):
    """Spawn failures and timeouts are InvocationFailure (or a subclass)."""

    def fake_run(_cmd, **_kwargs):
        raise error

    monkeypatch.setattr("subprocess.run", fake_run)

    with pytest.raises(expected):
        RocmSmiClient().run(["-a", "--json"])


def test_undecodable_output_is_invocation_failure(monkeypatch: pytest.MonkeyPatch):
    """Output that is not UTF-8 cannot be read."""
    monkeypatch.setattr(
        "subprocess.run",
        lambda _cmd, **_kw: SimpleNamespace(returncode=0, stdout=b"\xff\xfe\x00"),
    )

    with pytest.raises(InvocationFailure):
        RocmSmiClient().run(["-a", "--json"])


def test_locate_uses_path_lookup(monkeypatch: pytest.MonkeyPatch):
    """locate() resolves the executable through PATH."""
    paths = {"rocm-smi": "/opt/rocm/bin/rocm-smi"}
    monkeypatch.setattr("shutil.which", lambda name: paths.get(name))

    assert RocmSmiClient().locate() == "/opt/rocm/bin/rocm-smi"
    assert RocmSmiClient("amd-smi").locate() is None


def test_from_settings():
    """Settings choose the executable and timeout."""
    client = RocmSmiClient.from_settings(
        Settings(smi_executable="/usr/bin/rocm-smi", timeout_seconds=None)
    )
    assert client.executable == "/usr/bin/rocm-smi"
    assert client.timeout is None


@pytest.mark.parametrize(
    "stdout",
    [
        '{"system": {"ROCM-SMI version": "3.0.0", "ROCM-SMI-LIB version": "7.3.0"}}',
        '{"ROCM-SMI version": "3.0.0", "ROCM-SMI-LIB version": "7.3.0"}',
    ],
)
def test_query_version_nested_and_flat(fake_rocm_smi, stdout):
    """Version fields are read at the top level or under 'system'."""
    fake_rocm_smi.overrides[VERSION_ARGS] = stdout

    version = RocmSmiClient().query_version()

    assert version.tool_version == "3.0.0"
    assert version.library_version == "7.3.0"


def test_query_version_missing_fields(fake_rocm_smi):
    """A version document without the version fields is malformed."""
    fake_rocm_smi.overrides[VERSION_ARGS] = '{"system": {"ROCM-SMI version": "3.0.0"}}'

    with pytest.raises(MalformedDocumentError):
        RocmSmiClient().query_version()
