"""Tests for the rocmwatch command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from rocmwatch.cli import rocmwatch
from rocmwatch.models.constants import BASE_ARGS, PIDS_ARGS


@pytest.fixture
def runner(monkeypatch):
    for name in ("ROCMWATCH_SMI", "ROCMWATCH_TIMEOUT", "ROCMWATCH_IGPU_KEYWORDS"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def test_snapshot_json(runner, fake_rocm_smi):
    """snapshot -f json prints the payload keyed by rocm-smi field names."""
    result = runner.invoke(rocmwatch, ["snapshot", "-f", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [d["device_key"] for d in payload] == ["card0", "card1"]
    assert payload[0]["Device Name"].startswith("Navi 31")
    assert payload[0]["kind"] == "Discrete"
    assert payload[1]["kind"] == "Integrated"
    assert payload[0]["vram_total_mb"] == 24560


def test_snapshot_yaml(runner, fake_rocm_smi):
    """snapshot -f yaml prints the same payload as YAML."""
    result = runner.invoke(rocmwatch, ["snapshot", "-f", "yaml"])

    assert result.exit_code == 0
    payload = yaml.safe_load(result.output)
    assert payload[1]["Device Name"] == "Phoenix1"


def test_snapshot_text_and_file(runner, fake_rocm_smi, tmp_path):
    """The text report names each card and the JSON file is written."""
    out = tmp_path / "snap.json"
    result = runner.invoke(rocmwatch, ["snapshot", "-o", str(out)])

    assert result.exit_code == 0
    assert "card0: Navi 31" in result.output
    assert "[Integrated]" in result.output
    assert len(json.loads(out.read_text())) == 2


def test_snapshot_error_exits_nonzero(runner, fake_rocm_smi):
    """A malformed rocm-smi document fails with exit code 1."""
    fake_rocm_smi.overrides[BASE_ARGS] = "no devices"

    result = runner.invoke(rocmwatch, ["snapshot"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_processes_json(runner, fake_rocm_smi):
    """processes -f json lists only well-formed rows."""
    result = runner.invoke(rocmwatch, ["processes", "-f", "json"])

    assert result.exit_code == 0
    assert [p["pid"] for p in json.loads(result.output)] == [144763, 2301]


def test_processes_text_empty(runner, fake_rocm_smi):
    """No system section means no GPU processes."""
    fake_rocm_smi.overrides[PIDS_ARGS] = "{}"

    result = runner.invoke(rocmwatch, ["processes"])

    assert result.exit_code == 0
    assert "No GPU processes." in result.output


def test_check_found(runner, fake_rocm_smi, monkeypatch):
    """check --json reports path and version."""
    monkeypatch.setattr("shutil.which", lambda _name: "/opt/rocm/bin/rocm-smi")

    result = runner.invoke(rocmwatch, ["check", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["path"] == "/opt/rocm/bin/rocm-smi"
    assert data["version"]["library_version"] == "7.3.0"


def test_check_missing_exits_nonzero(runner, monkeypatch):
    """check exits 1 when rocm-smi is not installed."""
    monkeypatch.setattr("shutil.which", lambda _name: None)

    result = runner.invoke(rocmwatch, ["check"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_watch_json_events(runner, fake_rocm_smi):
    """watch -n 1 -f json emits one device event and then stops."""
    result = runner.invoke(rocmwatch, ["watch", "-i", "0.05", "-n", "1", "-f", "json"])

    assert result.exit_code == 0
    events = [json.loads(line)["event"] for line in result.output.splitlines() if line]
    assert events[0] == "gpu-update"


def test_watch_counts_failed_ticks(runner, monkeypatch):
    """watch -n 1 stops after one failed tick and exits non-zero."""

    def fake_run(cmd, **_kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr("subprocess.run", fake_run)

    result = runner.invoke(rocmwatch, ["watch", "-i", "0.05", "-n", "1"])

    assert result.exit_code == 1
    assert "no GPU snapshot succeeded" in result.output


@pytest.mark.filterwarnings("ignore::pytest.PytestUnhandledThreadExceptionWarning")
def test_watch_exits_when_polling_thread_dies(runner, fake_rocm_smi, monkeypatch):
    """A listener that raises ends watch instead of hanging it."""

    def broken_emit(*_args):
        raise BrokenPipeError

    monkeypatch.setattr("rocmwatch.commands.watch_cmd._emit", broken_emit)

    result = runner.invoke(rocmwatch, ["watch", "-i", "0.05", "-n", "3"])

    assert result.exit_code == 1
    assert "polling stopped unexpectedly" in result.output


def test_watch_rejects_bad_interval(runner):
    """A non-positive interval is a usage error."""
    result = runner.invoke(rocmwatch, ["watch", "-i", "0"])
    assert result.exit_code == 2


def test_invalid_configuration_is_reported(runner, monkeypatch):
    """Bad ROCMWATCH_* values give a clean error, not a traceback."""
    monkeypatch.setenv("ROCMWATCH_TIMEOUT", "soon")

    result = runner.invoke(rocmwatch, ["processes"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert "ROCMWATCH_TIMEOUT" in result.output
    assert isinstance(result.exception, SystemExit)


def test_version(runner):
    """version prints the package version."""
    result = runner.invoke(rocmwatch, ["version"])

    assert result.exit_code == 0
    assert result.output.strip() == "rocmwatch 0.1.0"
