"""Thin subprocess wrapper around the rocm-smi command-line tool.

Every rocm-smi invocation used by rocmwatch prints a single JSON document on
stdout. stderr is discarded. The exit status is only logged: rocm-smi exits
non-zero when a sensor is unsupported on the card while still printing a
usable document.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from rocmwatch.backends.errors import (
    InvocationFailure,
    MalformedDocumentError,
    ToolNotFoundError,
)
from rocmwatch.config import Settings
from rocmwatch.models.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    FIELD_SMI_VERSION,
    ROCM_SMI_NAME,
    SYSTEM_SECTION,
    VERSION_ARGS,
)
from rocmwatch.models.device_models import ToolVersion
from rocmwatch.utils.logger import Logger


def parse_document(raw: str | bytes, source: str) -> dict[str, Any]:
    """Parse rocm-smi output into an object-shaped root document.

    Args:
        raw: stdout of one rocm-smi invocation.
        source: Label used in error messages (e.g., "clocks").

    Returns
    -------
        Mapping from section key to section value.

    Raises
    ------
        MalformedDocumentError: If the output is not JSON or not an object.
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedDocumentError(source, f"invalid JSON ({e})") from e

    if not isinstance(document, dict):
        raise MalformedDocumentError(
            source, f"expected a JSON object, got {type(document).__name__}"
        )
    return document


class RocmSmiClient:
    """Runs rocm-smi and hands back parsed JSON documents."""

    def __init__(
        self,
        executable: str = ROCM_SMI_NAME,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Create a client.

        Args:
            executable: rocm-smi name (resolved through PATH) or full path.
            timeout: Seconds to wait for one invocation, None to wait forever.
        """
        self.executable = executable
        self.timeout = timeout
        self._logger = Logger.get("rocm.smi")

    @classmethod
    def from_settings(cls, settings: Settings) -> RocmSmiClient:
        """Create a client from loaded settings."""
        return cls(
            executable=settings.smi_executable,
            timeout=settings.timeout_seconds,
        )

    def locate(self) -> str | None:
        """Return the resolved rocm-smi path, or None if it is not installed."""
        return shutil.which(self.executable)

    def run(self, args: Sequence[str]) -> str:
        """Run rocm-smi with ``args`` and return its stdout.

        Raises
        ------
            ToolNotFoundError: If the executable does not exist.
            InvocationFailure: If it cannot be spawned, times out, or
                prints something that is not UTF-8.
        """
        cmd = [self.executable, *args]
        self._logger.debug(f"Running {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(self.executable) from e
        except subprocess.TimeoutExpired as e:
            raise InvocationFailure(cmd, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise InvocationFailure(cmd, str(e)) from e

        if result.returncode != 0:
            self._logger.debug(
                f"{' '.join(cmd)} exited with status {result.returncode}"
            )

        stdout = result.stdout or b""
        if isinstance(stdout, str):
            return stdout
        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvocationFailure(cmd, "output is not valid UTF-8") from e

    def query(self, args: Sequence[str], source: str) -> dict[str, Any]:
        """Run rocm-smi and parse its output as a root document."""
        return parse_document(self.run(args), source)

    def query_version(self) -> ToolVersion:
        """Return the rocm-smi and rocm-smi-lib versions.

        Older releases print the version fields at the top level, newer
        ones nest them under ``system``.

        Raises
        ------
            InvocationFailure: If rocm-smi cannot be run.
            MalformedDocumentError: If the version fields are missing.
        """
        document = self.query(VERSION_ARGS, "version")
        section = document
        if FIELD_SMI_VERSION not in document and isinstance(
            document.get(SYSTEM_SECTION), dict
        ):
            section = document[SYSTEM_SECTION]

        try:
            return ToolVersion.model_validate(section)
        except ValidationError as e:
            raise MalformedDocumentError("version", str(e)) from e
