"""Exceptions raised while talking to rocm-smi.

Field-level and row-level problems never surface here: they are absorbed as
None values or dropped rows by the parsers.
"""

from __future__ import annotations

from collections.abc import Sequence


class RocmSmiError(Exception):
    """Base exception for rocm-smi collection errors."""

    pass


class InvocationFailure(RocmSmiError):
    """Raised when rocm-smi could not be run or its output could not be read."""

    def __init__(self, args: Sequence[str], reason: str) -> None:
        self.args_used = tuple(args)
        self.reason = reason
        super().__init__(f"Failed to run {' '.join(args)}: {reason}")


class ToolNotFoundError(InvocationFailure):
    """Raised when the rocm-smi executable cannot be found or spawned."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__([name], "not found on PATH")


class MalformedDocumentError(RocmSmiError):
    """Raised when rocm-smi output is not the JSON shape we bind to.

    Usually means an incompatible rocm-smi release.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed {source} document: {reason}")
