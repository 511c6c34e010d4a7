"""rocm-smi collectors: invocation, merging, classification and parsing."""

from rocmwatch.backends.classify import GpuClassifier, classify
from rocmwatch.backends.errors import (
    InvocationFailure,
    MalformedDocumentError,
    RocmSmiError,
    ToolNotFoundError,
)
from rocmwatch.backends.merge import merge_all, merge_documents
from rocmwatch.backends.processes import fetch_process_list, parse_process_list
from rocmwatch.backends.rocm_smi import RocmSmiClient, parse_document
from rocmwatch.backends.snapshot import (
    build_snapshot,
    collect_full_snapshot,
    decode_device,
)

__all__ = [
    "GpuClassifier",
    "InvocationFailure",
    "MalformedDocumentError",
    "RocmSmiClient",
    "RocmSmiError",
    "ToolNotFoundError",
    "build_snapshot",
    "classify",
    "collect_full_snapshot",
    "decode_device",
    "fetch_process_list",
    "merge_all",
    "merge_documents",
    "parse_document",
    "parse_process_list",
]
