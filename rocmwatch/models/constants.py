"""Constants for rocmwatch models and collectors."""

import sys

if sys.version_info >= (3, 11):  # noqa: UP036
    from enum import StrEnum
else:
    from backports.strenum import StrEnum  # noqa: UP035


class GpuKind(StrEnum):
    """Discrete / integrated classification of a GPU."""

    DISCRETE = "Discrete"
    INTEGRATED = "Integrated"
    UNKNOWN = "Unknown"


# rocm-smi executable and invocation forms
ROCM_SMI_NAME = "rocm-smi"

BASE_ARGS = ("-a", "--json")
CLOCK_ARGS = ("--showgpuclocks", "--showclocks", "--json")
MEMORY_ARGS = ("--showmeminfo", "vram", "--json")
MAX_POWER_ARGS = ("--showmaxpower", "--json")
PIDS_ARGS = ("--showpids", "--json")
VERSION_ARGS = ("--version", "--json")

# Top-level document keys
DEVICE_KEY_PREFIX = "card"
SYSTEM_SECTION = "system"

# Per-device field names emitted by rocm-smi
FIELD_DEVICE_NAME = "Device Name"
FIELD_CARD_SERIES = "Card Series"
FIELD_SUBSYSTEM_ID = "Subsystem ID"
FIELD_CARD_VENDOR = "Card Vendor"
FIELD_GFX_VERSION = "GFX Version"
FIELD_TEMP_EDGE = "Temperature (Sensor edge) (C)"
FIELD_TEMP_JUNCTION = "Temperature (Sensor junction) (C)"
FIELD_TEMP_MEMORY = "Temperature (Sensor memory) (C)"
FIELD_SCLK = "sclk clock speed:"
FIELD_MCLK = "mclk clock speed:"
FIELD_FAN_RPM = "Fan RPM"
FIELD_MAX_POWER = "Max Graphics Package Power (W)"
FIELD_AVG_POWER = "Average Graphics Package Power (W)"
FIELD_GPU_USE = "GPU use (%)"
FIELD_VRAM_ALLOCATED = "GPU Memory Allocated (VRAM%)"
FIELD_MEMORY_VENDOR = "GPU memory vendor"
FIELD_VRAM_TOTAL_BYTES = "VRAM Total Memory (B)"
FIELD_VRAM_USED_BYTES = "VRAM Total Used Memory (B)"

# --version --json field names
FIELD_SMI_VERSION = "ROCM-SMI version"
FIELD_SMI_LIB_VERSION = "ROCM-SMI-LIB version"

BYTES_PER_MB = 1_048_576

# Codename fragments of APUs whose GPU shares system memory
DEFAULT_INTEGRATED_KEYWORDS = (
    "raphael",
    "phoenix",
    "rembrandt",
    "van gogh",
    "r7",
    "r9",
)
DEFAULT_DISCRETE_POWER_WATTS = 50.0

# Process rows: "name, gpu_index, vram_bytes, engine_usage, state"
UNKNOWN_PROCESS_STATE = "unknown"

# Event names handed to the presentation layer
GPU_UPDATE_EVENT = "gpu-update"
GPU_PIDS_UPDATE_EVENT = "gpu-pids-update"

# Configuration defaults
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_INTERVAL_SECONDS = 1.0
