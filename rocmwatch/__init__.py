"""rocmwatch - AMD GPU telemetry from rocm-smi."""

from rocmwatch.version.rocmwatch_version import ROCMWATCH_VERSION, Version

__version__ = str(ROCMWATCH_VERSION)
__version_info__ = ROCMWATCH_VERSION

__all__ = [
    "ROCMWATCH_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
