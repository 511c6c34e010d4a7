from rocmwatch.version.rocmwatch_version import ROCMWATCH_VERSION, Version

__all__ = ["ROCMWATCH_VERSION", "Version"]
