"""
Version command - displays rocmwatch version information
"""

from rocmwatch.version import ROCMWATCH_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display rocmwatch version information.

    Args:
        verbose: If True, also show the semantic version parts and release date
    """
    if verbose:
        print(f"rocmwatch version {ROCMWATCH_VERSION.full_version()}")
        major, minor, patch = ROCMWATCH_VERSION.semver()
        print("\nDetailed version information:")
        print(f"  Semantic Version: {major}.{minor}.{patch}")
        print(f"  Release Date:     {ROCMWATCH_VERSION.date_string()}")
    else:
        print(f"rocmwatch {ROCMWATCH_VERSION}")
