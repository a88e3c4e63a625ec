"""
kmp-install - Kernel module package installer.

Installs KMPs through zypper and removes already-installed KMPs that would
own the same kernel modules as the packages being installed.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for the orchestration classes."""
    if name == "KmpInstaller":
        from kmp_install.core.kmp_install import KmpInstaller

        return KmpInstaller
    if name == "Package":
        from kmp_install.models.package import Package

        return Package
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["KmpInstaller", "Package", "__version__"]
