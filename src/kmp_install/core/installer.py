"""Final, real zypper install with conflicting KMPs removed."""

import logging

from kmp_install.core.commands import run_passthrough
from kmp_install.core.config import Settings
from kmp_install.models.package import Package

logger = logging.getLogger(__name__)


def negative_constraint(package: Package) -> str:
    """The zypper install argument that removes exactly this package."""
    return f"!{package.name}.{package.arch}={package.version}"


def install_command(settings: Settings, items: list[str], conflicts: list[Package]) -> list[str]:
    return settings.zypper_command("install", *items, *(negative_constraint(p) for p in conflicts))


def commit(settings: Settings, items: list[str], conflicts: list[Package]) -> int:
    """
    Install `items`, removing every package in `conflicts` in the same transaction.

    Returns:
        zypper's exit code, unchanged.
    """
    exit_code = run_passthrough(install_command(settings, items, conflicts))
    if exit_code != 0:
        logger.error(f"zypper install failed with exit code {exit_code}")
    return exit_code
