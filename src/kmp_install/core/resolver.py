"""
Conflict resolver.

An installed KMP conflicts with a plan if it owns a kernel module that a
newly installed KMP will own as well, unless the plan already removes or
replaces it.
"""

import logging
from dataclasses import dataclass

from kmp_install.models.package import Package

logger = logging.getLogger(__name__)


@dataclass
class Conflict:
    """An installed package and the new package sharing `module` with it."""

    installed: Package
    new_name: str
    module: str


def detect_conflicts(
    new_pkgs: list[Package], remove_pkgs: list[Package], installed_pkgs: list[Package]
) -> list[Conflict]:
    """
    Find installed KMPs that must be removed for the plan to succeed.

    Args:
        new_pkgs: Packages the plan installs or upgrades, with modules.
        remove_pkgs: Packages the plan already removes.
        installed_pkgs: The installed KMP inventory, with modules.

    Returns:
        One Conflict per conflicting installed package, in inventory order.
    """
    removed = {pkg.identity for pkg in remove_pkgs}
    new_names = {pkg.name for pkg in new_pkgs}

    candidates = [
        pkg for pkg in installed_pkgs if pkg.name not in new_names and pkg.identity not in removed
    ]

    # Last writer wins; any owner is good enough for the message
    owners: dict[str, str] = {}
    for pkg in new_pkgs:
        for module in pkg.modules:
            owners[module] = pkg.name

    conflicts = []
    for pkg in candidates:
        for module in sorted(pkg.modules):
            if module in owners:
                logger.debug(f"{pkg} conflicts with {owners[module]} on {module}")
                conflicts.append(Conflict(installed=pkg, new_name=owners[module], module=module))
                break
    return conflicts


def find_conflicts(
    new_pkgs: list[Package], remove_pkgs: list[Package], installed_pkgs: list[Package]
) -> list[Package]:
    """Return the installed packages that conflict with the plan."""
    return [c.installed for c in detect_conflicts(new_pkgs, remove_pkgs, installed_pkgs)]
