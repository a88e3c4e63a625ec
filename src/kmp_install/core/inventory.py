"""
Installed-KMP inventory.

Queries the rpm database for every installed package matching the KMP naming
convention, together with the kernel modules each one owns.
"""

import logging

from kmp_install.core.commands import run_query
from kmp_install.core.config import Settings
from kmp_install.core.errors import CommandError, InventoryError
from kmp_install.models.package import Package
from kmp_install.parsers.rpm import INSTALLED_QUERY_FORMAT, parse_installed

logger = logging.getLogger(__name__)


def query_installed(settings: Settings) -> list[Package]:
    """
    Return the installed KMPs with their module sets filled in.

    Raises:
        InventoryError: If rpm cannot be run or fails. An unknown inventory
            must never be mistaken for an empty one.
    """
    cmd = [settings.rpm, "-qa", "--qf", INSTALLED_QUERY_FORMAT, settings.kmp_glob]
    try:
        lines = run_query(cmd)
    except CommandError as e:
        raise InventoryError(f"Cannot query installed KMPs: {e}") from e

    packages = parse_installed(lines)
    logger.info(f"Found {len(packages)} installed KMPs")
    for package in packages:
        logger.debug(f"Installed {package}: {len(package.modules)} modules")
    return packages
