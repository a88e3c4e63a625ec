"""
KMP Installer: conflict-aware kernel module package installation.

Orchestrates one kmp-install run:
- zypper dry run to learn the transaction plan (with interactive retry)
- location of the downloaded archives and their kernel modules
- rpm query of the installed KMPs
- conflict detection between new and installed module owners
- the real zypper install, removing the conflicting KMPs
"""

import logging

from rich.console import Console

from kmp_install.core import installer
from kmp_install.core.config import Settings
from kmp_install.core.driver import ZypperDriver
from kmp_install.core.inventory import query_installed
from kmp_install.core.locator import PackageLocator
from kmp_install.core.resolver import Conflict, detect_conflicts
from kmp_install.models.package import Plan

logger = logging.getLogger("KmpInstaller")


class KmpInstaller:
    """
    Installs KMPs through zypper without leaving two packages owning the
    same kernel module.
    """

    def __init__(self, settings: Settings | None = None, console: Console | None = None):
        self.settings = settings or Settings.from_env()
        self.console = console or Console()
        self.driver = ZypperDriver(self.settings)
        self.locator = PackageLocator(self.settings)

    def run(self, items: list[str]) -> int:
        """
        Install `items` and return zypper's exit code.

        Raises:
            KmpInstallError: If no plan can be computed or the installed KMPs
                cannot be queried.
        """
        plan = self.driver.plan(items)
        self._log_plan(plan)

        conflicts: list[Conflict] = []
        if plan.new:
            self.locator.resolve(plan.new, items)
            installed = query_installed(self.settings)
            conflicts = detect_conflicts(plan.new, plan.remove, installed)
            self._print_conflicts(conflicts)
        else:
            logger.info("The transaction installs no KMPs, nothing to check")

        return installer.commit(self.settings, items, [c.installed for c in conflicts])

    # ──────────────────────────────────────────────
    # Reporting
    # ──────────────────────────────────────────────

    def _log_plan(self, plan: Plan) -> None:
        for package in plan.new:
            logger.info(f"Plan installs {package} from {package.repo}")
        for package in plan.remove:
            logger.info(f"Plan removes {package}")

    def _print_conflicts(self, conflicts: list[Conflict]) -> None:
        if not conflicts:
            return
        self.console.print("[bold yellow]Conflicting KMPs will be removed:[/bold yellow]")
        for conflict in conflicts:
            self.console.print(
                f"  [cyan]{conflict.installed}[/cyan] conflicts with "
                f"[green]{conflict.new_name}[/green] (module {conflict.module})"
            )
