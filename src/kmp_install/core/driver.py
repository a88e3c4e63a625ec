"""
Zypper dry-run driver.

Runs `zypper install --download-only` to learn which packages the requested
transaction would install and remove, downloading the new archives as a side
effect so their file lists can be inspected.
"""

import logging
from collections.abc import Callable

from kmp_install.core.commands import StreamedCommand
from kmp_install.core.config import Settings
from kmp_install.core.errors import DryRunError
from kmp_install.models.package import Plan
from kmp_install.parsers.zypper import PlanParser

logger = logging.getLogger(__name__)


class ZypperDriver:
    """Drives zypper dry runs and parses their output into a Plan."""

    def __init__(self, settings: Settings, echo: Callable[[bytes], None] | None = None):
        self.settings = settings
        self.echo = echo

    def dry_run_command(self, interactive: bool, items: list[str]) -> list[str]:
        options = []
        if not interactive and not self.settings.non_interactive:
            options.append("--non-interactive")
        return self.settings.zypper_command(*options, "-vv", "install", "--download-only", *items)

    def dry_run_install(self, interactive: bool, items: list[str]) -> Plan:
        """
        Run one dry run and parse the transaction summary.

        Args:
            interactive: Let zypper prompt the user and mirror its output.
            items: Install arguments, passed through verbatim.

        Returns:
            The parsed Plan, carrying zypper's exit code.
        """
        command = StreamedCommand(
            self.dry_run_command(interactive, items),
            interactive=interactive,
            read_size=self.settings.read_size,
            echo=self.echo,
        )
        parser = PlanParser()
        for line in command.lines():
            parser.feed(line)
        new, remove = parser.finish()
        return Plan(new=new, remove=remove, exit_code=command.returncode)

    def plan(self, items: list[str]) -> Plan:
        """
        Compute the transaction plan, retrying interactively once.

        A non-interactive run fails when zypper needs an answer, e.g. a
        license or a dependency problem; the interactive run lets the user
        give it.

        Raises:
            DryRunError: If the interactive run fails as well.
        """
        plan = self.dry_run_install(False, items)
        if plan.succeeded:
            return plan

        logger.warning(f"Non-interactive zypper run failed (exit code {plan.exit_code}), retrying interactively")
        plan = self.dry_run_install(True, items)
        if not plan.succeeded:
            raise DryRunError(plan.exit_code)
        return plan
