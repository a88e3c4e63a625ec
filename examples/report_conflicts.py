"""
Example: Report KMP conflicts for a saved zypper transaction summary.

Usage:
    zypper -vv install --download-only drbd-kmp-default > plan.log
    python examples/report_conflicts.py plan.log
"""

import sys
from pathlib import Path

from rich.console import Console

from kmp_install.core.config import Settings
from kmp_install.core.inventory import query_installed
from kmp_install.core.locator import PackageLocator
from kmp_install.core.resolver import detect_conflicts
from kmp_install.parsers.zypper import parse_plan


def main(log_file: str) -> None:
    console = Console()
    settings = Settings.from_env()

    # Parse the plan zypper printed
    new, remove = parse_plan(Path(log_file).read_text().splitlines())
    console.print(f"Plan installs {len(new)} KMPs and removes {len(remove)}")

    # Look up the downloaded archives and the installed KMPs
    PackageLocator(settings).resolve(new, [])
    installed = query_installed(settings)

    for conflict in detect_conflicts(new, remove, installed):
        console.print(f"{conflict.installed} conflicts with {conflict.new_name} ({conflict.module})")


if __name__ == "__main__":
    main(sys.argv[1])
