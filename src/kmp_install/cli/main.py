"""
kmp-install CLI: install kernel module packages with zypper.

Usage:
    kmp-install drbd-kmp-default
    kmp-install -n ./nvidia-open-driver-G06-kmp-default-550.100-1.1.x86_64.rpm
    kmp-install --non-interactive-include-reboot-patches --from repo-oss foo-kmp-default

Arguments other than the options below are passed to `zypper install`
verbatim.
"""

import logging
import os

import click

from kmp_install.core.errors import KmpInstallError


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
    }
)
@click.version_option(package_name="kmp-install")
@click.option("--non-interactive", "-n", is_flag=True, help="Do not ask zypper to prompt for anything.")
@click.option(
    "--non-interactive-include-reboot-patches",
    "include_reboot_patches",
    is_flag=True,
    help="Like --non-interactive, but also apply patches that require a reboot.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.argument("packages", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx, non_interactive, include_reboot_patches, debug, packages):
    """Install KMPs, removing installed KMPs that provide the same kernel modules."""
    from rich.console import Console

    from kmp_install.core.config import Settings
    from kmp_install.core.kmp_install import KmpInstaller

    if not packages:
        click.echo(ctx.get_usage(), err=True)
        click.echo("Error: no packages given.", err=True)
        ctx.exit(1)

    # Configure logging
    debug = debug or os.environ.get("KMP_INSTALL_DEBUG") == "1"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )
    logger = logging.getLogger("kmp-install")

    global_options = []
    if non_interactive:
        global_options.append("--non-interactive")
    if include_reboot_patches:
        global_options.append("--non-interactive-include-reboot-patches")

    installer = KmpInstaller(Settings.from_env(global_options), Console())
    try:
        exit_code = installer.run(list(packages))
    except KmpInstallError as e:
        logger.error(str(e))
        ctx.exit(1)
    ctx.exit(exit_code)


if __name__ == "__main__":
    cli()
