"""Exceptions raised by kmp-install."""


class KmpInstallError(Exception):
    """Base class for fatal kmp-install errors."""


class CommandError(KmpInstallError):
    """A collaborator subprocess could not be started or failed."""

    def __init__(self, cmd: list[str], returncode: int | None = None, detail: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.detail = detail
        status = "could not be started" if returncode is None else f"exited with status {returncode}"
        message = f"{' '.join(cmd)} {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InventoryError(KmpInstallError):
    """The installed KMPs could not be determined."""


class DryRunError(KmpInstallError):
    """zypper failed to compute a plan, interactively and non-interactively."""

    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(f"zypper dry run failed with exit code {exit_code}")
