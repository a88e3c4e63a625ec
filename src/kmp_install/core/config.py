"""
Runtime configuration for kmp-install.

Collaborator executables can be overridden through the environment, which
is how the test suite and non-standard systems point the tool elsewhere.
"""

import os
from dataclasses import dataclass, field

from kmp_install.models.package import LOCAL_CACHE_REPO

NON_INTERACTIVE_FLAGS = ("-n", "--non-interactive")


@dataclass
class Settings:
    """Executables, naming conventions and zypper options for one run."""

    zypper: str = "/usr/bin/zypper"
    rpm: str = "/usr/bin/rpm"
    kmp_glob: str = "*-kmp-*"
    local_cache_repo: str = LOCAL_CACHE_REPO
    read_size: int = 4096
    global_options: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, global_options: list[str] | None = None) -> "Settings":
        """Build settings, honoring KMP_INSTALL_ZYPPER and KMP_INSTALL_RPM."""
        return cls(
            zypper=os.environ.get("KMP_INSTALL_ZYPPER", cls.zypper),
            rpm=os.environ.get("KMP_INSTALL_RPM", cls.rpm),
            global_options=list(global_options or []),
        )

    @property
    def non_interactive(self) -> bool:
        """True if the user already asked zypper not to prompt."""
        return any(opt in NON_INTERACTIVE_FLAGS for opt in self.global_options)

    def zypper_command(self, *args: str) -> list[str]:
        """A zypper command line carrying the forwarded global options."""
        return [self.zypper, *self.global_options, *args]
