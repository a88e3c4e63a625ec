"""
KMP Package Model.

Defines the in-memory records produced while planning a KMP installation:
packages parsed from zypper output or the rpm database, and the plan of one
zypper dry run.
"""

from dataclasses import dataclass, field


KMP_INFIX = "-kmp-"
LOCAL_CACHE_REPO = "Plain RPM files cache"


def is_kmp(name: str) -> bool:
    """Return True if the package name follows the KMP naming convention."""
    return KMP_INFIX in name


def normalize_version(version: str) -> str:
    """Reduce an "old -> new" version transition to the new version."""
    if "->" in version:
        version = version.rsplit("->", 1)[1]
    return version.strip()


def strip_epoch(version: str) -> str:
    """Drop a leading "N:" epoch; rpm file names and NVRA keys carry none."""
    epoch, sep, rest = version.partition(":")
    if sep and epoch.isdigit():
        return rest
    return version


@dataclass
class Package:
    """
    A kernel module package.

    `version` is "version-release". `modules` holds module identifiers of
    the form "<kernelVersion>/<normalizedName>" and is only filled for
    packages that take part in conflict detection.
    """

    name: str
    version: str
    arch: str
    repo: str | None = None
    path: str | None = None
    modules: set[str] = field(default_factory=set)
    extra: list[str] = field(default_factory=list)  # continuation lines from zypper

    @classmethod
    def create(
        cls, name: str, version: str, arch: str, repo: str | None = None
    ) -> "Package | None":
        """Build a Package, or return None if `name` is not a KMP."""
        if not is_kmp(name):
            return None
        return cls(name=name, version=normalize_version(version), arch=arch, repo=repo)

    @property
    def identity(self) -> str:
        """The "name-version-release.arch" key of this package instance, without epoch."""
        return f"{self.name}-{strip_epoch(self.version)}.{self.arch}"

    @property
    def rpm_filename(self) -> str:
        """File name of the package archive in a repository cache."""
        return f"{self.identity}.rpm"

    def __str__(self) -> str:
        return self.identity


@dataclass
class Plan:
    """Packages zypper intends to install and remove in one transaction."""

    new: list[Package] = field(default_factory=list)
    remove: list[Package] = field(default_factory=list)
    exit_code: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
