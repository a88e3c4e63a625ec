"""
Package locator.

Finds the archive zypper downloaded for each package of a plan and reads the
kernel modules it contains from its file list. Failures are per package: the
package is reported and left without modules, which keeps it out of conflict
detection.
"""

import logging
from pathlib import Path

from kmp_install.core.commands import run_query
from kmp_install.core.config import Settings
from kmp_install.core.errors import CommandError
from kmp_install.models.package import Package
from kmp_install.parsers.rpm import IDENTITY_QUERY_FORMAT, parse_manifest
from kmp_install.parsers.zypper import packages_cache_dir, parse_md_cache_path

logger = logging.getLogger(__name__)


class PackageLocator:
    """
    Resolves archive paths and module sets for planned packages.

    The repository -> cache directory mapping is memoized per instance,
    including repositories whose cache could not be found.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.cache_dirs: dict[str, Path | None] = {}

    # ──────────────────────────────────────────────
    # Local archives
    # ──────────────────────────────────────────────

    def archive_identity(self, path: str) -> str | None:
        """Read "name-version-release.arch" from an archive's own header."""
        try:
            lines = run_query([self.settings.rpm, "-qp", "--qf", IDENTITY_QUERY_FORMAT, path])
        except CommandError as e:
            logger.warning(f"Cannot read package header of {path}: {e}")
            return None
        return lines[0].strip() if lines else None

    def local_archives(self, args: list[str]) -> dict[str, str]:
        """Map the identity of every local .rpm named in `args` to its path."""
        archives = {}
        for arg in args:
            path = Path(arg)
            if path.suffix != ".rpm" or not path.is_file():
                continue
            identity = self.archive_identity(str(path))
            if identity:
                archives[identity] = str(path.resolve())
        return archives

    # ──────────────────────────────────────────────
    # Repository caches
    # ──────────────────────────────────────────────

    def repository_cache_dir(self, repo: str) -> Path | None:
        """Return the package cache directory of a repository, memoized."""
        if repo in self.cache_dirs:
            return self.cache_dirs[repo]

        cache_dir = None
        try:
            lines = run_query(self.settings.zypper_command("--non-interactive", "repos", repo))
        except CommandError as e:
            logger.debug(f"zypper repos {repo!r} failed: {e}")
        else:
            md_cache_path = parse_md_cache_path(lines)
            if md_cache_path:
                cache_dir = Path(packages_cache_dir(md_cache_path))

        self.cache_dirs[repo] = cache_dir
        return cache_dir

    def find_fetched(self, package: Package) -> str | None:
        """Search the repository cache for the archive zypper downloaded."""
        cache_dir = self.repository_cache_dir(package.repo)
        if cache_dir is None:
            logger.error(f"{package.name}: cache directory for repository {package.repo!r} not found")
            return None

        found = sorted(cache_dir.rglob(package.rpm_filename)) if cache_dir.is_dir() else []
        if not found:
            logger.error(f"{package.name}: {package.rpm_filename} not found in {cache_dir}")
            return None
        return str(found[0])

    # ──────────────────────────────────────────────
    # Resolution
    # ──────────────────────────────────────────────

    def read_modules(self, package: Package) -> None:
        """Add the modules listed in the package archive to `package.modules`."""
        try:
            lines = run_query([self.settings.rpm, "-qlp", package.path])
        except CommandError as e:
            logger.error(f"{package.name}: cannot list files of {package.path}: {e}")
            return
        package.modules.update(parse_manifest(lines))

    def resolve(self, new_pkgs: list[Package], args: list[str]) -> None:
        """
        Fill in `path` and `modules` of every package in `new_pkgs`.

        Args:
            new_pkgs: Packages the plan installs or upgrades.
            args: The original install arguments, which may name local archives.
        """
        local = None
        for package in new_pkgs:
            if package.repo == self.settings.local_cache_repo:
                if local is None:
                    local = self.local_archives(args)
                package.path = local.get(package.identity)
                if package.path is None:
                    logger.error(f"{package.name}: no local archive matches {package.identity}")
            elif package.repo:
                package.path = self.find_fetched(package)
            else:
                logger.error(f"{package.name}: no repository reported by zypper")

            if package.path:
                self.read_modules(package)
                logger.debug(f"{package}: {len(package.modules)} modules in {package.path}")
