"""
Zypper Output Parser.

Turns the verbose output of `zypper -vv install --download-only` into a
transaction plan. Parsing is an explicit two-state machine over whole lines:

    Scanning  --heading-->            InBlock(target)
    InBlock   --blank line-->         Scanning
    InBlock   --record line-->        InBlock (previous record committed)
    InBlock   --continuation line-->  InBlock (appended to current record)

Line reassembly from raw pipe reads is done by `parsers.lines.LineBuffer`;
this module only ever sees complete lines.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from kmp_install.models.package import Package

logger = logging.getLogger(__name__)

_HEADING = re.compile(
    r"^The following (?:.* )?packages? (?:is|are) going to be "
    r"(installed|upgraded|downgraded|REMOVED):$"
)
# name version arch [repository]; version may be "old -> new"
_RECORD = re.compile(r"^(\S+)\s+(?:\S+\s+->\s+)?(\S+)\s+(\S+)(?:\s+(.+))?$")
# same without the name, for zypper's two-line record layout
_DETAIL = re.compile(r"^(?:\S+\s+->\s+)?(\S+)\s+(\S+)(?:\s+(.+))?$")
_MD_CACHE_PATH = re.compile(r"^MD Cache Path\s*:\s*(\S.*)$")


class PlanList(Enum):
    """Which list of the plan a heading selects."""

    NEW = "new"
    REMOVE = "remove"


@dataclass(frozen=True)
class Scanning:
    """Looking for a package list heading."""


@dataclass(frozen=True)
class InBlock:
    """Inside a package list; records go to `target`."""

    target: PlanList


ParserState = Scanning | InBlock


# ──────────────────────────────────────────────
# Transition predicates
# ──────────────────────────────────────────────


def match_heading(line: str) -> PlanList | None:
    """Return the list a heading line selects, or None for other lines."""
    match = _HEADING.match(line)
    if not match:
        return None
    return PlanList.REMOVE if match.group(1) == "REMOVED" else PlanList.NEW


def is_block_end(line: str) -> bool:
    return line == ""


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def is_record_start(line: str, record_indent: int | None = None) -> bool:
    """
    A record line is indented no deeper than the records of its block.

    `record_indent` is the indent of the first record after the heading;
    before that record is seen, any non-blank line starts one.
    """
    if is_block_end(line):
        return False
    return record_indent is None or indent_of(line) <= record_indent


def is_continuation(line: str, record_indent: int | None = None) -> bool:
    return not is_block_end(line) and not is_record_start(line, record_indent)


# ──────────────────────────────────────────────
# Field extraction
# ──────────────────────────────────────────────


def split_repository(text: str | None) -> str | None:
    """Cut the vendor column (separated by 2+ spaces) off a repository field."""
    if not text:
        return None
    return re.split(r"\s{2,}", text.strip(), maxsplit=1)[0]


def parse_record(line: str, extra: list[str] | None = None) -> Package | None:
    """
    Parse one package record into a Package.

    Args:
        line: The record line, e.g. "  foo-kmp-default 1.0-1 x86_64 repoA".
        extra: Continuation lines that followed the record line.

    Returns:
        The Package, or None if the record is not a KMP or cannot be parsed.
    """
    extra = [e.strip() for e in (extra or []) if e.strip()]
    fields = line.strip()

    match = _RECORD.match(fields)
    if match:
        name, version, arch, repo_text = match.groups()
    else:
        # Two-line layout: the name alone, version/arch/repo on the next line
        if not fields or " " in fields or not extra:
            logger.debug(f"Unparsable package record: {line!r}")
            return None
        detail = _DETAIL.match(extra[0])
        if not detail:
            logger.debug(f"Unparsable package details for {fields}: {extra[0]!r}")
            return None
        name = fields
        version, arch, repo_text = detail.groups()
        extra = extra[1:]

    repo = split_repository(repo_text)
    if repo is None and extra:
        repo = split_repository(extra[0])

    package = Package.create(name, version, arch, repo)
    if package is not None:
        package.extra = extra
    return package


def parse_md_cache_path(lines: list[str]) -> str | None:
    """Extract the "MD Cache Path" field from `zypper repos <repo>` output."""
    for line in lines:
        match = _MD_CACHE_PATH.match(line.strip())
        if match:
            return match.group(1).strip()
    return None


def packages_cache_dir(md_cache_path: str) -> str:
    """Map a raw metadata cache path to the repository's package cache."""
    return md_cache_path.replace("/raw/", "/packages/", 1)


# ──────────────────────────────────────────────
# State machine
# ──────────────────────────────────────────────


@dataclass
class PlanParser:
    """
    Incremental parser for zypper's transaction summary.

    Feed whole lines with `feed()`; call `finish()` once the output ends to
    commit the record still in progress.
    """

    new: list[Package] = field(default_factory=list)
    remove: list[Package] = field(default_factory=list)
    state: ParserState = field(default_factory=Scanning)
    _record: str | None = None
    _extra: list[str] = field(default_factory=list)
    _indent: int | None = None  # record indent of the current block

    def feed(self, line: str) -> None:
        line = line.rstrip()
        match self.state:
            case Scanning():
                target = match_heading(line)
                if target is not None:
                    self.state = InBlock(target)
                    self._indent = None
            case InBlock(target=target):
                heading = match_heading(line)
                if heading is not None:
                    self._commit(target)
                    self.state = InBlock(heading)
                    self._indent = None
                elif is_block_end(line):
                    self._commit(target)
                    self.state = Scanning()
                elif is_record_start(line, self._indent):
                    self._commit(target)
                    self._record = line
                    if self._indent is None:
                        self._indent = indent_of(line)
                elif self._record is not None:
                    self._extra.append(line)

    def finish(self) -> tuple[list[Package], list[Package]]:
        """Commit any open record and return the (new, remove) lists."""
        if isinstance(self.state, InBlock):
            self._commit(self.state.target)
            self.state = Scanning()
        return self.new, self.remove

    def _commit(self, target: PlanList) -> None:
        if self._record is None:
            return
        package = parse_record(self._record, self._extra)
        self._record = None
        self._extra = []
        if package is None:
            return
        if target is PlanList.REMOVE:
            self.remove.append(package)
        else:
            self.new.append(package)


def parse_plan(lines) -> tuple[list[Package], list[Package]]:
    """Parse complete zypper output into (new, remove) package lists."""
    parser = PlanParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
