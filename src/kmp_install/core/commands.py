"""
Subprocess helpers for the rpm and zypper collaborators.

Only one child process is alive at a time. Every child is waited for before
its helper returns, including when the caller stops reading early.
"""

import logging
import subprocess
import sys
from collections.abc import Callable, Iterator

from kmp_install.core.errors import CommandError
from kmp_install.parsers.lines import LineBuffer

logger = logging.getLogger(__name__)


def run_query(cmd: list[str]) -> list[str]:
    """
    Run a short query command and return its standard output lines.

    Raises:
        CommandError: If the command cannot be started or exits non-zero.
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)  # noqa: S603
    except OSError as e:
        raise CommandError(cmd, detail=str(e)) from e
    if result.returncode != 0:
        raise CommandError(cmd, result.returncode, result.stderr.strip())
    return result.stdout.splitlines()


def run_passthrough(cmd: list[str]) -> int:
    """Run a command attached to the user's terminal and return its exit code."""
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        return subprocess.run(cmd, check=False).returncode  # noqa: S603
    except OSError as e:
        raise CommandError(cmd, detail=str(e)) from e


def _mirror(chunk: bytes) -> None:
    sys.stdout.buffer.write(chunk)
    sys.stdout.buffer.flush()


class StreamedCommand:
    """
    A child process whose standard output is consumed line by line.

    Non-interactive children get /dev/null for stdin and stderr so they can
    never block on a prompt. Interactive children inherit stdin, have stderr
    merged into stdout, and every chunk read is mirrored to `echo`.
    """

    def __init__(
        self,
        cmd: list[str],
        interactive: bool = False,
        read_size: int = 4096,
        echo: Callable[[bytes], None] | None = None,
    ):
        self.cmd = cmd
        self.interactive = interactive
        self.read_size = read_size
        self.echo = echo or _mirror
        self.returncode: int | None = None

    def lines(self) -> Iterator[str]:
        """
        Start the child and yield its output as whole lines.

        `returncode` is set once the generator is exhausted or closed.

        Raises:
            CommandError: If the child cannot be started.
        """
        logger.debug(f"Running: {' '.join(self.cmd)}")
        try:
            proc = subprocess.Popen(  # noqa: S603
                self.cmd,
                stdin=None if self.interactive else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if self.interactive else subprocess.DEVNULL,
            )
        except OSError as e:
            raise CommandError(self.cmd, detail=str(e)) from e

        buffer = LineBuffer()
        try:
            while True:
                chunk = proc.stdout.read1(self.read_size)
                if not chunk:
                    break
                if self.interactive:
                    self.echo(chunk)
                yield from buffer.feed(chunk)
            yield from buffer.flush()
        finally:
            proc.stdout.close()
            self.returncode = proc.wait()
            logger.debug(f"{self.cmd[0]} exited with status {self.returncode}")
