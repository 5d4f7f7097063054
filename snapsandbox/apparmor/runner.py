"""
Process spawning seam for apparmor_parser.

The loader only needs "run this argv, give me the exit status and the
combined output", so that is all a runner provides. Tests substitute
snapsandbox.testing.RecordingRunner.
"""

import signal
import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserResult:
    """Exit status and combined stdout/stderr of one parser run."""
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def exit_error(self) -> str:
        """Describe a failed exit the way callers expect to read it."""
        if self.returncode < 0:
            try:
                description = signal.strsignal(-self.returncode)
            except ValueError:
                description = None
            if description is None:
                description = str(-self.returncode)
            return f"signal: {description.lower()}"
        return f"exit status {self.returncode}"


class ParserRunner(Protocol):
    def run(self, argv: Sequence[str]) -> ParserResult:
        ...


class SubprocessRunner:
    """Run commands synchronously with subprocess, merging stderr into stdout."""

    def run(self, argv: Sequence[str]) -> ParserResult:
        logger.debug(f"Running: {' '.join(argv)}")
        proc = subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
        )
        output = proc.stdout.decode("utf-8", errors="replace") if proc.stdout else ""
        return ParserResult(proc.returncode, output)
