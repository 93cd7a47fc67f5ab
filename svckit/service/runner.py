"""Run native control tools and capture what they say."""

import subprocess
from dataclasses import dataclass

from loguru import logger

# Shell convention for "command not found"
NOT_FOUND_EXIT = 127


@dataclass
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr together, the way a terminal would show them."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


def run_command(*args: str, tag: str = "svckit") -> CommandResult:
    """Run *args* and return the result. Never raises on a non-zero exit.

    A missing executable is reported as exit 127 with the OS error as stderr,
    so callers classify it like any other failure.
    """
    log = logger.bind(tag=tag)
    log.debug(f"RUN: {' '.join(args)}")
    try:
        proc = subprocess.run(list(args), capture_output=True, text=True)
    except OSError as e:
        log.warning(f"Could not execute {args[0]}: {e}")
        return CommandResult(list(args), NOT_FOUND_EXIT, stderr=str(e))

    result = CommandResult(list(args), proc.returncode, proc.stdout, proc.stderr)
    log.debug(f"OUT: exit={result.returncode} output={result.output.strip()!r}")
    return result
