"""Synchronous external command execution."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished child process.

    Attributes:
        args: Full argument vector, executable first
        exit_code: Process exit status
        out: Raw captured standard output
        err: Raw captured standard error
    """

    args: Tuple[str, ...]
    exit_code: int
    out: str
    err: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def stdout(self) -> str:
        """Standard output with surrounding whitespace trimmed."""
        return self.out.strip()


Runner = Callable[[Sequence[str], Optional[Path]], CommandResult]


def run_command(args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
    """Run ``args`` to completion and capture its output.

    There is no timeout and no retry. Failure to spawn the process (missing
    executable, permissions) propagates as the underlying :class:`OSError`.
    """
    argv = tuple(str(a) for a in args)
    logger.debug(f"Running {' '.join(argv)} in {cwd or '.'}")
    result = subprocess.run(
        argv,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        text=True,
        capture_output=True,
    )
    return CommandResult(
        args=argv,
        exit_code=result.returncode,
        out=result.stdout or "",
        err=result.stderr or "",
    )
