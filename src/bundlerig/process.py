"""Run auxiliary build commands to completion."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .errors import ProcessError

logger = logging.getLogger(__name__)


def run(
    command: str | Sequence[str],
    *,
    cwd: str | Path | None = None,
    input: str | None = None,
) -> str:
    """Run a command and return its stdout.

    String commands go through the shell; sequences are executed directly.
    Raises ProcessError if the command exits non-zero.
    """
    shell = isinstance(command, str)
    display = command if isinstance(command, str) else shlex.join(command)
    logger.info("Running: %s", display)

    try:
        result = subprocess.run(
            command,
            shell=shell,
            cwd=cwd,
            input=input,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise ProcessError(display, 127, str(exc)) from exc

    if result.stdout:
        logger.debug("%s", result.stdout.rstrip())
    if result.returncode != 0:
        raise ProcessError(display, result.returncode, result.stderr)
    return result.stdout
