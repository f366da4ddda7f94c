"""Error taxonomy for the build pipeline."""

from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Base class for all pipeline failures."""


class ConfigError(BuildError, ValueError):
    """Invalid or inconsistent target configuration."""


class ResolutionError(BuildError, LookupError):
    """A package or manifest could not be located."""


class ProcessError(BuildError):
    """An auxiliary command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        msg = f"command failed with exit code {returncode}: {command}"
        if stderr:
            msg = f"{msg}\n{stderr.rstrip()}"
        super().__init__(msg)


class CompileError(BuildError):
    """The compiler failed to build a target."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        super().__init__(f"failed to compile target '{target}': {reason}")


class StagingError(BuildError, OSError):
    """A filesystem operation failed while staging build output."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"{path}: {reason}")
