"""Runtime execution context for the build pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .externals import ExternalOverride
    from .targets import Target


class Context:
    """Runtime state passed through the build chain."""

    def __init__(self, target: Target, *, root: str | Path = ".", dry_run: bool = False) -> None:
        self.target = target
        self.root = Path(root).resolve()
        self.dry_run = dry_run

    @property
    def output_file(self) -> Path:
        """Absolute path of the target's primary output file."""
        return self.target.output_file(self.root)

    @property
    def output_dir(self) -> Path:
        return self.output_file.parent

    @property
    def override(self) -> ExternalOverride | None:
        return self.target.override(self.root)
