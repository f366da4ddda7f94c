"""External-resolution override: keep a target's own manifest out of the bundle."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

MANIFEST_FILTER = r"package\.json$"


class Redirect(BaseModel):
    """Resolution result telling the compiler to leave an import unbundled."""

    model_config = {"frozen": True}

    path: str
    external: bool = True


class ExternalOverride(BaseModel):
    """Marks one manifest file as external, regardless of the import path used.

    Equality is checked on the fully resolved path, so manifests belonging to
    dependencies still resolve and bundle normally.
    """

    model_config = {"frozen": True}

    match_path: Path
    output_dir: Path
    filter: str = MANIFEST_FILTER

    @classmethod
    def for_outfile(cls, manifest: str | Path, outfile: str | Path) -> ExternalOverride:
        """Build the override for a manifest and the output file that will import it."""
        return cls(
            match_path=Path(os.path.abspath(manifest)),
            output_dir=Path(os.path.dirname(os.path.abspath(outfile))),
        )

    @property
    def redirect_path(self) -> str:
        """Location of the manifest relative to the output directory."""
        return os.path.relpath(self.match_path, self.output_dir)

    def matches(self, specifier: str) -> bool:
        return re.search(self.filter, specifier) is not None

    def __call__(self, resolve_dir: str | Path, specifier: str) -> Redirect | None:
        if not self.matches(specifier):
            return None
        candidate = os.path.abspath(os.path.join(resolve_dir, specifier))
        if candidate != str(self.match_path):
            return None
        logger.debug("Marking '%s' as external -> %s", specifier, self.redirect_path)
        return Redirect(path=self.redirect_path)
