"""Locate installed packages the way Node's resolver does."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ResolutionError

logger = logging.getLogger(__name__)

MANIFEST = "package.json"


def resolve_manifest(package: str, root: str | Path) -> Path:
    """Return the manifest of an installed package, searching node_modules upward from root."""
    start = Path(root).resolve()
    for base in (start, *start.parents):
        candidate = base / "node_modules" / package / MANIFEST
        if candidate.is_file():
            logger.debug("Resolved '%s' -> %s", package, candidate)
            return candidate
    raise ResolutionError(f"cannot resolve '{package}/{MANIFEST}' from {start}")


def package_dir(package: str, root: str | Path) -> Path:
    """Directory containing an installed package's manifest."""
    return resolve_manifest(package, root).parent
