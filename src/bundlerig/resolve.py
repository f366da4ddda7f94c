"""Resolver: interpolate ${...} references in parsed configuration."""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

_INTERP_PATTERN = re.compile(r"\$\$\{|(\$\{([^{}]+)\})")
_FULL_PATTERN = re.compile(r"\$\{([^{}]+)\}")


def default_context(root: str | Path, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Variables available to every configuration file."""
    ctx: dict[str, Any] = {
        "env": dict(os.environ),
        "root": str(Path(root).resolve()),
        "platform": sys.platform,
    }
    ctx.update(extra or {})
    return ctx


class Resolver:
    """Resolve ${...} interpolation references against a context dict.

    Unset ``env.NAME`` references resolve to an empty string with a warning;
    any other undefined reference is an error.
    """

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        self._context = context or {}

    def _resolve_ref(self, ref: str) -> Any:
        """Resolve a dotted reference (e.g., 'env.HOME') against the context."""
        parts = ref.split(".")
        current: Any = self._context

        for part in parts:
            try:
                current = current[part]
            except (KeyError, TypeError):
                try:
                    current = getattr(current, part)
                except AttributeError:
                    if len(parts) == 2 and parts[0] == "env":
                        logger.warning("Environment variable '%s' is not set", parts[1])
                        return ""
                    raise ConfigError(f"undefined variable '{ref}'") from None

        if callable(current) and not isinstance(current, type):
            current = current()

        return current

    def _resolve_value(self, value: str) -> Any:
        """Resolve ${...} interpolations in a single string value.

        A string made of a single ${ref} keeps the referenced object's type;
        embedded references are stringified. $${...} yields a literal ${...}.
        """
        if "${" not in value:
            return value

        match = _FULL_PATTERN.fullmatch(value)
        if match:
            return self._resolve_ref(match.group(1).strip())

        def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
            if m.group(0) == "$${":
                return "${"
            return str(self._resolve_ref(m.group(2).strip()))

        return _INTERP_PATTERN.sub(_replace, value)

    def resolve(self, data: dict[str, Any]) -> dict[str, Any]:
        """Recursively walk a parsed dict and resolve all ${...} interpolations."""
        return self._walk(data)

    def _walk(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._walk(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._walk(item) for item in obj]
        if isinstance(obj, str):
            return self._resolve_value(obj)
        return obj
