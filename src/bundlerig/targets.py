"""Target descriptors and the validated pipeline of targets."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from enum import StrEnum
from pathlib import Path
from typing import overload

from pydantic import BaseModel, Field

from .errors import ConfigError
from .externals import ExternalOverride
from .hooks import Hook


class Format(StrEnum):
    """Module format of a compiled output."""

    COMMONJS = "commonjs"
    ESM = "esm"

    @property
    def extension(self) -> str:
        return ".mjs" if self is Format.ESM else ".js"

    @property
    def short_name(self) -> str:
        """Name used by esbuild for this format."""
        return "esm" if self is Format.ESM else "cjs"


class Target(BaseModel):
    """Immutable description of one compilation unit."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str
    entry_points: list[str] = Field(min_length=1)
    outfile: str
    format: Format = Format.COMMONJS
    bundle: bool = False
    emit_types: bool = False
    minify: bool = False
    external: list[str] = Field(default_factory=list)
    hooks: list[Hook] = Field(default_factory=list)
    manifest: str | None = None

    def output_file(self, root: str | Path = ".") -> Path:
        """Absolute path of the primary output, with the extension chosen by format."""
        return Path(os.path.abspath(Path(root) / f"{self.outfile}{self.format.extension}"))

    def output_dir(self, root: str | Path = ".") -> Path:
        return self.output_file(root).parent

    @property
    def active_hooks(self) -> list[Hook]:
        """Hooks that run for this target; esm builds never repeat staging work."""
        if self.format is Format.ESM:
            return []
        return list(self.hooks)

    def override(self, root: str | Path = ".") -> ExternalOverride | None:
        """Resolution override keeping this target's own manifest external."""
        if self.manifest is None:
            return None
        return ExternalOverride.for_outfile(Path(root) / self.manifest, self.output_file(root))


class Pipeline(Sequence[Target]):
    """Ordered targets for one build, validated for conflicting outputs."""

    def __init__(self, targets: Iterable[Target], *, root: str | Path = ".") -> None:
        self.root = Path(root).resolve()
        self._targets = list(targets)

        names: set[str] = set()
        outputs: dict[Path, str] = {}
        for target in self._targets:
            if target.name in names:
                raise ConfigError(f"Duplicate target: '{target.name}'")
            names.add(target.name)

            out = target.output_file(self.root)
            if out in outputs:
                raise ConfigError(f"Targets '{outputs[out]}' and '{target.name}' both write {out}")
            outputs[out] = target.name

    @overload
    def __getitem__(self, index: int) -> Target: ...
    @overload
    def __getitem__(self, index: slice) -> list[Target]: ...
    def __getitem__(self, index: int | slice) -> Target | list[Target]:
        return self._targets[index]

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"Pipeline(root={self.root}, targets={len(self._targets)})"
