"""Workspace: a typed collection of configured hooks and targets."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, overload

from pydantic import ValidationError

from . import hcl, runner
from .compiler import Compiler
from .errors import ConfigError
from .hooks import Hook
from .resolve import Resolver, default_context
from .step import _step_registry
from .stepop import Ensure, Present, StepOp
from .targets import Format, Target

logger = logging.getLogger(__name__)

_STRATEGY_MAP: dict[str, type[StepOp]] = {
    "ensure": Ensure,
    "present": Present,
}


@dataclass
class WorkspaceRef(ABC):
    """Base class for all workspace references."""

    name: str

    @abstractmethod
    def resolve(self, workspace: Workspace) -> Any:
        """Return a ready-to-use instance using the workspace as context."""


@dataclass
class StepRef(WorkspaceRef):
    """A staging operation: a step type + strategy + attributes."""

    strategy: str
    attrs: dict[str, Any]

    def resolve(self, workspace: Workspace) -> StepOp:
        if self.name not in _step_registry:
            raise ConfigError(f"Unknown step type: '{self.name}'")
        step_cls = _step_registry[self.name]
        logger.debug("Decoding step '%s' -> %s", self.name, step_cls.__name__)
        try:
            step_instance = step_cls(**self.attrs)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid step '{self.name}': {exc}") from exc
        strategy_cls = _STRATEGY_MAP[self.strategy]
        return strategy_cls(step_instance)


@dataclass
class HookRef(WorkspaceRef):
    """A lifecycle hook: start and end operation lists."""

    on_start: list[StepRef] = field(default_factory=list)
    on_end: list[StepRef] = field(default_factory=list)

    def resolve(self, workspace: Workspace) -> Hook:
        return Hook(
            name=self.name,
            on_start=[op.resolve(workspace) for op in self.on_start],
            on_end=[op.resolve(workspace) for op in self.on_end],
        )


@dataclass
class TargetRef(WorkspaceRef):
    """A configured target, expanded to one descriptor per output format."""

    attrs: dict[str, Any]

    def resolve(self, workspace: Workspace) -> list[Target]:
        attrs = dict(self.attrs)

        hooks: list[Hook] = []
        for hook_name in attrs.pop("hooks", []):
            if hook_name not in workspace.hooks:
                raise ConfigError(f"Target '{self.name}' references unknown hook: '{hook_name}'")
            hooks.append(workspace.hooks[hook_name].resolve(workspace))

        formats = attrs.pop("formats", None) or [attrs.pop("format", Format.COMMONJS)]
        attrs.pop("format", None)

        targets: list[Target] = []
        for idx, fmt in enumerate(formats):
            name = self.name if idx == 0 else f"{self.name}:{fmt}"
            try:
                targets.append(Target(name=name, format=fmt, hooks=hooks, **attrs))
            except ValidationError as exc:
                raise ConfigError(f"Invalid target '{name}': {exc}") from exc
        return targets


def _parse_ops(phase: list[dict[str, Any]]) -> list[StepRef]:
    """Parse strategy blocks (ensure/present) from an on_start or on_end block.

    HCL2 structure for a phase:
        [{"ensure": [{"copy_file": {"path": "x"}}, ...], "present": [...]}]
    """
    ops: list[StepRef] = []
    for block in phase:
        for strategy_name in _STRATEGY_MAP:
            for step_block in block.get(strategy_name, []):
                # Each step_block is {"step_name": {attrs}}
                for step_name, attrs in step_block.items():
                    ops.append(StepRef(name=step_name, strategy=strategy_name, attrs=dict(attrs)))
    return ops


class Workspace(Mapping[str, Target]):
    """Configured workspace that accumulates parsed data and resolves targets on access."""

    def __init__(
        self,
        *,
        root: str | Path = ".",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.context = default_context(self.root, context)
        self._hook_refs: dict[str, HookRef] = {}
        self._target_refs: dict[str, TargetRef] = {}

    @property
    def hooks(self) -> dict[str, HookRef]:
        """Return the hook ref registry."""
        return self._hook_refs

    def add(self, ref: WorkspaceRef) -> None:
        """Register a workspace reference.

        Raises ConfigError if a reference with the same name is already registered.
        """
        if isinstance(ref, HookRef):
            if ref.name in self._hook_refs:
                raise ConfigError(f"Duplicate hook: '{ref.name}'")
            logger.debug("Found hook '%s'", ref.name)
            self._hook_refs[ref.name] = ref
        elif isinstance(ref, TargetRef):
            if ref.name in self._target_refs:
                raise ConfigError(f"Duplicate target: '{ref.name}'")
            logger.debug("Found target '%s'", ref.name)
            self._target_refs[ref.name] = ref
        else:
            raise TypeError(f"Unsupported workspace reference: {type(ref).__name__}")

    def load(self, path: str | Path) -> None:
        """Parse a single HCL file and register its hook and target blocks."""
        data = hcl.load(Path(path), context=self.context)
        data = Resolver(self.context).resolve(data)

        for hook_block in data.get("hook", []):
            for hook_name, hook_data in hook_block.items():
                self.add(
                    HookRef(
                        name=hook_name,
                        on_start=_parse_ops(hook_data.get("on_start", [])),
                        on_end=_parse_ops(hook_data.get("on_end", [])),
                    )
                )

        for target_block in data.get("target", []):
            for target_name, target_data in target_block.items():
                self.add(TargetRef(name=target_name, attrs=dict(target_data)))

    def scan(self, path: str | Path, *, recurse: bool = True) -> None:
        """Load every .hcl file under a directory, in sorted order."""
        path = Path(path)
        if not path.is_dir():
            logger.debug("Skipping scan of missing directory %s", path)
            return
        files = path.rglob("*.hcl") if recurse else path.glob("*.hcl")
        for file in sorted(files):
            self.load(file)

    def _resolve(self) -> dict[str, Target]:
        """Resolve all target refs into descriptors, in declaration order."""
        logger.debug(
            "Resolving %d hook(s) and %d target(s)",
            len(self._hook_refs),
            len(self._target_refs),
        )
        targets: dict[str, Target] = {}
        for ref in self._target_refs.values():
            for target in ref.resolve(self):
                if target.name in targets:
                    raise ConfigError(f"Duplicate target: '{target.name}'")
                targets[target.name] = target
        return targets

    def __getitem__(self, name: str) -> Target:
        return self._resolve()[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolve())

    def __len__(self) -> int:
        return len(self._resolve())

    @overload
    def get(self, name: str) -> Target | None: ...
    @overload
    def get(self, name: str, default: Target) -> Target: ...
    @overload
    def get(self, name: str, default: None) -> Target | None: ...
    def get(self, name: str, default: Any = None) -> Target | None:
        return self._resolve().get(name, default)

    def filter(self, names: Iterable[str]) -> list[Target]:
        """Return targets matching the given names, preserving input order."""
        resolved = self._resolve()
        return [t for n in names if (t := resolved.get(n)) is not None]

    def build(
        self,
        names: Iterable[str] | None = None,
        *,
        compiler: Compiler | None = None,
        dry_run: bool = False,
    ) -> None:
        """Build the named targets, or every target when no names are given.

        Naming a target that declares several formats also selects its
        ``name:format`` variants. Raises ConfigError for unknown names.
        """
        targets = list(self.values()) if names is None else self.select(names)
        runner.build(targets, compiler=compiler, root=self.root, dry_run=dry_run)

    def select(self, names: Iterable[str]) -> list[Target]:
        """Return the named targets and their format variants, in declaration order."""
        resolved = self._resolve()
        wanted = list(names)
        missing = [n for n in wanted if n not in resolved]
        if missing:
            raise ConfigError(f"Unknown target(s): {', '.join(missing)}")
        return [
            t
            for t in resolved.values()
            if t.name in wanted or t.name.split(":", 1)[0] in wanted
        ]

    def __repr__(self) -> str:
        return f"Workspace(root={self.root}, hooks={len(self._hook_refs)}, targets={len(self._target_refs)})"
