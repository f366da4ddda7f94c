"""Build runner: compile targets in order, wrapping each in its lifecycle hooks."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .compiler import Compiler, EsbuildCompiler
from .context import Context
from .targets import Pipeline, Target

logger = logging.getLogger(__name__)


class Runner:
    """Runs a pipeline of targets, failing fast on the first error."""

    def __init__(self, compiler: Compiler, *, root: str | Path = ".", dry_run: bool = False) -> None:
        self.compiler = compiler
        self.root = Path(root).resolve()
        self.dry_run = dry_run

    def run(self, targets: Iterable[Target]) -> None:
        """Build every target in order.

        Errors from hooks or the compiler propagate unchanged and abort the
        remaining targets; files written by earlier steps are left in place.
        """
        pipeline = Pipeline(targets, root=self.root)
        logger.info("Building %d target(s) in %s", len(pipeline), self.root)
        for target in pipeline:
            self.build(target)

    def build(self, target: Target) -> None:
        """Build a single target: start hooks, compile, end hooks."""
        ctx = Context(target, root=self.root, dry_run=self.dry_run)
        logger.info("Building target '%s'", target.name)

        hooks = target.active_hooks
        if target.hooks and not hooks:
            logger.debug("Skipping hooks for '%s'; format is %s", target.name, target.format)

        for hook in hooks:
            hook.before_build(ctx)

        if ctx.dry_run:
            logger.info("[DRY RUN] Would compile '%s'", target.name)
        else:
            self.compiler.compile(ctx)

        for hook in hooks:
            hook.after_build(ctx)


def build(
    targets: Iterable[Target],
    *,
    compiler: Compiler | None = None,
    root: str | Path = ".",
    dry_run: bool = False,
) -> None:
    """Build targets with esbuild unless another compiler is given."""
    runner = Runner(compiler or EsbuildCompiler(), root=root, dry_run=dry_run)
    runner.run(targets)
