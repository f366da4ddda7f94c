"""StepOp strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .step import Step

logger = logging.getLogger(__name__)


class StepOp(ABC):
    """Wraps a Step with conditional execution logic."""

    def __init__(self, step: Step) -> None:
        self.step = step

    @abstractmethod
    def __call__(self, ctx: Context) -> None: ...

    def _apply(self, ctx: Context) -> None:
        if ctx.dry_run:
            logger.info("[DRY RUN] Would apply %s", self.step)
        else:
            logger.info("Applying %s", self.step)
            self.step.apply(ctx)


class Present(StepOp):
    """Apply only if the artifact doesn't exist."""

    def __call__(self, ctx: Context) -> None:
        if self.step.skip(ctx):
            logger.debug("Skipping %s; not applicable", self.step)
        elif self.step.exists(ctx):
            logger.debug("Skipping %s; already exists", self.step)
        else:
            self._apply(ctx)


class Ensure(StepOp):
    """Apply if current state doesn't match."""

    def __call__(self, ctx: Context) -> None:
        if self.step.skip(ctx):
            logger.debug("Skipping %s; not applicable", self.step)
        elif self.step.equals(ctx):
            logger.debug("Skipping %s; up to date", self.step)
        else:
            self._apply(ctx)
