"""Lifecycle hook: ordered staging operations around a target's compilation."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import BaseModel, Field

from .context import Context
from .stepop import StepOp

logger = logging.getLogger(__name__)


class Hook(BaseModel):
    """A named pair of operation lists run before and after a build."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    on_start: list[StepOp] = Field(default_factory=list)
    on_end: list[StepOp] = Field(default_factory=list)

    def __iter__(self) -> Iterator[StepOp]:
        yield from self.on_start
        yield from self.on_end

    def before_build(self, ctx: Context) -> None:
        """Run start operations in order; the first failure aborts the rest."""
        logger.debug("Running start hook '%s' for target '%s'", self.name, ctx.target.name)
        for op in self.on_start:
            op(ctx)

    def after_build(self, ctx: Context) -> None:
        """Run end operations in order; the first failure aborts the rest."""
        logger.debug("Running end hook '%s' for target '%s'", self.name, ctx.target.name)
        for op in self.on_end:
            op(ctx)
