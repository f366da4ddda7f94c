"""Step ABC and step registration."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .context import Context

_step_registry: dict[str, type] = {}


def step(name: str):
    """Register a Step class as an HCL block decoder."""

    def decorator(cls):
        _step_registry[name] = cls
        return cls

    return decorator


class Step(ABC):
    """Base class for all staging steps."""

    @abstractmethod
    def equals(self, ctx: Context) -> bool:
        """Current state matches desired state."""

    def exists(self, ctx: Context) -> bool:
        """Artifact exists (defaults to equals)."""
        return self.equals(ctx)

    def skip(self, ctx: Context) -> bool:
        """Step does not apply in this context."""
        return False

    @abstractmethod
    def apply(self, ctx: Context) -> None:
        """Create or update the artifact."""

    def __str__(self) -> str:
        return type(self).__name__
