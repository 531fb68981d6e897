"""Protocol definitions for the scheduling engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import Workflow
    from .registry import JobRegistry
    from .resolver import ScanResult


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> int:
        """Return the current time in whole seconds since the epoch (UTC)."""
        ...


class ReadinessResolver(Protocol):
    """Protocol for readiness evaluation strategies."""

    def evaluate(self, workflow: Workflow, registry: JobRegistry, clock: Clock) -> ScanResult:
        """Activate or delay every not-yet-started job whose dependencies are finished.

        Must be idempotent: a second call with no intervening state change
        performs no transitions.

        Args:
            workflow: Workflow whose jobs should be considered
            registry: Registry owning the jobs
            clock: Clock used to compare against each job's delay_until

        Returns:
            ScanResult listing the jobs activated and delayed by this call
        """
        ...
