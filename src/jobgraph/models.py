"""Data models for jobgraph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

MIN_PRIORITY = 0
MAX_PRIORITY = 255


class JobState(str, Enum):
    """Lifecycle of a job. States only ever move forward."""

    NOT_STARTED = "not_started"
    DELAYED = "delayed"
    WAITING = "waiting"
    FINISHED = "finished"


# Edges reachable through explicit transitions; FINISHED is terminal.
# DELAYED -> WAITING happens only through promotion, which consumes the
# delayed entry, so a job never sits in both queues.
TRANSITIONS: dict[JobState, frozenset[JobState]] = {
    JobState.NOT_STARTED: frozenset({JobState.DELAYED, JobState.WAITING, JobState.FINISHED}),
    JobState.DELAYED: frozenset({JobState.FINISHED}),
    JobState.WAITING: frozenset({JobState.FINISHED}),
    JobState.FINISHED: frozenset(),
}


@dataclass(frozen=True)
class Literal:
    """A constant argument."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Reference:
    """An argument bound to the (future) output of another job."""

    job_id: int

    def __str__(self) -> str:
        return f"Job {self.job_id}"


Argument = Literal | Reference


def _default_arguments() -> list[Argument]:
    return []


@dataclass
class Job:
    """One schedulable unit of work."""

    id: int
    name: str
    arguments: list[Argument] = field(default_factory=_default_arguments)
    priority: int = MIN_PRIORITY
    state: JobState = JobState.NOT_STARTED
    delay_until: int | None = None  # Seconds since epoch, UTC

    @property
    def dependency_ids(self) -> list[int]:
        """IDs of the jobs this job consumes, in argument order."""
        return [arg.job_id for arg in self.arguments if isinstance(arg, Reference)]

    def can_transition_to(self, state: JobState) -> bool:
        return state in TRANSITIONS[self.state]


def _default_id_list() -> list[int]:
    return []


@dataclass
class Workflow:
    """The flattened job IDs produced by one submission.

    ``root_id`` is the submitted (outermost) job; ``job_ids`` lists every job
    of the graph in registration order.
    """

    root_id: int
    job_ids: list[int] = field(default_factory=_default_id_list)

    def __len__(self) -> int:
        return len(self.job_ids)
