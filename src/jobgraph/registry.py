"""Job registry: the single owner of job records and their state transitions."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from .clock import SystemClock
from .exceptions import (
    CircularDependencyError,
    DuplicateIdentifierError,
    InvalidTransitionError,
    JobNotFoundError,
    MissingReferenceError,
    ValidationError,
)
from .logger import get_logger
from .models import MAX_PRIORITY, MIN_PRIORITY, Argument, Job, JobState
from .queue import JobQueue

if TYPE_CHECKING:
    from .protocols import Clock

logger = get_logger()


class JobRegistry:
    """Owns every Job keyed by ID and mediates all state changes.

    Activation and delay notify the queue as a side effect, so the queue never
    needs to see job records. IDs come from a private counter that only moves
    forward; IDs supplied by callers push the counter past them, so an ID is
    never handed out twice.
    """

    def __init__(self, queue: JobQueue | None = None, clock: Clock | None = None):
        self.queue = queue if queue is not None else JobQueue()
        self.clock: Clock = clock if clock is not None else SystemClock()
        self._jobs: dict[int, Job] = {}
        self._last_id = 0
        self._finish_log: list[int] = []

    def next_id(self) -> int:
        """Allocate a fresh job ID."""
        self._last_id += 1
        return self._last_id

    def register(self, job: Job) -> int:
        """Insert a new job and return its ID.

        References may only name jobs that are already registered, and never
        the job itself, so the dependency graph stays acyclic.

        Raises:
            DuplicateIdentifierError: The ID is already registered
            MissingReferenceError: An argument references an unknown job
            CircularDependencyError: An argument references the job itself
            ValidationError: Priority is out of range
        """
        if job.id in self._jobs:
            raise DuplicateIdentifierError(f"Job {job.id} is already registered")
        if not MIN_PRIORITY <= job.priority <= MAX_PRIORITY:
            raise ValidationError(
                f"Job {job.id} has priority {job.priority}; "
                f"must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
            )
        for dep_id in job.dependency_ids:
            if dep_id == job.id:
                raise CircularDependencyError(f"Job {job.id} ({job.name}) depends on itself")
            if dep_id not in self._jobs:
                raise MissingReferenceError(
                    f"Job {job.id} ({job.name}) references unknown job {dep_id}"
                )
        if job.state != JobState.NOT_STARTED:
            raise InvalidTransitionError(
                f"Job {job.id} must be registered as {JobState.NOT_STARTED.value}, "
                f"not {job.state.value}"
            )

        self._jobs[job.id] = job
        self._last_id = max(self._last_id, job.id)
        logger.debug(f"registry: registered job {job.id} ({job.name})")
        return job.id

    def create(
        self,
        name: str,
        arguments: Sequence[Argument] = (),
        priority: int = MIN_PRIORITY,
        delay_until: int | None = None,
    ) -> int:
        """Allocate an ID and register a new job in one step."""
        return self.register(
            Job(
                id=self.next_id(),
                name=name,
                arguments=list(arguments),
                priority=priority,
                delay_until=delay_until,
            )
        )

    def get(self, job_id: int) -> Job:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise JobNotFoundError(f"Job {job_id} not found") from None

    def activate(self, job_id: int) -> None:
        """Mark a NOT_STARTED job WAITING and push it onto the ready queue at the current time.

        Delayed jobs reach WAITING only through promote_due().
        """
        job = self._transition(job_id, JobState.WAITING)
        self.queue.add_job(job_id, job.priority, self.clock.now())

    def delay(self, job_id: int, not_before: int) -> None:
        """Mark a job DELAYED and push it onto the delayed queue due at ``not_before``."""
        job = self._transition(job_id, JobState.DELAYED)
        self.queue.delay_job(job_id, job.priority, not_before)

    def finish(self, job_id: int) -> None:
        """Mark a job FINISHED. No further transitions are possible."""
        self._transition(job_id, JobState.FINISHED)
        self._finish_log.append(job_id)

    def promote_due(self, now: int) -> list[int]:
        """Promote due delayed jobs into the ready queue and mark them WAITING.

        Entries whose job already left DELAYED (e.g. finished out of band) are
        still moved by the queue; the pop path discards them.
        """
        promoted = self.queue.promote_due(now)
        for job_id in promoted:
            job = self.get(job_id)
            if job.state == JobState.DELAYED:
                job.state = JobState.WAITING
                logger.changes(f"Job {job_id} ({job.name}): delayed -> waiting")
        return promoted

    def finished_since(self, cursor: int) -> tuple[list[int], int]:
        """Return jobs finished after position ``cursor`` of the finish log and the new cursor."""
        return self._finish_log[cursor:], len(self._finish_log)

    def _transition(self, job_id: int, state: JobState) -> Job:
        job = self.get(job_id)
        if not job.can_transition_to(state):
            raise InvalidTransitionError(
                f"Job {job_id} ({job.name}) cannot move from {job.state.value} to {state.value}"
            )
        logger.changes(f"Job {job_id} ({job.name}): {job.state.value} -> {state.value}")
        job.state = state
        return job

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self._jobs.values())
