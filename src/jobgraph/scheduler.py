"""High-level scheduling engine: submission, pull-based pop and completion."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from .clock import SystemClock
from .config import SchedulerConfig
from .exceptions import QueueEmptyError
from .logger import get_logger
from .models import JobState
from .parser import build_workflow
from .queue import JobQueue
from .registry import JobRegistry
from .resolver import ScanResult, create_resolver

if TYPE_CHECKING:
    from .models import Argument, Job, Workflow
    from .protocols import Clock, ReadinessResolver
    from .schemas import JobSpec

logger = get_logger()


class JobScheduler:
    """Coordinates the registry, queues and readiness resolver.

    Consumers submit a job tree once, then loop on pop_next() / finish().
    Finishing a job re-evaluates the workflow it belongs to, so dependents
    become runnable as soon as their inputs are done.

    The engine is synchronous and unlocked; a multi-threaded host must guard
    the whole scheduler with a single lock.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        clock: Clock | None = None,
        resolver: ReadinessResolver | None = None,
    ):
        """Initialize the scheduler.

        Args:
            config: Optional engine configuration (resolver selection)
            clock: Optional time source (defaults to the system clock)
            resolver: Optional resolver instance, overriding the configured type
        """
        self.config = config or SchedulerConfig()
        self.clock: Clock = clock or SystemClock()
        self.queue = JobQueue()
        self.registry = JobRegistry(self.queue, self.clock)
        self.resolver: ReadinessResolver = resolver or create_resolver(self.config.resolver.type)
        self._workflows: dict[int, Workflow] = {}  # root_id -> workflow
        # job_id -> roots of workflows holding the job or a dependent of it
        self._rescan_on_finish: defaultdict[int, list[int]] = defaultdict(list)

    def submit(self, spec: JobSpec) -> Workflow:
        """Register a submitted job tree and seed its initial readiness."""
        workflow = build_workflow(self.registry, spec)
        self.add_workflow(workflow)
        return workflow

    def add_workflow(self, workflow: Workflow) -> ScanResult:
        """Track a workflow whose jobs are already registered and evaluate it."""
        self._workflows[workflow.root_id] = workflow
        for job_id in workflow.job_ids:
            self._watch(job_id, workflow.root_id)
            for dep_id in self.registry.get(job_id).dependency_ids:
                self._watch(dep_id, workflow.root_id)
        return self.evaluate(workflow)

    def evaluate(self, workflow: Workflow) -> ScanResult:
        """Run a readiness evaluation over ``workflow``."""
        result = self.resolver.evaluate(workflow, self.registry, self.clock)
        if result:
            logger.checks(
                f"Workflow {workflow.root_id}: activated {result.activated}, "
                f"delayed {result.delayed}"
            )
        return result

    def pop_next(self) -> int | None:
        """Return the ID of the most urgent runnable job.

        Due delayed jobs are promoted first. Returns None when work exists but
        none of it is runnable yet.

        Raises:
            QueueEmptyError: Neither ready nor delayed work exists
        """
        if self.queue.is_empty():
            raise QueueEmptyError("No ready or delayed jobs")

        self.registry.promote_due(self.clock.now())

        while (job_id := self.queue.pop()) is not None:
            # Entries for jobs finished out of band are stale
            if self.registry.get(job_id).state == JobState.WAITING:
                return job_id
            logger.debug(f"Discarding stale queue entry for job {job_id}")
        return None

    def finish(self, job_id: int) -> ScanResult | None:
        """Mark a job finished and re-evaluate every workflow it can unblock.

        That is the workflow owning the job plus any tracked workflow holding a
        job that references it.

        Returns:
            Combined re-evaluation result, or None if no tracked workflow is affected
        """
        self.registry.finish(job_id)
        roots = self._rescan_on_finish.get(job_id)
        if not roots:
            return None

        combined = ScanResult()
        for root_id in roots:
            result = self.evaluate(self._workflows[root_id])
            combined.activated.extend(result.activated)
            combined.delayed.extend(result.delayed)
        return combined

    def _watch(self, job_id: int, root_id: int) -> None:
        roots = self._rescan_on_finish[job_id]
        if root_id not in roots:
            roots.append(root_id)

    def job(self, job_id: int) -> Job:
        return self.registry.get(job_id)

    def arguments(self, job_id: int) -> list[Argument]:
        """Arguments of a job; references carry the producing job's ID."""
        return list(self.registry.get(job_id).arguments)

    def is_empty(self) -> bool:
        return self.queue.is_empty()

    def next_due_time(self) -> int | None:
        """Due time of the earliest delayed job, if any."""
        return self.queue.next_due_time()
