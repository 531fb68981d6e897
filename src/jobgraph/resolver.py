"""Readiness evaluation: decide which not-yet-started jobs may be queued."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import ResolverType
from .logger import checks_enabled, get_logger
from .models import Job, JobState

if TYPE_CHECKING:
    from .models import Workflow
    from .protocols import Clock, ReadinessResolver
    from .registry import JobRegistry

logger = get_logger()


def _default_id_list() -> list[int]:
    return []


@dataclass
class ScanResult:
    """Transitions performed by one readiness evaluation."""

    activated: list[int] = field(default_factory=_default_id_list)
    delayed: list[int] = field(default_factory=_default_id_list)

    def __bool__(self) -> bool:
        return bool(self.activated or self.delayed)


def _route(job: Job, registry: JobRegistry, now: int, result: ScanResult) -> None:
    """Activate a ready job, or delay it if its delay_until is still in the future."""
    if job.delay_until is not None and job.delay_until > now:
        registry.delay(job.id, job.delay_until)
        result.delayed.append(job.id)
    else:
        registry.activate(job.id)
        result.activated.append(job.id)


class ScanResolver:
    """Rescans every job of the workflow on each call.

    O(workflow size) per call, which is fine for modest graphs since scans
    only happen when something changes.
    """

    def evaluate(self, workflow: Workflow, registry: JobRegistry, clock: Clock) -> ScanResult:
        result = ScanResult()
        now = clock.now()

        for job_id in workflow.job_ids:
            job = registry.get(job_id)
            if job.state != JobState.NOT_STARTED:
                continue

            blocked = [
                dep_id
                for dep_id in job.dependency_ids
                if registry.get(dep_id).state != JobState.FINISHED
            ]
            if blocked:
                if checks_enabled():
                    logger.checks(f"  Job {job_id} ({job.name}) blocked on {blocked}")
                continue

            _route(job, registry, now, result)

        return result


class IncrementalResolver:
    """Tracks outstanding dependencies per job instead of rescanning.

    Each workflow is indexed once (reverse-dependency edges plus the set of
    unfinished dependencies of every job). Later calls consume the registry's
    finish log from where the previous call stopped and only look at jobs whose
    outstanding set has just become empty.
    """

    def __init__(self) -> None:
        self._outstanding: dict[int, set[int]] = {}
        self._dependents: defaultdict[int, set[int]] = defaultdict(set)
        self._owner: dict[int, int] = {}  # job_id -> workflow root_id
        self._candidates: defaultdict[int, set[int]] = defaultdict(set)  # root_id -> job_ids
        self._indexed_roots: set[int] = set()
        self._cursor = 0

    def evaluate(self, workflow: Workflow, registry: JobRegistry, clock: Clock) -> ScanResult:
        if workflow.root_id not in self._indexed_roots:
            self._index(workflow, registry)

        finished, self._cursor = registry.finished_since(self._cursor)
        for done_id in finished:
            for dependent_id in self._dependents.get(done_id, ()):
                outstanding = self._outstanding[dependent_id]
                if done_id in outstanding:
                    outstanding.discard(done_id)
                    if not outstanding:
                        self._candidates[self._owner[dependent_id]].add(dependent_id)

        result = ScanResult()
        candidates = self._candidates.pop(workflow.root_id, set())
        if not candidates:
            return result

        now = clock.now()
        # Keep workflow order so activation order matches a full scan
        for job_id in workflow.job_ids:
            if job_id not in candidates:
                continue
            job = registry.get(job_id)
            if job.state == JobState.NOT_STARTED:
                _route(job, registry, now, result)
        return result

    def _index(self, workflow: Workflow, registry: JobRegistry) -> None:
        for job_id in workflow.job_ids:
            job = registry.get(job_id)
            self._owner[job_id] = workflow.root_id
            outstanding: set[int] = set()
            for dep_id in job.dependency_ids:
                self._dependents[dep_id].add(job_id)
                if registry.get(dep_id).state != JobState.FINISHED:
                    outstanding.add(dep_id)
            self._outstanding[job_id] = outstanding
            if outstanding:
                if checks_enabled():
                    logger.checks(f"  Job {job_id} ({job.name}) waits on {sorted(outstanding)}")
            else:
                self._candidates[workflow.root_id].add(job_id)
        self._indexed_roots.add(workflow.root_id)


def create_resolver(resolver_type: ResolverType = ResolverType.SCAN) -> ReadinessResolver:
    """Create a readiness resolver of the requested type."""
    if resolver_type == ResolverType.SCAN:
        return ScanResolver()
    if resolver_type == ResolverType.INCREMENTAL:
        return IncrementalResolver()
    raise ValueError(f"Unknown resolver type: {resolver_type}")
