"""Pytest configuration and fixtures for jobgraph tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from jobgraph.clock import ManualClock
from jobgraph.config import ResolverConfig, ResolverType, SchedulerConfig
from jobgraph.logger import reset_logger
from jobgraph.queue import JobQueue
from jobgraph.registry import JobRegistry
from jobgraph.scheduler import JobScheduler

START_TIME = 1_000

RESOLVER_VARIANTS = [ResolverType.SCAN, ResolverType.INCREMENTAL]
RESOLVER_IDS = ["scan", "incremental"]


@pytest.fixture(autouse=True)
def _clean_logger() -> Iterator[None]:
    yield
    reset_logger()


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at START_TIME."""
    return ManualClock(START_TIME)


@pytest.fixture
def queue() -> JobQueue:
    return JobQueue()


@pytest.fixture
def registry(queue: JobQueue, clock: ManualClock) -> JobRegistry:
    """Registry wired to the shared queue and manual clock."""
    return JobRegistry(queue, clock)


@pytest.fixture(params=RESOLVER_VARIANTS, ids=RESOLVER_IDS)
def resolver_type(request: pytest.FixtureRequest) -> ResolverType:
    """Current resolver being tested."""
    return request.param  # type: ignore[return-value]


@pytest.fixture
def make_scheduler(resolver_type: ResolverType, clock: ManualClock) -> Callable[[], JobScheduler]:
    """Factory for a scheduler using the current resolver and the manual clock."""

    def _make() -> JobScheduler:
        config = SchedulerConfig(resolver=ResolverConfig(type=resolver_type))
        return JobScheduler(config, clock)

    return _make
