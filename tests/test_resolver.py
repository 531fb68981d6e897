"""Tests for readiness evaluation, run against every resolver."""

import pytest

from jobgraph.clock import ManualClock
from jobgraph.config import ResolverType
from jobgraph.models import JobState, Literal, Reference, Workflow
from jobgraph.protocols import ReadinessResolver
from jobgraph.registry import JobRegistry
from jobgraph.resolver import IncrementalResolver, ScanResolver, create_resolver


@pytest.fixture
def resolver(resolver_type: ResolverType) -> ReadinessResolver:
    return create_resolver(resolver_type)


def _workflow(*job_ids: int) -> Workflow:
    return Workflow(root_id=job_ids[-1], job_ids=list(job_ids))


class TestReadiness:
    """Test which jobs each evaluation activates or delays."""

    def test_jobs_without_arguments_activate_on_first_scan(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        a = registry.create("a")
        b = registry.create("b", priority=3)

        result = resolver.evaluate(_workflow(a, b), registry, clock)

        assert result.activated == [a, b]
        assert result.delayed == []
        assert registry.get(a).state == JobState.WAITING
        assert registry.get(b).state == JobState.WAITING

    def test_literal_arguments_are_always_satisfied(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        job_id = registry.create("echo", [Literal("hello"), Literal("world")])

        result = resolver.evaluate(_workflow(job_id), registry, clock)

        assert result.activated == [job_id]

    def test_future_delay_goes_to_delayed_queue(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        job_id = registry.create("later", delay_until=clock.now() + 100)

        result = resolver.evaluate(_workflow(job_id), registry, clock)

        assert result.delayed == [job_id]
        assert registry.get(job_id).state == JobState.DELAYED
        assert registry.queue.next_due_time() == clock.now() + 100

    @pytest.mark.parametrize("offset", [0, -50])
    def test_due_or_past_delay_activates_immediately(
        self,
        registry: JobRegistry,
        clock: ManualClock,
        resolver: ReadinessResolver,
        offset: int,
    ) -> None:
        job_id = registry.create("now", delay_until=clock.now() + offset)

        result = resolver.evaluate(_workflow(job_id), registry, clock)

        assert result.activated == [job_id]
        assert registry.get(job_id).state == JobState.WAITING

    def test_second_scan_is_idempotent(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        a = registry.create("a")
        b = registry.create("b", delay_until=clock.now() + 10)
        c = registry.create("c", [Reference(a)])
        workflow = _workflow(a, b, c)

        first = resolver.evaluate(workflow, registry, clock)
        second = resolver.evaluate(workflow, registry, clock)

        assert first
        assert not second
        assert len(registry.queue.ready) == 1
        assert len(registry.queue.delayed) == 1

    def test_dependencies_are_conjunctive(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        a = registry.create("a")
        b = registry.create("b")
        both = registry.create("both", [Reference(a), Literal("x"), Reference(b)])
        workflow = _workflow(a, b, both)
        resolver.evaluate(workflow, registry, clock)

        registry.finish(a)
        assert resolver.evaluate(workflow, registry, clock).activated == []
        assert registry.get(both).state == JobState.NOT_STARTED

        registry.finish(b)
        assert resolver.evaluate(workflow, registry, clock).activated == [both]
        assert registry.get(both).state == JobState.WAITING

    def test_ready_dependent_with_future_delay_is_delayed(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        a = registry.create("a")
        b = registry.create("b", [Reference(a)], delay_until=clock.now() + 500)
        workflow = _workflow(a, b)
        resolver.evaluate(workflow, registry, clock)

        registry.finish(a)
        result = resolver.evaluate(workflow, registry, clock)

        assert result.delayed == [b]
        assert registry.get(b).state == JobState.DELAYED

    def test_dependency_finished_before_first_scan(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        upstream = registry.create("upstream")
        registry.finish(upstream)
        downstream = registry.create("downstream", [Reference(upstream)])

        result = resolver.evaluate(_workflow(downstream), registry, clock)

        assert result.activated == [downstream]

    def test_only_scans_the_given_workflow(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        inside = registry.create("inside")
        outside = registry.create("outside")

        resolver.evaluate(_workflow(inside), registry, clock)

        assert registry.get(outside).state == JobState.NOT_STARTED

    def test_chain_unblocks_one_link_at_a_time(
        self, registry: JobRegistry, clock: ManualClock, resolver: ReadinessResolver
    ) -> None:
        first = registry.create("first")
        second = registry.create("second", [Reference(first)])
        third = registry.create("third", [Reference(second)])
        workflow = _workflow(first, second, third)

        assert resolver.evaluate(workflow, registry, clock).activated == [first]
        registry.finish(first)
        assert resolver.evaluate(workflow, registry, clock).activated == [second]
        registry.finish(second)
        assert resolver.evaluate(workflow, registry, clock).activated == [third]


class TestCreateResolver:
    """Test the resolver factory."""

    def test_default_is_scan(self) -> None:
        assert isinstance(create_resolver(), ScanResolver)

    def test_incremental(self) -> None:
        assert isinstance(create_resolver(ResolverType.INCREMENTAL), IncrementalResolver)

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown resolver type"):
            create_resolver("bogus")  # type: ignore[arg-type]
