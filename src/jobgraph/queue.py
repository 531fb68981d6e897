"""Two-tier job queue: a priority-ordered ready queue and a due-time-ordered delayed queue.

Queues only hold job IDs plus their ordering keys; job state lives in the
registry.
"""

from __future__ import annotations

import heapq
import itertools

from .logger import get_logger

logger = get_logger()


class ReadyQueue:
    """Jobs runnable now, highest priority first.

    Ties on priority are broken by earliest enqueue time, then by insertion
    order, so equal-priority jobs come out first-in first-out.
    """

    def __init__(self) -> None:
        # (-priority, enqueue_time, seq, job_id)
        self._heap: list[tuple[int, int, int, int]] = []
        self._seq = itertools.count()

    def push(self, job_id: int, priority: int, enqueue_time: int) -> None:
        heapq.heappush(self._heap, (-priority, enqueue_time, next(self._seq), job_id))

    def pop(self) -> int | None:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[3]

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)


class DelayedQueue:
    """Jobs that may not run before a due time, soonest due time first.

    Priority is carried as payload only and takes no part in the ordering.
    """

    def __init__(self) -> None:
        # (due_time, seq, job_id, priority)
        self._heap: list[tuple[int, int, int, int]] = []
        self._seq = itertools.count()

    def push(self, job_id: int, priority: int, due_time: int) -> None:
        heapq.heappush(self._heap, (due_time, next(self._seq), job_id, priority))

    def peek_due(self, now: int) -> bool:
        """Return True if the head entry is due at ``now``."""
        return bool(self._heap) and self._heap[0][0] <= now

    def next_due_time(self) -> int | None:
        return self._heap[0][0] if self._heap else None

    def pop(self) -> tuple[int, int] | None:
        """Remove the head entry and return ``(job_id, priority)``."""
        if not self._heap:
            return None
        _, _, job_id, priority = heapq.heappop(self._heap)
        return job_id, priority

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)


class JobQueue:
    """Ready and delayed queues plus promotion between them."""

    def __init__(self) -> None:
        self.ready = ReadyQueue()
        self.delayed = DelayedQueue()

    def add_job(self, job_id: int, priority: int, enqueue_time: int) -> None:
        logger.debug(f"queue: ready <- job {job_id} (priority {priority}, t={enqueue_time})")
        self.ready.push(job_id, priority, enqueue_time)

    def delay_job(self, job_id: int, priority: int, due_time: int) -> None:
        logger.debug(f"queue: delayed <- job {job_id} (priority {priority}, due {due_time})")
        self.delayed.push(job_id, priority, due_time)

    def promote_due(self, now: int) -> list[int]:
        """Move every delayed entry due at ``now`` into the ready queue.

        Promoted entries are enqueued with ``now`` as their enqueue time. The
        caller is responsible for moving the jobs to WAITING in the registry.

        Returns:
            Promoted job IDs in due-time order
        """
        promoted: list[int] = []
        while self.delayed.peek_due(now):
            entry = self.delayed.pop()
            assert entry is not None
            job_id, priority = entry
            self.ready.push(job_id, priority, now)
            promoted.append(job_id)
        if promoted:
            logger.debug(f"queue: promoted {promoted} at t={now}")
        return promoted

    def pop(self) -> int | None:
        return self.ready.pop()

    def is_empty(self) -> bool:
        """True only when there is neither ready nor future work."""
        return self.ready.is_empty() and self.delayed.is_empty()

    def next_due_time(self) -> int | None:
        return self.delayed.next_due_time()