"""jobgraph - dependency-aware priority scheduling for job graphs."""

from .clock import ManualClock, SystemClock
from .config import ResolverConfig, ResolverType, SchedulerConfig, load_config
from .exceptions import (
    CircularDependencyError,
    DuplicateIdentifierError,
    InvalidTransitionError,
    JobGraphError,
    JobNotFoundError,
    MissingReferenceError,
    ParseError,
    QueueEmptyError,
    ValidationError,
)
from .models import Job, JobState, Literal, Reference, Workflow
from .parser import SubmissionParser, build_workflow
from .queue import DelayedQueue, JobQueue, ReadyQueue
from .registry import JobRegistry
from .resolver import IncrementalResolver, ScanResolver, ScanResult, create_resolver
from .scheduler import JobScheduler
from .schemas import JobSpec

__version__ = "0.1.0"

__all__ = [
    # Models
    "Job",
    "JobState",
    "Literal",
    "Reference",
    "Workflow",
    # Engine
    "JobQueue",
    "ReadyQueue",
    "DelayedQueue",
    "JobRegistry",
    "ScanResolver",
    "IncrementalResolver",
    "ScanResult",
    "create_resolver",
    "JobScheduler",
    # Clocks
    "SystemClock",
    "ManualClock",
    # Submissions
    "JobSpec",
    "SubmissionParser",
    "build_workflow",
    # Configuration
    "SchedulerConfig",
    "ResolverConfig",
    "ResolverType",
    "load_config",
    # Errors
    "JobGraphError",
    "DuplicateIdentifierError",
    "JobNotFoundError",
    "InvalidTransitionError",
    "QueueEmptyError",
    "ValidationError",
    "CircularDependencyError",
    "MissingReferenceError",
    "ParseError",
]
