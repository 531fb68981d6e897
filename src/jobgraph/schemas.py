"""Pydantic schemas for job-graph submissions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .models import MAX_PRIORITY, MIN_PRIORITY


class JobSpec(BaseModel):
    """One node of a submitted job tree.

    Each parameter is either a literal string or a nested job whose output the
    parent consumes.
    """

    job_name: str
    parameters: list[str | JobSpec] = Field(default_factory=list)
    priority: int = Field(default=MIN_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    delay_until: datetime | None = None  # Epoch seconds or ISO-8601; naive means UTC

    @field_validator("parameters", mode="before")
    @classmethod
    def coerce_parameters(cls, v: Any) -> list[Any]:
        """Wrap scalars in a list and stringify non-mapping values."""
        if v is None:
            return []
        if not isinstance(v, list):
            v = [v]
        return [item if isinstance(item, (dict, JobSpec)) else str(item) for item in v]  # type: ignore[misc]

    @field_validator("delay_until")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive datetimes as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def delay_until_timestamp(self) -> int | None:
        """delay_until as whole seconds since the epoch."""
        if self.delay_until is None:
            return None
        return int(self.delay_until.timestamp())

    def count_jobs(self) -> int:
        """Number of jobs in this subtree, including this one."""
        return 1 + sum(p.count_jobs() for p in self.parameters if isinstance(p, JobSpec))


JobSpec.model_rebuild()
