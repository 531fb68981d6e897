"""Submission parsing and registration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Argument, Literal, Reference, Workflow
from .schemas import JobSpec

if TYPE_CHECKING:
    from .registry import JobRegistry


class SubmissionParser:
    """Parser for job-graph submission files (YAML or JSON)."""

    def parse_file(self, file_path: Path | str) -> JobSpec:
        """Parse a submission file into its root JobSpec."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                # JSON is a subset of YAML, so one loader covers both
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse submission: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("Submission must contain a job mapping at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> JobSpec:
        """Validate an already-loaded submission mapping."""
        try:
            return JobSpec(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid submission structure: {e}") from e


def build_workflow(registry: JobRegistry, spec: JobSpec) -> Workflow:
    """Register a submitted job tree and return its workflow.

    Nodes are registered depth-first with children before their parent, each
    with a fresh ID from the registry, so every Reference points at a job that
    already exists.
    """
    job_ids: list[int] = []
    root_id = _register_tree(registry, spec, job_ids)
    return Workflow(root_id=root_id, job_ids=job_ids)


def _register_tree(registry: JobRegistry, spec: JobSpec, job_ids: list[int]) -> int:
    arguments: list[Argument] = []
    for param in spec.parameters:
        if isinstance(param, JobSpec):
            arguments.append(Reference(_register_tree(registry, param, job_ids)))
        else:
            arguments.append(Literal(param))

    job_id = registry.create(
        spec.job_name,
        arguments,
        priority=spec.priority,
        delay_until=spec.delay_until_timestamp,
    )
    job_ids.append(job_id)
    return job_id
