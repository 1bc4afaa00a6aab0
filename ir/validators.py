"""
Parsing and validation of editor workflow payloads.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from awb.ir.workflow_schema import Workflow


class WorkflowValidationError(ValueError):
    """Raised when an editor payload cannot be read as a workflow."""


def parse_workflow(payload: Any) -> Workflow:
    if isinstance(payload, Workflow):
        return payload
    if not isinstance(payload, Mapping):
        raise WorkflowValidationError(
            f"Workflow payload must be an object, got {type(payload).__name__}."
        )
    if "nodes" not in payload:
        raise WorkflowValidationError("Workflow payload is missing 'nodes'.")
    try:
        return Workflow.model_validate(dict(payload))
    except ValidationError as exc:
        raise WorkflowValidationError(f"Invalid workflow payload: {exc}") from exc
