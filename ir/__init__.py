from awb.ir.validators import WorkflowValidationError, parse_workflow
from awb.ir.workflow_schema import (
    CHAT_INPUT_NODE,
    LLM_NODE,
    OUTPUT_NODE,
    GeneratedFile,
    Workflow,
    WorkflowEdge,
    WorkflowNode,
)

__all__ = [
    "Workflow",
    "WorkflowNode",
    "WorkflowEdge",
    "GeneratedFile",
    "CHAT_INPUT_NODE",
    "LLM_NODE",
    "OUTPUT_NODE",
    "WorkflowValidationError",
    "parse_workflow",
]
