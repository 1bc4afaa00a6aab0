"""
Typed representation of the workflow graph exported by the editor.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

CHAT_INPUT_NODE = "chatInput"
LLM_NODE = "llm"
OUTPUT_NODE = "output"


class EditorModel(BaseModel):
    """Base model that keeps editor-only keys so the graph can be echoed back."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class WorkflowNode(EditorModel):
    # Opaque editor id, echoed back as received.
    id: Any = None
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class WorkflowEdge(EditorModel):
    """Editor edge. Never consulted, so every field is optional and untyped."""

    id: Any = None
    source: Any = None
    target: Any = None
    source_handle: Any = Field(default=None, alias="sourceHandle")
    target_handle: Any = Field(default=None, alias="targetHandle")


class Workflow(EditorModel):
    nodes: List[WorkflowNode]
    edges: List[WorkflowEdge] = Field(default_factory=list)

    def nodes_of_type(self, node_type: str) -> List[WorkflowNode]:
        return [node for node in self.nodes if node.type == node_type]

    def first_node(self, node_type: str) -> Optional[WorkflowNode]:
        matches = self.nodes_of_type(node_type)
        return matches[0] if matches else None

    def to_payload(self) -> Dict[str, Any]:
        """Return the graph exactly as it was received, editor keys included."""

        return self.model_dump(by_alias=True, exclude_unset=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_payload(), indent=indent, ensure_ascii=False)


class GeneratedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str
