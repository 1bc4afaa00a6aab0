"""
Workflow inspection: pull the generation parameters out of the editor graph.

Only the first node of each role is read. A workflow with several LLM nodes
generates exactly the same backend as one holding just the first of them;
edges are never consulted.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from awb.ir.workflow_schema import CHAT_INPUT_NODE, LLM_NODE, Workflow
from awb.llm import DEFAULT_API_KEY, DEFAULT_MODEL, DEFAULT_TEMPERATURE


class WorkflowConfig(BaseModel):
    model: str = DEFAULT_MODEL
    api_key: str = DEFAULT_API_KEY
    temperature: str = DEFAULT_TEMPERATURE
    memory_enabled: bool = False
    first_user_message: Optional[str] = None
    api_key_provided: bool = False
    has_llm_node: bool = False
    llm_node_id: Optional[Any] = None
    user_messages: List[str] = Field(default_factory=list)


def _text_or_default(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value)
    return text if text.strip() else default


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def extract_config(workflow: Workflow) -> WorkflowConfig:
    chat_nodes = workflow.nodes_of_type(CHAT_INPUT_NODE)
    user_messages = [str(node.data.get("message") or "") for node in chat_nodes]
    first_user_message: Optional[str] = None
    if chat_nodes and chat_nodes[0].data.get("message") is not None:
        first_user_message = str(chat_nodes[0].data["message"])

    llm_node = workflow.first_node(LLM_NODE)
    if llm_node is None:
        return WorkflowConfig(
            first_user_message=first_user_message,
            user_messages=user_messages,
        )

    data = llm_node.data
    return WorkflowConfig(
        model=_text_or_default(data.get("model"), DEFAULT_MODEL),
        api_key=_text_or_default(data.get("apiKey"), DEFAULT_API_KEY),
        temperature=_text_or_default(data.get("temperature"), DEFAULT_TEMPERATURE),
        memory_enabled=_flag(data.get("memory", False)),
        api_key_provided=bool(str(data.get("apiKey") or "").strip()),
        first_user_message=first_user_message,
        has_llm_node=True,
        llm_node_id=llm_node.id,
        user_messages=user_messages,
    )
