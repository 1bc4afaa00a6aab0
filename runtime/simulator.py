"""
Simulated workflow execution.

Nothing here calls a model provider. The summary describes what the
generated backend would do, and ``execute`` answers chat turns with a
templated response after a fixed delay, keeping per-session history the
same way the generated adapter does.
"""

from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

from langchain_core.messages import AIMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field

from awb.compiler.inspector import WorkflowConfig, extract_config
from awb.compiler.templates import template_paths
from awb.ir.validators import parse_workflow
from awb.memory.conversation_store import ConversationStore

LOGGER = logging.getLogger(__name__)

NO_LLM_NODE_ERROR = "No LLM node found in the workflow"
MASKED_API_KEY = "********"
PREVIEW_CHARS = 30

FILE_DESCRIPTIONS = {
    "app.py": "Main Flask application",
    "routes/workflow_routes.py": "API endpoints for the workflow",
    "routes/__init__.py": "Routes package marker",
    "services/llm_service.py": "Service for LLM API calls using Langchain",
    "services/__init__.py": "Services package marker",
    "utils/workflow_executor.py": "Utility for executing the workflow",
    "utils/__init__.py": "Utils package marker",
    "requirements.txt": "Python dependencies including Langchain",
    ".env": "Environment variables (API keys)",
    "README.md": "Setup and usage instructions",
    "workflow.json": "Your workflow configuration",
}


class SimulationSummary(BaseModel):
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None


class ExecutionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    input: Optional[str] = None
    output: Optional[str] = None
    model: Optional[str] = None
    has_memory: Optional[bool] = Field(default=None, alias="hasMemory")
    error: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def _describe_config(config: WorkflowConfig) -> List[str]:
    return [
        f"- Model: {config.model}",
        f"- Temperature: {config.temperature}",
        f"- API Key: {MASKED_API_KEY if config.api_key_provided else 'Not provided'}",
        f"- Memory: {'enabled' if config.memory_enabled else 'disabled'}",
    ]


class ExecutionSimulator:
    def __init__(
        self,
        *,
        conversation_store: ConversationStore,
        delay_seconds: float = 1.5,
    ) -> None:
        self.conversation_store = conversation_store
        self.delay_seconds = delay_seconds

    def summarize(self, workflow: Any) -> SimulationSummary:
        try:
            config = extract_config(parse_workflow(workflow))
        except ValueError as exc:
            return SimulationSummary(success=False, error=str(exc))
        if not config.has_llm_node:
            return SimulationSummary(success=False, error=NO_LLM_NODE_ERROR)

        lines = ["# Workflow Execution Results", ""]
        if config.user_messages:
            lines.append("## Input Messages:")
            lines.extend(f'- "{message or "Empty message"}"' for message in config.user_messages)
        else:
            lines.append("No chat input nodes found in the workflow.")

        lines.extend(["", "## LLM Configuration:"])
        lines.extend(_describe_config(config))

        lines.extend(["", "## Generated Response:"])
        if config.first_user_message:
            lines.append(f'"This is a simulated response to: "{config.first_user_message}""')
            lines.append("")
            lines.append(
                "In a real implementation, this would be the actual response "
                "from the LLM API using Langchain."
            )
        else:
            lines.append("No input message provided to generate a response.")

        lines.extend(["", "## Backend Code Generation:"])
        lines.append("The following files have been generated and included in the ZIP file:")
        lines.extend(f"- {path}: {FILE_DESCRIPTIONS[path]}" for path in template_paths())

        lines.extend(["", "## Langchain Integration:"])
        lines.append(
            "The backend uses Langchain to provide a consistent interface for "
            "working with different language models:"
        )
        lines.extend(
            [
                "- OpenAI models (GPT-4o, GPT-3.5-turbo)",
                "- Anthropic models (Claude)",
                "- Google models (Gemini)",
                "- Open source models via Hugging Face (Llama, Mistral)",
            ]
        )
        return SimulationSummary(success=True, text="\n".join(lines) + "\n")

    def execute(self, workflow: Any, input_message: str, session_id: str) -> ExecutionResult:
        config = extract_config(parse_workflow(workflow))
        if not config.has_llm_node:
            return ExecutionResult(success=False, error=NO_LLM_NODE_ERROR)

        text = str(input_message or "")
        if not config.memory_enabled:
            self._wait()
            output = self._render_response(config, text, [])
        else:
            with self.conversation_store.session(session_id) as history:
                history.append(HumanMessage(content=text))
                self._wait()
                output = self._render_response(config, text, list(history))
                history.append(AIMessage(content=output))

        LOGGER.debug(
            "Simulated execution for session %s with model %s (memory=%s)",
            session_id,
            config.model,
            config.memory_enabled,
        )
        return ExecutionResult(
            success=True,
            input=text,
            output=output,
            model=config.model,
            has_memory=config.memory_enabled,
        )

    def clear(self, session_id: str) -> None:
        self.conversation_store.clear(session_id)

    def _wait(self) -> None:
        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)

    @staticmethod
    def _render_response(config: WorkflowConfig, text: str, messages: List[Any]) -> str:
        memory = config.memory_enabled
        parts = [f'This is a simulated response from {config.model} to your input: "{text}".\n\n']

        if memory and len(messages) > 1:
            exchange = (len(messages) + 1) // 2
            parts.append(f"I notice this is message #{exchange} in our conversation. ")
            earlier = [item for item in messages[:-1] if item.type == "human"]
            if earlier:
                preview = str(earlier[-1].content)[:PREVIEW_CHARS]
                parts.append(f'Earlier you asked about "{preview}...". ')
            parts.append("\n\nWith memory enabled, I'm maintaining the full conversation context.")
        elif not memory:
            parts.append(
                "\n\nMemory is currently disabled, so I'm treating this as an "
                "independent message without conversation context."
            )

        parts.append(
            "\n\nIn a real implementation, this would be the actual response from "
            "the LLM API using Langchain with "
            f"{'memory enabled' if memory else 'no memory'}.\n\n"
            "The workflow execution would:\n"
            "1. Take your input message\n"
            f"2. {'Add it to the conversation history' if memory else 'Process it independently'}\n"
            f"3. {'Send the full conversation context to the LLM' if memory else 'Send only the current message to the LLM'}\n"
            "4. Return the generated response\n\n"
        )
        if memory:
            parts.append(
                "With memory enabled, the LLM can reference previous messages and "
                "maintain context throughout the conversation."
            )
        else:
            parts.append(
                "Without memory, each message is treated independently, which can "
                "be more efficient for stateless applications."
            )
        parts.append(
            "\n\nYou can download the generated backend code to see the Langchain "
            f"implementation with {'memory support' if memory else 'optional memory support'}."
        )
        return "".join(parts)
