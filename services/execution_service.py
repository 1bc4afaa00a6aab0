"""
Execution-stage service for simulated chat runs and history clearing.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from awb.runtime.simulator import ExecutionResult, ExecutionSimulator

LOGGER = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class ExecutionStageResult(BaseModel):
    handled: bool
    result: Optional[ExecutionResult] = None
    error: Optional[str] = None


class ExecutionService:
    def __init__(self, *, simulator: ExecutionSimulator) -> None:
        self.simulator = simulator

    def execute(
        self,
        *,
        workflow: Any,
        input_message: str,
        session_id: Optional[str] = None,
    ) -> ExecutionStageResult:
        try:
            result = self.simulator.execute(
                workflow, input_message, session_id or DEFAULT_SESSION_ID
            )
        except Exception as exc:
            LOGGER.warning("Simulated execution failed: %s", exc)
            return ExecutionStageResult(handled=False, error=str(exc))
        return ExecutionStageResult(handled=True, result=result)

    def clear_history(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        self.simulator.clear(session_id or DEFAULT_SESSION_ID)
        return {"success": True, "message": "Conversation history cleared"}
