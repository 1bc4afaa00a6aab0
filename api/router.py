"""
FastAPI router for the AI Workflow Backend builder.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from awb.llm import MODEL_CATALOG
from awb.main import WorkflowBackendBuilder
from awb.services.execution_service import DEFAULT_SESSION_ID


class ExecuteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    workflow: Dict[str, Any]
    input: str = ""
    session_id: str = Field(default=DEFAULT_SESSION_ID, alias="sessionId")


class ClearHistoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(default=DEFAULT_SESSION_ID, alias="sessionId")


def get_builder(request: Request) -> WorkflowBackendBuilder:
    return request.app.state.builder


def _failure(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


router = APIRouter(prefix="/api", tags=["awb"])


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/langchain-models")
def langchain_models() -> Dict[str, Any]:
    return {
        "success": True,
        "models": [
            {
                "provider": entry["provider"],
                "models": entry["models"],
                "apiKeyEnv": entry["apiKeyEnv"],
            }
            for entry in MODEL_CATALOG
        ],
    }


@router.post("/generate-backend")
def generate_backend(
    payload: Dict[str, Any],
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Any:
    stage = builder.generation.generate(payload)
    if not stage.generation.success:
        return _failure("Failed to generate backend")
    summary = stage.summary
    return {
        "success": True,
        "files": [item.model_dump() for item in stage.generation.files],
        "executionResult": summary.text if summary.success else summary.error,
    }


@router.post("/generate-backend/archive")
def generate_backend_archive(
    payload: Dict[str, Any],
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Any:
    result = builder.generation.export_archive(payload)
    if not result.success:
        return _failure("Failed to generate backend")
    summary = result.summary
    return {
        "success": True,
        "downloadUrl": result.handle,
        "filename": result.filename,
        "size": result.size,
        "executionResult": (summary.text if summary.success else summary.error) if summary else None,
    }


@router.get("/archives/{archive_id}")
def download_archive(
    archive_id: str,
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Response:
    stored = builder.archive_store.get(archive_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Archive not found: {archive_id}")
    return Response(
        content=stored.content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{stored.filename}"'},
    )


@router.delete("/archives/{archive_id}")
def release_archive(
    archive_id: str,
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Dict[str, Any]:
    return {"success": True, "released": builder.archive_store.release(archive_id)}


@router.post("/execute-workflow")
def execute_workflow(
    payload: ExecuteRequest,
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Any:
    stage = builder.execution.execute(
        workflow=payload.workflow,
        input_message=payload.input,
        session_id=payload.session_id,
    )
    if not stage.handled or stage.result is None:
        return _failure("Failed to execute workflow")
    return stage.result.to_payload()


@router.delete("/execute-workflow")
def clear_workflow_history(
    payload: Optional[ClearHistoryRequest] = None,
    builder: WorkflowBackendBuilder = Depends(get_builder),
) -> Dict[str, Any]:
    session_id = payload.session_id if payload else DEFAULT_SESSION_ID
    return builder.execution.clear_history(session_id)
