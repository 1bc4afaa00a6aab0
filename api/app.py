"""FastAPI application serving workflow export and simulated execution."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from awb.api.router import router
from awb.config import Settings
from awb.main import WorkflowBackendBuilder, configure_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AI Workflow Backend Builder",
        description="Export editor workflows as backend bundles and simulate their execution",
        version="0.1.0",
    )
    app.state.builder = WorkflowBackendBuilder(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
