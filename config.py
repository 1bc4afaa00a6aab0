"""
Process-wide settings for the AI Workflow Backend builder.
"""

from __future__ import annotations

import os
from typing import List

from pydantic import BaseModel, Field

ENV_PREFIX = "AWB_"


class Settings(BaseModel):
    simulated_delay_seconds: float = Field(default=1.5, ge=0, le=30)
    history_limit: int = Field(default=20, ge=2)
    max_archives: int = Field(default=32, ge=1)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    archive_filename: str = "ai-workflow-backend.zip"

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        delay = os.getenv(f"{ENV_PREFIX}SIMULATED_DELAY_SECONDS")
        if delay:
            values["simulated_delay_seconds"] = float(delay)
        history_limit = os.getenv(f"{ENV_PREFIX}HISTORY_LIMIT")
        if history_limit:
            values["history_limit"] = int(history_limit)
        max_archives = os.getenv(f"{ENV_PREFIX}MAX_ARCHIVES")
        if max_archives:
            values["max_archives"] = int(max_archives)
        origins = os.getenv(f"{ENV_PREFIX}CORS_ORIGINS")
        if origins:
            values["cors_origins"] = [item.strip() for item in origins.split(",") if item.strip()]
        log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.strip().upper()
        return cls(**values)
