"""
Export-stage service: generate backend files, pack them, hand out a download handle.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel

from awb.compiler.archive import ArchiveBuildError, ArchiveBuilder
from awb.compiler.backend_codegen import BackendCodeGenerator, GenerationResult
from awb.runtime.archive_store import ArchiveStore
from awb.runtime.simulator import ExecutionSimulator, SimulationSummary

LOGGER = logging.getLogger(__name__)


class ArchiveExportResult(BaseModel):
    success: bool
    archive_id: Optional[str] = None
    handle: Optional[str] = None
    filename: Optional[str] = None
    size: int = 0
    summary: Optional[SimulationSummary] = None
    error: Optional[str] = None


class GenerationStageResult(BaseModel):
    generation: GenerationResult
    summary: SimulationSummary


class GenerationService:
    def __init__(
        self,
        *,
        generator: BackendCodeGenerator,
        archive_builder: ArchiveBuilder,
        archive_store: ArchiveStore,
        simulator: ExecutionSimulator,
    ) -> None:
        self.generator = generator
        self.archive_builder = archive_builder
        self.archive_store = archive_store
        self.simulator = simulator

    def generate(self, payload: Any) -> GenerationStageResult:
        generation = self.generator.generate(payload)
        if not generation.success:
            return GenerationStageResult(
                generation=generation,
                summary=SimulationSummary(success=False, error=generation.error),
            )
        return GenerationStageResult(
            generation=generation,
            summary=self.simulator.summarize(payload),
        )

    def export_archive(self, payload: Any) -> ArchiveExportResult:
        stage = self.generate(payload)
        if not stage.generation.success:
            return ArchiveExportResult(success=False, error=stage.generation.error)

        try:
            content = self.archive_builder.pack(stage.generation.files)
        except ArchiveBuildError as exc:
            LOGGER.warning("Archive packaging failed: %s", exc)
            return ArchiveExportResult(success=False, error=str(exc))

        stored = self.archive_store.register(content)
        LOGGER.info(
            "Registered archive %s (%d bytes, %d files)",
            stored.archive_id,
            stored.size,
            len(stage.generation.files),
        )
        return ArchiveExportResult(
            success=True,
            archive_id=stored.archive_id,
            handle=stored.handle,
            filename=stored.filename,
            size=stored.size,
            summary=stage.summary,
        )
