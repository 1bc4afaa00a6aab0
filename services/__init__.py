"""
Request-stage services.
"""

from awb.services.execution_service import ExecutionService, ExecutionStageResult
from awb.services.generation_service import (
    ArchiveExportResult,
    GenerationService,
    GenerationStageResult,
)

__all__ = [
    "ArchiveExportResult",
    "ExecutionService",
    "ExecutionStageResult",
    "GenerationService",
    "GenerationStageResult",
]
