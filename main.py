"""
AI Workflow Backend builder (AWB) orchestration entrypoint.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from awb.compiler.archive import ArchiveBuildError, ArchiveBuilder
from awb.compiler.backend_codegen import BackendCodeGenerator
from awb.config import Settings
from awb.memory.conversation_store import ConversationStore
from awb.runtime.archive_store import ArchiveStore
from awb.runtime.simulator import ExecutionSimulator
from awb.services.execution_service import ExecutionService
from awb.services.generation_service import GenerationService

LOGGER = logging.getLogger(__name__)


class BackendBundle(BaseModel):
    success: bool
    paths: List[str] = Field(default_factory=list)
    archive: Optional[bytes] = None
    filename: Optional[str] = None
    summary: Optional[str] = None
    error: Optional[str] = None


class WorkflowBackendBuilder:
    """Owns the process-wide stores and the services that share them."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self.conversation_store = ConversationStore(max_messages=self.settings.history_limit)
        self.archive_store = ArchiveStore(
            max_archives=self.settings.max_archives,
            filename=self.settings.archive_filename,
        )
        self.generator = BackendCodeGenerator()
        self.archive_builder = ArchiveBuilder()
        self.simulator = ExecutionSimulator(
            conversation_store=self.conversation_store,
            delay_seconds=self.settings.simulated_delay_seconds,
        )
        self.generation = GenerationService(
            generator=self.generator,
            archive_builder=self.archive_builder,
            archive_store=self.archive_store,
            simulator=self.simulator,
        )
        self.execution = ExecutionService(simulator=self.simulator)

    def build(self, workflow: Any) -> BackendBundle:
        """Generate and pack without registering a download handle."""

        stage = self.generation.generate(workflow)
        if not stage.generation.success:
            return BackendBundle(success=False, error=stage.generation.error)
        try:
            archive = self.archive_builder.pack(stage.generation.files)
        except ArchiveBuildError as exc:
            return BackendBundle(success=False, error=str(exc))
        summary = stage.summary.text if stage.summary.success else stage.summary.error
        return BackendBundle(
            success=True,
            paths=stage.generation.paths(),
            archive=archive,
            filename=self.settings.archive_filename,
            summary=summary,
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_workflow(raw_json: Optional[str], json_file: Optional[str]) -> Dict[str, Any]:
    if raw_json:
        return json.loads(raw_json)
    if json_file:
        return json.loads(Path(json_file).read_text(encoding="utf-8"))
    raise ValueError("Provide --workflow or --workflow-file.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="AI Workflow Backend builder (AWB)")
    parser.add_argument("--workflow", type=str, default=None)
    parser.add_argument("--workflow-file", type=str, default=None)
    parser.add_argument("--output-file", type=str, default=None)
    parser.add_argument("--summary", action="store_true")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    try:
        workflow = _load_workflow(args.workflow, args.workflow_file)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Could not read workflow: %s", exc)
        print(json.dumps({"success": False, "error": str(exc)}, indent=2))
        return 1
    bundle = WorkflowBackendBuilder(settings).build(workflow)
    if not bundle.success:
        print(json.dumps({"success": False, "error": bundle.error}, indent=2))
        return 1

    output_path = Path(args.output_file or bundle.filename or settings.archive_filename)
    output_path.write_bytes(bundle.archive or b"")
    LOGGER.info("Wrote %s (%d files)", output_path, len(bundle.paths))
    if args.summary and bundle.summary:
        print(bundle.summary)
    print(json.dumps({"success": True, "archive": str(output_path), "files": bundle.paths}, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
