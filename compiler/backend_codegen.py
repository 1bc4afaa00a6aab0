"""
Backend source generation from an editor workflow.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from awb.compiler.inspector import WorkflowConfig, extract_config
from awb.compiler.templates import (
    MEMORY_CHOICE,
    MEMORY_OFF,
    MEMORY_ON,
    PROVIDER_NAMES,
    TEMPLATE_SET,
    WORKFLOW_CONFIG_PATH,
    BackendTemplate,
)
from awb.ir.validators import parse_workflow
from awb.ir.workflow_schema import GeneratedFile, Workflow
from awb.llm import MODEL_CATALOG, ProviderFamily, classify_provider

LOGGER = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    success: bool
    files: List[GeneratedFile] = Field(default_factory=list)
    config: Optional[WorkflowConfig] = None
    provider: Optional[ProviderFamily] = None
    error: Optional[str] = None

    def paths(self) -> List[str]:
        return [item.path for item in self.files]

    def file(self, path: str) -> Optional[GeneratedFile]:
        for item in self.files:
            if item.path == path:
                return item
        return None


def _api_key_env(provider: ProviderFamily) -> str:
    for entry in MODEL_CATALOG:
        if entry["family"] == provider.value:
            return entry["apiKeyEnv"]
    return "OPENAI_API_KEY"


class BackendCodeGenerator:
    def __init__(self, templates: Optional[List[BackendTemplate]] = None) -> None:
        self.templates = list(templates) if templates is not None else list(TEMPLATE_SET)

    def generate(self, workflow: Any) -> GenerationResult:
        try:
            parsed = parse_workflow(workflow)
            config = extract_config(parsed)
            provider = classify_provider(config.model)
            files = self.render(parsed, config, provider)
        except Exception as exc:
            LOGGER.warning("Backend generation failed: %s", exc)
            return GenerationResult(success=False, error=str(exc))

        if provider is ProviderFamily.UNKNOWN:
            LOGGER.info(
                "Model %r matches no provider family, generated adapter falls back to OpenAI.",
                config.model,
            )
        return GenerationResult(success=True, files=files, config=config, provider=provider)

    def render(
        self,
        workflow: Workflow,
        config: WorkflowConfig,
        provider: ProviderFamily,
    ) -> List[GeneratedFile]:
        values: Dict[str, str] = {
            "model": config.model,
            "api_key": config.api_key,
            "api_key_env": _api_key_env(provider),
            "temperature": config.temperature,
            "use_memory": str(config.memory_enabled).lower(),
            "provider_name": PROVIDER_NAMES[provider.value],
        }
        choices: Dict[str, str] = {
            MEMORY_CHOICE: MEMORY_ON if config.memory_enabled else MEMORY_OFF,
        }
        files = [
            GeneratedFile(path=template.path, content=template.render(values, choices))
            for template in self.templates
        ]
        files.append(GeneratedFile(path=WORKFLOW_CONFIG_PATH, content=workflow.to_json()))
        return files
