from awb.compiler.archive import ArchiveBuildError, ArchiveBuilder
from awb.compiler.backend_codegen import BackendCodeGenerator, GenerationResult
from awb.compiler.inspector import WorkflowConfig, extract_config
from awb.compiler.templates import TEMPLATE_SET, BackendTemplate, Fragment, TemplateRenderError

__all__ = [
    "ArchiveBuilder",
    "ArchiveBuildError",
    "BackendCodeGenerator",
    "GenerationResult",
    "WorkflowConfig",
    "extract_config",
    "BackendTemplate",
    "Fragment",
    "TemplateRenderError",
    "TEMPLATE_SET",
]
