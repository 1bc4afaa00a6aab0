"""AI Workflow Backend builder package."""

from awb.main import BackendBundle, WorkflowBackendBuilder

__all__ = ["WorkflowBackendBuilder", "BackendBundle"]
