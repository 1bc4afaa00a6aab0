"""Shared fixtures for the AWB test suite."""

import copy

import pytest
from fastapi.testclient import TestClient

from awb.api.app import create_app
from awb.config import Settings
from awb.main import WorkflowBackendBuilder

SCENARIO_WORKFLOW = {
    "nodes": [
        {"id": "1", "type": "chatInput", "data": {"message": "Hi"}},
        {"id": "2", "type": "llm", "data": {"model": "gpt-4o", "temperature": "0.5"}},
    ],
    "edges": [{"id": "e1", "source": "1", "target": "2"}],
}


def make_workflow(llm_data=None, message="Hello there", include_llm=True):
    nodes = [{"id": "chat-1", "type": "chatInput", "data": {"message": message}}]
    if include_llm:
        nodes.append({"id": "llm-1", "type": "llm", "data": dict(llm_data or {})})
    nodes.append({"id": "out-1", "type": "output", "data": {}})
    return {
        "nodes": nodes,
        "edges": [
            {"id": "e1", "source": "chat-1", "target": "llm-1"},
            {"id": "e2", "source": "llm-1", "target": "out-1"},
        ],
    }


@pytest.fixture
def workflow_factory():
    return make_workflow


@pytest.fixture
def scenario_workflow():
    return copy.deepcopy(SCENARIO_WORKFLOW)


@pytest.fixture
def settings():
    return Settings(simulated_delay_seconds=0, max_archives=4)


@pytest.fixture
def builder(settings):
    return WorkflowBackendBuilder(settings)


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
