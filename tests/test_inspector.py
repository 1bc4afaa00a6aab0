"""Tests for workflow parsing and configuration extraction."""

import pytest

from awb.compiler.inspector import extract_config
from awb.ir.validators import WorkflowValidationError, parse_workflow
from awb.llm import DEFAULT_API_KEY, DEFAULT_MODEL, DEFAULT_TEMPERATURE


class TestParseWorkflow:
    """parse_workflow accepts editor payloads and rejects malformed ones."""

    def test_missing_nodes_is_rejected(self):
        with pytest.raises(WorkflowValidationError):
            parse_workflow({"edges": []})

    def test_non_object_is_rejected(self):
        with pytest.raises(WorkflowValidationError):
            parse_workflow(["not", "a", "workflow"])

    def test_node_without_type_is_rejected(self):
        with pytest.raises(WorkflowValidationError):
            parse_workflow({"nodes": [{"id": "n1", "data": {}}]})

    def test_node_data_must_be_a_mapping(self):
        with pytest.raises(WorkflowValidationError):
            parse_workflow({"nodes": [{"id": "n1", "type": "llm", "data": "gpt-4o"}]})

    def test_ids_and_edges_are_opaque(self):
        payload = {
            "nodes": [{"id": 7, "type": "llm", "data": {}}, {"type": "output"}],
            "edges": [{"source": 7}, {"id": None, "target": "x", "label": "free"}],
        }
        workflow = parse_workflow(payload)

        assert workflow.to_payload() == payload
        assert extract_config(workflow).llm_node_id == 7

    def test_edges_default_to_empty(self):
        workflow = parse_workflow({"nodes": []})
        assert workflow.edges == []

    def test_editor_keys_survive_round_trip(self):
        payload = {
            "nodes": [
                {
                    "id": "n1",
                    "type": "llm",
                    "position": {"x": 10, "y": 20},
                    "data": {"model": "gpt-4o", "label": "LLM"},
                }
            ],
            "edges": [
                {"id": "e1", "source": "n1", "target": "n2", "sourceHandle": None}
            ],
            "viewport": {"zoom": 1.5},
        }
        assert parse_workflow(payload).to_payload() == payload


class TestExtractConfig:
    """First-match-per-role extraction with per-field defaults."""

    def test_defaults_for_empty_llm_data(self, workflow_factory):
        config = extract_config(parse_workflow(workflow_factory({})))

        assert config.has_llm_node is True
        assert config.model == DEFAULT_MODEL == "gemini-2.0-flash"
        assert config.api_key == DEFAULT_API_KEY == "${GEMINI_API_KEY}"
        assert config.temperature == DEFAULT_TEMPERATURE == "0.7"
        assert config.memory_enabled is False
        assert config.api_key_provided is False

    def test_no_llm_node_uses_defaults_without_error(self, workflow_factory):
        config = extract_config(parse_workflow(workflow_factory(include_llm=False)))

        assert config.has_llm_node is False
        assert config.model == DEFAULT_MODEL
        assert config.memory_enabled is False
        assert config.first_user_message == "Hello there"

    def test_empty_strings_fall_back_per_field(self, workflow_factory):
        workflow = workflow_factory({"model": "", "apiKey": "sk-test", "temperature": ""})
        config = extract_config(parse_workflow(workflow))

        assert config.model == DEFAULT_MODEL
        assert config.api_key == "sk-test"
        assert config.api_key_provided is True
        assert config.temperature == DEFAULT_TEMPERATURE

    def test_numeric_temperature_is_rendered_as_text(self, workflow_factory):
        config = extract_config(parse_workflow(workflow_factory({"temperature": 0})))
        assert config.temperature == "0"

    def test_only_first_llm_node_is_read(self):
        workflow = {
            "nodes": [
                {"id": "a", "type": "llm", "data": {"model": "claude-3-opus"}},
                {"id": "b", "type": "llm", "data": {"model": "gpt-4o", "memory": True}},
            ]
        }
        config = extract_config(parse_workflow(workflow))

        assert config.llm_node_id == "a"
        assert config.model == "claude-3-opus"
        assert config.memory_enabled is False

    def test_chat_messages_are_collected_in_node_order(self):
        workflow = {
            "nodes": [
                {"id": "c1", "type": "chatInput", "data": {}},
                {"id": "c2", "type": "chatInput", "data": {"message": "second"}},
            ]
        }
        config = extract_config(parse_workflow(workflow))

        assert config.first_user_message is None
        assert config.user_messages == ["", "second"]

    def test_edges_do_not_affect_extraction(self, workflow_factory):
        connected = workflow_factory({"model": "gpt-4o"})
        disconnected = dict(connected, edges=[])

        assert extract_config(parse_workflow(connected)) == extract_config(
            parse_workflow(disconnected)
        )
