"""Tests for backend generation from editor workflows."""

import ast
import json

import pytest

from awb.compiler.backend_codegen import BackendCodeGenerator
from awb.compiler.templates import template_paths
from awb.llm import ProviderFamily

ADAPTER = "services/llm_service.py"
EXECUTOR = "utils/workflow_executor.py"
ROUTES = "routes/workflow_routes.py"


@pytest.fixture
def generator():
    return BackendCodeGenerator()


def _content(result, path):
    item = result.file(path)
    assert item is not None, path
    return item.content


class TestGeneration:
    def test_scenario_workflow(self, generator, scenario_workflow):
        result = generator.generate(scenario_workflow)

        assert result.success
        adapter = _content(result, ADAPTER)
        assert '"gpt-4o"' in adapter
        assert "TEMPERATURE = 0.5" in adapter
        assert result.paths() == list(template_paths())
        assert result.paths()[-1] == "workflow.json"
        assert json.loads(_content(result, "workflow.json")) == scenario_workflow

    def test_generation_is_deterministic(self, generator, scenario_workflow):
        first = generator.generate(scenario_workflow)
        second = generator.generate(scenario_workflow)

        assert first.files == second.files

    def test_defaults_for_empty_llm_data(self, generator, workflow_factory):
        adapter = _content(generator.generate(workflow_factory({})), ADAPTER)

        assert 'MODEL = "gemini-2.0-flash"' in adapter
        assert "TEMPERATURE = 0.7" in adapter
        assert "${GEMINI_API_KEY}" in adapter
        assert 'USE_MEMORY = "false" == "true"' in adapter

    def test_no_llm_node_still_generates_everything(self, generator, workflow_factory):
        result = generator.generate(workflow_factory(include_llm=False))

        assert result.success
        assert result.paths() == list(template_paths())
        assert all(item.content for item in result.files)
        assert "gemini-2.0-flash" in _content(result, ADAPTER)

    def test_malformed_workflow_is_a_failure_result(self, generator):
        result = generator.generate({"edges": []})

        assert result.success is False
        assert result.files == []
        assert "nodes" in result.error

    def test_env_reuses_the_single_api_key(self, generator, workflow_factory):
        env = _content(generator.generate(workflow_factory({"apiKey": "sk-abc"})), ".env")

        for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY", "HUGGINGFACEHUB_API_TOKEN"):
            assert f"{name}=sk-abc" in env

    def test_requirements_cover_every_provider_family(self, generator, workflow_factory):
        requirements = _content(generator.generate(workflow_factory({})), "requirements.txt")

        for package in ("langchain-openai", "langchain-anthropic", "langchain-google-genai", "langchain-huggingface"):
            assert package in requirements

    def test_readme_documents_literal_substitution(self, generator, workflow_factory):
        readme = _content(generator.generate(workflow_factory({"apiKey": "sk-abc"})), "README.md")

        assert "without escaping" in readme
        assert "put the real one in `.env`" in readme

    def test_path_set_does_not_depend_on_values(self, generator, workflow_factory):
        first = generator.generate(workflow_factory({"model": "gpt-4o", "temperature": "0.1"}))
        second = generator.generate(workflow_factory({"model": "claude-3-haiku", "apiKey": "x"}))

        assert first.paths() == second.paths()


class TestProviderBranches:
    @pytest.mark.parametrize(
        "model, family, key_env, provider_name",
        [
            ("gpt-4o", ProviderFamily.OPENAI, "OPENAI_API_KEY", "OpenAI"),
            ("claude-3-opus", ProviderFamily.ANTHROPIC, "ANTHROPIC_API_KEY", "Anthropic"),
            ("gemini-2.0-flash", ProviderFamily.GOOGLE, "GOOGLE_API_KEY", "Google"),
            ("mistral-7b", ProviderFamily.OPEN_WEIGHT, "HUGGINGFACEHUB_API_TOKEN", "Hugging Face"),
        ],
    )
    def test_known_models_select_their_family(
        self, generator, workflow_factory, model, family, key_env, provider_name
    ):
        result = generator.generate(workflow_factory({"model": model}))
        adapter = _content(result, ADAPTER)

        assert result.provider is family
        assert f'API_KEY = os.getenv("{key_env}")' in adapter
        assert f"Provider family: {provider_name}" in adapter

    def test_adapter_keeps_every_branch_whatever_the_model(self, generator, workflow_factory):
        adapter = _content(generator.generate(workflow_factory({"model": "gpt-4o"})), ADAPTER)

        for marker in (
            'if "gpt" in model:',
            'if "claude" in model:',
            'if "gemini" in model:',
            'if "llama" in model or "mistral" in model:',
            "return ChatAnthropic(",
            "return ChatGoogleGenerativeAI(",
            "HuggingFaceEndpoint(",
            "from langchain_anthropic import ChatAnthropic",
        ):
            assert marker in adapter
        assert "def update_model(" in adapter
        assert "self._llm = self._initialize_llm()" in adapter

    def test_unknown_model_falls_back_with_notice(self, generator, workflow_factory):
        result = generator.generate(workflow_factory({"model": "foo-model"}))
        adapter = _content(result, ADAPTER)

        assert result.provider is ProviderFamily.UNKNOWN
        assert 'MODEL = "foo-model"' in adapter
        assert "Model type not recognized: {self.model}. Defaulting to gpt-4o." in adapter
        assert 'model="gpt-4o"' in adapter
        assert 'API_KEY = os.getenv("OPENAI_API_KEY")' in adapter


class TestGeneratedSourceCompiles:
    @pytest.mark.parametrize(
        "model",
        ["gpt-4o", "claude-3-haiku", "gemini-2.0-flash", "meta-llama/Llama-2-70b-chat-hf", "foo-model"],
    )
    @pytest.mark.parametrize("memory", [True, False])
    def test_every_python_file_parses(self, generator, workflow_factory, model, memory):
        result = generator.generate(workflow_factory({"model": model, "memory": memory}))

        python_files = [item for item in result.files if item.path.endswith(".py")]
        assert len(python_files) == 7
        for item in python_files:
            ast.parse(item.content, filename=item.path)


class TestLenientGraphShapes:
    def test_edges_without_ids_are_accepted(self, generator):
        workflow = {
            "nodes": [{"id": "1", "type": "llm", "data": {}}],
            "edges": [{"source": "1", "target": "2"}],
        }
        result = generator.generate(workflow)

        assert result.success
        assert json.loads(_content(result, "workflow.json")) == workflow

    def test_numeric_node_ids_are_echoed_verbatim(self, generator, workflow_factory):
        workflow = workflow_factory({"model": "gpt-4o"})
        workflow["nodes"].append({"id": 7, "type": "output", "data": {}})
        workflow["edges"].append({"id": 3, "source": "llm-1", "target": 7, "sourceHandle": None})
        result = generator.generate(workflow)

        assert result.success
        assert json.loads(_content(result, "workflow.json")) == workflow


class TestMemoryToggle:
    def test_memory_enabled_variants(self, generator, workflow_factory):
        result = generator.generate(workflow_factory({"memory": True}))

        assert 'USE_MEMORY = "true" == "true"' in _content(result, ADAPTER)
        assert "/clear-memory" in _content(result, ROUTES)
        executor = _content(result, EXECUTOR)
        assert "clear_conversation_history" in executor
        assert "session_id=session_id" in executor
        readme = _content(result, "README.md")
        assert "Memory is currently **enabled**" in readme
        assert "POST /api/clear-memory" in readme
        assert "Memory is currently **disabled**" not in readme

    def test_memory_disabled_variants(self, generator, workflow_factory):
        result = generator.generate(workflow_factory({"memory": False}))

        assert "/clear-memory" not in _content(result, ROUTES)
        executor = _content(result, EXECUTOR)
        assert "clear_conversation_history" not in executor
        assert "session_id" not in executor
        readme = _content(result, "README.md")
        assert "Memory is currently **disabled**" in readme
        assert "/api/clear-memory" not in readme
        assert "Memory is currently **enabled**" not in readme

    def test_memory_toggle_keeps_path_set(self, generator, workflow_factory):
        on = generator.generate(workflow_factory({"memory": True}))
        off = generator.generate(workflow_factory({"memory": False}))

        assert on.paths() == off.paths()

    def test_adapter_caps_history_at_twenty_messages(self, generator, workflow_factory):
        adapter = _content(generator.generate(workflow_factory({"memory": True})), ADAPTER)
        assert "MAX_HISTORY_MESSAGES = 20" in adapter
