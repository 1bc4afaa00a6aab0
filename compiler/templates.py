"""
Blueprints for every file of the generated backend.

A template is a body plus the names of its value slots and of its
fragments. A fragment is a slot whose text is picked from fixed variants
by a named choice (memory on/off). Rendering is a single pass over
``{name}`` tokens: every occurrence of a declared slot is replaced,
substituted text is never scanned again, and undeclared brace text (dict
literals, f-string fields) is left as written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from awb.llm import FALLBACK_MODEL, ProviderFamily

SLOT_PATTERN = re.compile(r"\{([a-z_]+)\}")

MEMORY_CHOICE = "memory"
MEMORY_ON = "on"
MEMORY_OFF = "off"


class TemplateRenderError(ValueError):
    """Raised when a template is rendered without a value it declares."""


@dataclass(frozen=True)
class Fragment:
    choice: str
    variants: Mapping[str, str]


@dataclass(frozen=True)
class BackendTemplate:
    path: str
    body: str
    slots: Tuple[str, ...] = ()
    fragments: Mapping[str, Fragment] = field(default_factory=dict)

    def render(
        self,
        values: Mapping[str, str],
        choices: Mapping[str, str],
    ) -> str:
        replacements: Dict[str, str] = {}
        for slot in self.slots:
            if slot not in values:
                raise TemplateRenderError(f"{self.path}: no value for slot '{slot}'.")
            replacements[slot] = str(values[slot])
        for slot, fragment in self.fragments.items():
            selected = choices.get(fragment.choice)
            if selected not in fragment.variants:
                raise TemplateRenderError(
                    f"{self.path}: no '{fragment.choice}' variant named {selected!r}."
                )
            replacements[slot] = fragment.variants[selected]
        return SLOT_PATTERN.sub(
            lambda match: replacements.get(match.group(1), match.group(0)), self.body
        )


def _memory_fragment(on: str, off: str) -> Fragment:
    return Fragment(choice=MEMORY_CHOICE, variants={MEMORY_ON: on, MEMORY_OFF: off})


APP_BODY = '''"""
Entry point of the generated AI workflow backend.
"""

import os

from dotenv import load_dotenv

load_dotenv()

from flask import Flask  # noqa: E402
from flask_cors import CORS  # noqa: E402

from routes import workflow_routes  # noqa: E402

app = Flask(__name__)
CORS(app)

app.register_blueprint(workflow_routes.bp)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG") == "1")
'''


ROUTES_BODY = '''"""
HTTP routes of the generated AI workflow backend.
"""

from flask import Blueprint, jsonify, request

from utils import workflow_executor

bp = Blueprint("workflow", __name__, url_prefix="/api")


@bp.route("/execute", methods=["POST"])
def execute_workflow():
    data = request.get_json(silent=True) or {}
    input_message = data.get("message", "")
{execute_call}
    return jsonify(result)
{clear_memory_route}'''

ROUTES_EXECUTE_MEMORY = (
    "    result = workflow_executor.execute_workflow(\n"
    "        input_message, session_id=data.get(\"session_id\")\n"
    "    )"
)
ROUTES_EXECUTE_PLAIN = "    result = workflow_executor.execute_workflow(input_message)"
ROUTES_CLEAR_MEMORY = '''

@bp.route("/clear-memory", methods=["POST"])
def clear_memory():
    """Clear the conversation history of one session, or of every session."""
    data = request.get_json(silent=True) or {}
    result = workflow_executor.clear_conversation_history(data.get("session_id"))
    return jsonify(result)
'''


LLM_SERVICE_BODY = '''"""
LLM adapter of the generated AI workflow backend.

Provider family: {provider_name}
"""

import os
from typing import Any, Dict, List, Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_huggingface import ChatHuggingFace, HuggingFaceEndpoint
from langchain_openai import ChatOpenAI

MODEL = "{model}"
API_KEY = os.getenv("{api_key_env}") or "{api_key}"
TEMPERATURE = {temperature}
USE_MEMORY = "{use_memory}" == "true"

# 10 user/assistant exchanges.
MAX_HISTORY_MESSAGES = 20


def _response_text(response: Any) -> str:
    content = getattr(response, "content", None)
    return content if isinstance(content, str) else str(response)


class LLMService:
    def __init__(
        self,
        model: str = MODEL,
        api_key: str = API_KEY,
        temperature: float = TEMPERATURE,
        use_memory: bool = USE_MEMORY,
    ):
        self.model = model
        self.api_key = api_key
        self.temperature = float(temperature)
        self.use_memory = use_memory
        self._histories: Dict[str, List[BaseMessage]] = {}
        self._llm = self._initialize_llm()

    def _initialize_llm(self):
        """Build the chat model whose provider family matches the model id."""
        model = self.model.lower()
        if "gpt" in model:
            return ChatOpenAI(
                model=self.model,
                api_key=self.api_key,
                temperature=self.temperature,
            )
        if "claude" in model:
            return ChatAnthropic(
                model=self.model,
                api_key=self.api_key,
                temperature=self.temperature,
            )
        if "gemini" in model:
            return ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=self.api_key,
                temperature=self.temperature,
            )
        if "llama" in model or "mistral" in model:
            endpoint = HuggingFaceEndpoint(
                repo_id=self.model,
                huggingfacehub_api_token=self.api_key,
                temperature=self.temperature,
            )
            return ChatHuggingFace(llm=endpoint)
        print(f"Model type not recognized: {self.model}. Defaulting to {fallback_model}.")
        return ChatOpenAI(
            model="{fallback_model}",
            api_key=self.api_key,
            temperature=self.temperature,
        )

    def update_model(
        self,
        model: str,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> None:
        """Switch to another model and rebuild the chat client."""
        self.model = model
        if api_key is not None:
            self.api_key = api_key
        if temperature is not None:
            self.temperature = float(temperature)
        self._llm = self._initialize_llm()

    def _history_for(self, session_id: Optional[str]) -> List[BaseMessage]:
        # A request without a session starts from an empty, unsaved history.
        if not session_id:
            return []
        return self._histories.setdefault(session_id, [])

    def generate_response(self, prompt: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Generate a response, replaying the session history when memory is on."""
        try:
            if self.use_memory:
                history = self._history_for(session_id)
                response = self._llm.invoke(history + [HumanMessage(content=prompt)])
                text = _response_text(response)
                history.append(HumanMessage(content=prompt))
                history.append(AIMessage(content=text))
                if len(history) > MAX_HISTORY_MESSAGES:
                    del history[: len(history) - MAX_HISTORY_MESSAGES]
            else:
                response = self._llm.invoke([HumanMessage(content=prompt)])
                text = _response_text(response)
            return {"text": text, "model": self.model, "success": True}
        except Exception as exc:
            return {"error": f"Error generating response: {exc}", "success": False}

    def history(self, session_id: str) -> List[BaseMessage]:
        return list(self._histories.get(session_id, []))

    def clear_memory(self, session_id: Optional[str] = None) -> None:
        if session_id:
            self._histories.pop(session_id, None)
        else:
            self._histories.clear()


default_llm = LLMService()
'''.replace("{fallback_model}", FALLBACK_MODEL)

PROVIDER_NAMES: Dict[str, str] = {
    ProviderFamily.OPENAI.value: "OpenAI",
    ProviderFamily.ANTHROPIC.value: "Anthropic",
    ProviderFamily.GOOGLE.value: "Google",
    ProviderFamily.OPEN_WEIGHT.value: "Hugging Face (open-weight models)",
    ProviderFamily.UNKNOWN.value: f"unrecognized model, falling back to OpenAI {FALLBACK_MODEL}",
}


EXECUTOR_BODY = '''"""
Workflow execution for the generated AI workflow backend.

{memory_note}
"""

from typing import Any, Dict, Optional

from services.llm_service import default_llm


def execute_workflow(input_message: str{session_param}) -> Dict[str, Any]:
    """Run the chat input through the LLM node and wrap the outcome."""
    try:
        processed_input = (input_message or "").strip()
        llm_response = default_llm.generate_response(processed_input{session_arg})
        if not llm_response.get("success", False):
            return {
                "success": False,
                "error": llm_response.get("error", "Unknown error"),
            }
        return {
            "success": True,
            "input": processed_input,
            "output": llm_response["text"],
            "model": llm_response["model"],
            "has_memory": default_llm.use_memory,
        }
    except Exception as exc:
        return {"success": False, "error": f"Workflow execution failed: {exc}"}
{clear_history}'''

EXECUTOR_CLEAR_HISTORY = '''

def clear_conversation_history(session_id: Optional[str] = None) -> Dict[str, Any]:
    """Forget the history of one session, or of every session."""
    default_llm.clear_memory(session_id)
    return {"success": True, "message": "Conversation history cleared"}
'''


REQUIREMENTS_BODY = """flask>=3.0.0
flask-cors>=4.0.0
python-dotenv>=1.0.0
langchain-core>=0.3.0
langchain-openai>=0.2.0
langchain-anthropic>=0.2.0
langchain-google-genai>=2.0.0
langchain-huggingface>=0.1.0
"""


ENV_BODY = """# API keys. Every provider variable holds the key entered in the editor.
OPENAI_API_KEY={api_key}
ANTHROPIC_API_KEY={api_key}
GOOGLE_API_KEY={api_key}
HUGGINGFACEHUB_API_TOKEN={api_key}

# Server configuration
PORT=5000
"""


README_BODY = """# AI Workflow Backend

This is an automatically generated Flask backend for an AI workflow.

- Model: `{model}` ({provider_name})
- Temperature: `{temperature}`

## Setup

1. Install dependencies:
   ```
   pip install -r requirements.txt
   ```

2. Run the application:
   ```
   python app.py
   ```

## API Endpoints

- POST /api/execute
  - Executes the workflow with the provided input
  - Request body: `{execute_request}`
  - Response: `{ "success": true, "input": "...", "output": "..." }`
{clear_memory_docs}
## Configuration

You can modify the .env file to update API keys and other configuration.
The `workflow.json` file holds the workflow this backend was generated from.

The model id and API key are written into `services/llm_service.py` exactly as
they were entered in the editor, without escaping. A key containing quotes or
backslashes breaks that file: generate the backend with a placeholder key and
put the real one in `.env`, which is read first.

## Memory Context

{memory_section}"""

README_EXECUTE_MEMORY = '{ "message": "Your input message", "session_id": "optional" }'
README_EXECUTE_PLAIN = '{ "message": "Your input message" }'
README_CLEAR_MEMORY_DOCS = """
- POST /api/clear-memory
  - Clears the conversation history
  - Request body (optional): `{ "session_id": "..." }`
  - Response: `{ "success": true, "message": "Conversation history cleared" }`
"""
README_MEMORY_ENABLED = """This backend includes conversation memory, allowing the LLM to remember
previous interactions in a conversation.

Memory is currently **enabled**.

### How Memory Works

1. Each request may carry a `session_id`; history is kept per session
2. The user message and the LLM response are added to that history
3. The stored history is sent along with every new message of the session
4. At most 20 messages (10 exchanges) are kept; the oldest go first
5. Requests without a `session_id` start from an empty history

This is useful for:
- Maintaining context in multi-turn conversations
- Building chatbots that can remember user information
- Creating assistants that can refer back to previous questions
"""
README_MEMORY_DISABLED = """This backend can include conversation memory, but it is not active.

Memory is currently **disabled**: every message is processed on its own,
without conversation context. To turn it on, regenerate the backend with
memory enabled on the LLM node.
"""


PACKAGE_MARKER_BODY = "# {package_name} package\n"


TEMPLATE_SET: Tuple[BackendTemplate, ...] = (
    BackendTemplate(path="app.py", body=APP_BODY),
    BackendTemplate(
        path="routes/workflow_routes.py",
        body=ROUTES_BODY,
        fragments={
            "execute_call": _memory_fragment(ROUTES_EXECUTE_MEMORY, ROUTES_EXECUTE_PLAIN),
            "clear_memory_route": _memory_fragment(ROUTES_CLEAR_MEMORY, ""),
        },
    ),
    BackendTemplate(
        path="routes/__init__.py",
        body=PACKAGE_MARKER_BODY.replace("{package_name}", "Routes"),
    ),
    BackendTemplate(
        path="services/llm_service.py",
        body=LLM_SERVICE_BODY,
        slots=("model", "api_key", "api_key_env", "temperature", "use_memory", "provider_name"),
    ),
    BackendTemplate(
        path="services/__init__.py",
        body=PACKAGE_MARKER_BODY.replace("{package_name}", "Services"),
    ),
    BackendTemplate(
        path="utils/workflow_executor.py",
        body=EXECUTOR_BODY,
        fragments={
            "memory_note": _memory_fragment(
                "Conversation memory is enabled: each session keeps its recent history.",
                "Conversation memory is disabled: every message is handled on its own.",
            ),
            "session_param": _memory_fragment(", session_id: Optional[str] = None", ""),
            "session_arg": _memory_fragment(", session_id=session_id", ""),
            "clear_history": _memory_fragment(EXECUTOR_CLEAR_HISTORY, ""),
        },
    ),
    BackendTemplate(
        path="utils/__init__.py",
        body=PACKAGE_MARKER_BODY.replace("{package_name}", "Utils"),
    ),
    BackendTemplate(path="requirements.txt", body=REQUIREMENTS_BODY),
    BackendTemplate(path=".env", body=ENV_BODY, slots=("api_key",)),
    BackendTemplate(
        path="README.md",
        body=README_BODY,
        slots=("model", "temperature", "provider_name"),
        fragments={
            "execute_request": _memory_fragment(README_EXECUTE_MEMORY, README_EXECUTE_PLAIN),
            "clear_memory_docs": _memory_fragment(README_CLEAR_MEMORY_DOCS, ""),
            "memory_section": _memory_fragment(README_MEMORY_ENABLED, README_MEMORY_DISABLED),
        },
    ),
)

WORKFLOW_CONFIG_PATH = "workflow.json"


def template_paths() -> Tuple[str, ...]:
    return tuple(template.path for template in TEMPLATE_SET) + (WORKFLOW_CONFIG_PATH,)
