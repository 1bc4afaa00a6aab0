"""
Shared LLM provider configuration for AWB.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_API_KEY = "${GEMINI_API_KEY}"
DEFAULT_TEMPERATURE = "0.7"
FALLBACK_MODEL = "gpt-4o"


class ProviderFamily(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPEN_WEIGHT = "open_weight"
    UNKNOWN = "unknown"


# Checked in order, first hit wins.
PROVIDER_HINTS = (
    (ProviderFamily.OPENAI, ("gpt",)),
    (ProviderFamily.ANTHROPIC, ("claude",)),
    (ProviderFamily.GOOGLE, ("gemini",)),
    (ProviderFamily.OPEN_WEIGHT, ("llama", "mistral")),
)


def classify_provider(model: str) -> ProviderFamily:
    """
    Map a free-text model identifier onto a provider family by substring.
    """

    lower = str(model or "").lower()
    for family, hints in PROVIDER_HINTS:
        if any(hint in lower for hint in hints):
            return family
    return ProviderFamily.UNKNOWN


MODEL_CATALOG: List[Dict[str, Any]] = [
    {
        "provider": "OpenAI",
        "family": ProviderFamily.OPENAI.value,
        "models": [
            {"id": "gpt-4o", "name": "GPT-4o"},
            {"id": "gpt-4-turbo", "name": "GPT-4 Turbo"},
            {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo"},
        ],
        "apiKeyEnv": "OPENAI_API_KEY",
    },
    {
        "provider": "Anthropic",
        "family": ProviderFamily.ANTHROPIC.value,
        "models": [
            {"id": "claude-3-opus", "name": "Claude 3 Opus"},
            {"id": "claude-3-sonnet", "name": "Claude 3 Sonnet"},
            {"id": "claude-3-haiku", "name": "Claude 3 Haiku"},
        ],
        "apiKeyEnv": "ANTHROPIC_API_KEY",
    },
    {
        "provider": "Google",
        "family": ProviderFamily.GOOGLE.value,
        "models": [
            {"id": "gemini-2.0-flash", "name": "Gemini 2.0 Flash"},
        ],
        "apiKeyEnv": "GOOGLE_API_KEY",
    },
    {
        "provider": "Hugging Face",
        "family": ProviderFamily.OPEN_WEIGHT.value,
        "models": [
            {"id": "meta-llama/Llama-2-70b-chat-hf", "name": "Meta Llama 2 70B"},
            {"id": "mistralai/Mistral-7B-Instruct-v0.2", "name": "Mistral 7B Instruct"},
            {"id": "google/gemma-7b-it", "name": "Google Gemma 7B"},
        ],
        "apiKeyEnv": "HUGGINGFACEHUB_API_TOKEN",
    },
]


def credential_env_vars() -> List[str]:
    return [entry["apiKeyEnv"] for entry in MODEL_CATALOG]
