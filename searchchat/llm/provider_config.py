"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes model/provider selection and credential lookup for
    `searchchat.llm.service` and `searchchat.llm.client`.

Model call flow integration:
    - `build_model_config` produces the immutable `ModelConfig` owned by the engine.
    - `client.send_request` consumes provider endpoint maps and key resolution.

Determinism:
    Deterministic for a fixed process environment and key files. Values are resolved
    at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Invalid provider/model/timeout values raise `ConfigurationError`, which the CLI
    treats as fatal. Missing key material for keyed providers is also fatal.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from searchchat.core.errors import ConfigurationError

load_dotenv()

# Fixed core behaviour. The environment only selects transport plumbing.
MODEL_NAME = "llama3.1"
TURN_TIMEOUT_SECONDS = 120.0
TEMPERATURE = 0.5

PROVIDER = os.getenv("PROVIDER", "ollama").strip().lower()
LLM_URL = os.getenv("LLM_URL", "").strip()

# OpenAI-compatible chat-completions endpoints.
PROVIDERS = {

    "ollama": {
        "url": "http://127.0.0.1:11434/v1/chat/completions",
        "key_file": None
    },

    "local": {
        "url": "http://127.0.0.1:8080/v1/chat/completions",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/chat/completions",
        "key_file": "config/openai.key"
    },

    "groq": {
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "key_file": "config/groq.key"
    },

    "openrouter": {
        "url": "https://openrouter.ai/api/v1/chat/completions",
        "key_file": "config/openrouter.key"
    },

}


# Shared system instruction prepended to prompt content in `service.build_payload`.
SYSTEM_MESSAGE = (
    "You are a helpful assistant that answers questions using live web search results.\n"
    "Answer precisely, clearly, and without repetition.\n"
)


@dataclass(frozen=True)
class ModelConfig:
    """Immutable model settings for the lifetime of the process.

    Attributes:
        model_name: Backend model identifier.
        timeout: Per-turn budget in seconds, shared by search and generation.
        provider: Key into `PROVIDERS`.
        url: Resolved chat-completions endpoint.
        temperature: Sampling temperature sent with every request.
    """

    model_name: str = MODEL_NAME
    timeout: float = TURN_TIMEOUT_SECONDS
    provider: str = "ollama"
    url: str = PROVIDERS["ollama"]["url"]
    temperature: float = TEMPERATURE


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip()


def build_model_config(
    provider: str = PROVIDER,
    model_name: str = MODEL_NAME,
    timeout: float = TURN_TIMEOUT_SECONDS,
    url: str = LLM_URL,
) -> ModelConfig:
    """Validate settings and build the process-wide `ModelConfig`.

    Raises:
        ConfigurationError: Unknown provider, empty model name, non-positive
            timeout, or missing API key for a keyed provider.
    """
    provider = (provider or "").strip().lower()
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider '{provider}'. Choose from: {sorted(PROVIDERS)}"
        )
    if not model_name or not model_name.strip():
        raise ConfigurationError("Model name must not be empty")
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {timeout}")

    key_file = PROVIDERS[provider]["key_file"]
    if key_file and not load_key(key_file):
        raise ConfigurationError(f"{provider.upper()} KEY FILE NOT FOUND")

    return ModelConfig(
        model_name=model_name.strip(),
        timeout=float(timeout),
        provider=provider,
        url=url or PROVIDERS[provider]["url"],
        temperature=TEMPERATURE,
    )
