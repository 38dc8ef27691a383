"""Provider-specific transport client for LLM requests.

Architectural role:
    Executes HTTP requests against OpenAI-compatible chat-completions endpoints
    (Ollama, llama.cpp server, OpenAI, Groq, OpenRouter) and normalizes streaming
    and non-streaming responses.

Model invocation flow:
    `service.generate_answer` -> `HttpCompletionBackend.complete(payload, timeout)`
    -> `send_request(...)` -> parsed text or generator of streamed deltas.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once, bounded by the
    remaining per-turn budget.

Failure handling model:
    - `requests` timeouts surface as `DeadlineExceededError`.
    - Other request failures surface as `CompletionTransportError` carrying a
      sanitized, provider-labelled message (no raw response bodies).
    - Unusable response shapes surface as `CompletionFailedError`.
    Streaming failures are raised lazily while the generator is consumed.
"""

import json
import logging

import requests

from searchchat.core.errors import (
    CompletionFailedError,
    CompletionTransportError,
    DeadlineExceededError,
)
from searchchat.llm.provider_config import PROVIDERS, ModelConfig, load_key


logger = logging.getLogger(__name__)


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> str:
    """Build provider-labeled HTTP error text without exposing raw internals."""
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = str(provider_name or "provider").upper()
    if status_code:
        return f"{label} HTTP ERROR ({status_code})"
    return f"{label} HTTP ERROR"


def _raise_for_request_error(provider_name: str, err: requests.exceptions.RequestException):
    if isinstance(err, requests.exceptions.Timeout):
        raise DeadlineExceededError(f"{str(provider_name).upper()} request timed out") from err
    raise CompletionTransportError(_build_sanitized_http_error(provider_name, err)) from err


def _build_headers(config: ModelConfig) -> dict:
    headers = {
        "Content-Type": "application/json"
    }

    key_file = PROVIDERS.get(config.provider, {}).get("key_file")
    if key_file:
        api_key = load_key(key_file)
        if not api_key:
            raise CompletionTransportError(f"{config.provider.upper()} KEY FILE NOT FOUND")
        headers["Authorization"] = f"Bearer {api_key}"

    return headers


def _extract_delta(data: dict):
    """Pull incremental text out of the common streamed response shapes."""
    if "choices" in data and data["choices"]:
        choice = data["choices"][0]

        if "delta" in choice and "content" in choice["delta"]:
            return choice["delta"]["content"]

        if "message" in choice and "content" in choice["message"]:
            return choice["message"]["content"]

        if "text" in choice:
            return choice["text"]

    elif "message" in data and "content" in data["message"]:
        return data["message"]["content"]

    return None


def send_request(payload: dict, config: ModelConfig, timeout: float):
    """Send one request to the configured provider and parse response content.

    Args:
        payload: OpenAI-compatible request payload built by `service.build_payload`.
        config: Provider endpoint and credentials selection.
        timeout: Connect/read timeout in seconds (remaining turn budget).

    Returns:
        - Generator of text deltas when `payload["stream"]` is true.
        - Final response string otherwise.

    Raises:
        DeadlineExceededError: Request timed out.
        CompletionTransportError: HTTP/transport failure or missing key.
        CompletionFailedError: Response JSON has an unexpected shape.
    """
    headers = _build_headers(config)

    if payload.get("stream"):

        def stream_generator():
            """Yield incremental text deltas from line-delimited JSON/SSE streams."""
            try:
                with requests.post(
                    config.url,
                    headers=headers,
                    json=payload,
                    stream=True,
                    timeout=timeout,
                ) as response:

                    response.raise_for_status()
                    response.encoding = "utf-8"

                    for line in response.iter_lines(decode_unicode=True):

                        if not line:
                            continue

                        if line.startswith("data: "):
                            line = line[6:]

                        if line.strip() == "[DONE]":
                            break

                        try:
                            data = json.loads(line)
                        except ValueError:
                            logger.debug("Skipping non-JSON stream line")
                            continue

                        delta = _extract_delta(data)
                        if delta:
                            yield delta

            except requests.exceptions.RequestException as err:
                _raise_for_request_error(config.provider, err)

        return stream_generator()

    try:
        response = requests.post(
            config.url,
            headers=headers,
            json=payload,
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.JSONDecodeError as err:
        raise CompletionFailedError(f"{config.provider.upper()} returned invalid JSON") from err
    except requests.exceptions.RequestException as err:
        _raise_for_request_error(config.provider, err)

    try:
        return data["choices"][0]["message"]["content"].strip()
    except (KeyError, IndexError, TypeError, AttributeError) as err:
        raise CompletionFailedError(
            f"{config.provider.upper()} returned an unexpected response shape"
        ) from err


class HttpCompletionBackend:
    """`CompletionBackend` implementation over `send_request`."""

    def __init__(self, config: ModelConfig) -> None:
        self.config = config

    def complete(self, payload: dict, timeout: float):
        return send_request(payload, self.config, timeout)
