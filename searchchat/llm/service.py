"""Prompt-to-answer adapter for LLM invocation.

Architectural role:
    Provides the canonical text-generation entrypoint used by orchestration. This
    module bridges prompt construction (`searchchat.prompting`) to transport
    (`searchchat.llm.client`) and owns the delivery-mode contract.

Model call flow:
    prompt -> `build_payload` -> `backend.complete(payload, timeout)` ->
    `_materialize` -> final answer string.

Delivery modes:
    A backend returns either a plain string (atomic delivery) or a generator of
    text fragments (streamed delivery). A generator may additionally return a
    final atomic value. When at least one fragment was streamed, that final value
    is ignored so the answer is never duplicated.

Deadline behavior:
    The remaining budget of the turn deadline is passed to the backend as its
    timeout, re-checked between streamed fragments, and checked once more after
    the answer is complete.
"""

import inspect
from typing import Iterator, Protocol, Union

from searchchat.core.deadline import Deadline
from searchchat.core.errors import CompletionFailedError
from searchchat.llm.client import HttpCompletionBackend
from searchchat.llm.provider_config import SYSTEM_MESSAGE, ModelConfig


CompletionOutput = Union[str, Iterator[str]]


class CompletionBackend(Protocol):
    """Anything that can turn a chat payload into text."""

    def complete(self, payload: dict, timeout: float) -> CompletionOutput:
        ...


def build_payload(prompt: str, config: ModelConfig, stream: bool = True) -> dict:
    """Wrap a prompt with `SYSTEM_MESSAGE` and shared sampling defaults.

    `temperature=0.5` gives moderate randomness.
    """
    return {
        "model": config.model_name,
        "messages": [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt}
        ],
        "temperature": config.temperature,
        "stream": stream
    }


def generate_answer(
    prompt: str,
    config: ModelConfig,
    deadline: Deadline,
    backend: CompletionBackend | None = None,
    stream: bool = True,
) -> str:
    """Generate the full answer for one prompt under the turn deadline.

    Args:
        prompt: Fully assembled prompt from `prompt_builder`.
        config: Immutable model configuration.
        deadline: Shared per-turn deadline.
        backend: Completion backend; defaults to the HTTP backend for `config`.
        stream: Whether to request incremental delivery.

    Returns:
        Final answer text, stripped.

    Raises:
        DeadlineExceededError: Budget exhausted before or during generation.
        CompletionTransportError: Backend transport failure.
        CompletionFailedError: Empty prompt or unusable backend output.
    """
    if not prompt or not prompt.strip():
        raise CompletionFailedError("Empty prompt.")

    deadline.check()
    backend = backend or HttpCompletionBackend(config)

    output = backend.complete(build_payload(prompt, config, stream), deadline.remaining())
    answer = _materialize(output, deadline)

    deadline.check()
    return answer.strip()


def _materialize(output: CompletionOutput, deadline: Deadline) -> str:
    """Reduce atomic or streamed backend output to one string."""
    if output is None:
        return ""

    if isinstance(output, str):
        return output

    if not inspect.isgenerator(output) and not hasattr(output, "__next__"):
        if hasattr(output, "__iter__"):
            output = iter(output)
        else:
            raise CompletionFailedError(f"Unsupported completion output: {type(output).__name__}")

    chunks: list[str] = []
    final = None
    try:
        while True:
            try:
                chunk = next(output)
            except StopIteration as stop:
                final = stop.value
                break
            deadline.check()
            if chunk:
                chunks.append(str(chunk))
    finally:
        close = getattr(output, "close", None)
        if close is not None:
            close()

    if chunks:
        return "".join(chunks)
    return str(final or "")
