"""Core turn orchestration for search-augmented answering.

Architectural role:
    Provides the execution pipeline used by the CLI to turn one user question into
    a search-grounded model answer, with bounded conversation memory.

Control-flow model (one turn):
    1. Searching: build the effective query (history + question) and call the
       search tool under a fresh per-turn `Deadline`.
    2. PromptBuilding: assemble preamble, history, question, and formatted hits.
    3. Generating: call the completion service with the same deadline.
    4. Reporting: return a `TurnResult`; append to memory on success only.

Error handling strategy:
    Search and completion failures are raised by their adapters and caught here,
    logged, and converted into stable user-facing messages. No retries. Memory is
    never updated on a failure path. The deadline is released on every path.

Interaction surface:
    - Retrieval: `SearchTool.ainvoke` (DuckDuckGo in production, stubs in tests).
    - LLM: `llm.service.generate_answer` in a worker thread.
    - Prompting: `prompt_builder`.
    - Memory: the engine-owned `ConversationMemory`.

Determinism:
    Query and prompt assembly are deterministic for fixed memory and input. Search
    results and generated text are not.
"""

import asyncio
import logging
from typing import Callable

from searchchat.core.deadline import Deadline
from searchchat.core.errors import (
    CaptchaDetectedError,
    CompletionError,
    DeadlineExceededError,
    SearchError,
)
from searchchat.core.turn_types import TurnResult, TurnStatus
from searchchat.llm.provider_config import ModelConfig
from searchchat.llm.service import CompletionBackend, generate_answer
from searchchat.memory.conversation_memory import ConversationMemory
from searchchat.prompting.prompt_builder import build_search_prompt, build_search_query
from searchchat.retrieval.web.extractor import format_hits
from searchchat.retrieval.web.web_module import DuckDuckGoSearchTool, SearchTool


logger = logging.getLogger(__name__)

CAPTCHA_MESSAGE = "CAPTCHA detected. Please try again later or use a different IP."
GENERATING_STATUS = "Generating response..."


class Engine:
    """Sequential search -> prompt -> completion loop body.

    Args:
        config: Immutable model configuration (model name, turn timeout).
        search_tool: Search capability; defaults to DuckDuckGo.
        backend: Completion backend; defaults to the HTTP backend for `config`.
        memory: Conversation memory; a fresh one is created when omitted.
        deadline_factory: Builds the per-turn deadline from a timeout in seconds.
    """

    def __init__(
        self,
        config: ModelConfig,
        search_tool: SearchTool | None = None,
        backend: CompletionBackend | None = None,
        memory: ConversationMemory | None = None,
        deadline_factory: Callable[[float], Deadline] = Deadline,
    ) -> None:
        self.config = config
        self.search_tool = search_tool or DuckDuckGoSearchTool()
        self.backend = backend
        self.memory = memory if memory is not None else ConversationMemory()
        self._deadline_factory = deadline_factory

    async def process_message(
        self,
        question: str,
        on_status: Callable[[str], None] | None = None,
    ) -> TurnResult:
        """Process one user question through search, prompting, and generation.

        Args:
            question: Raw user input (already trimmed by the caller or not).
            on_status: Optional progress callback, called with
                `"Generating response..."` once search succeeded.

        Returns:
            `TurnResult` describing the exit path and the line to display.
        """
        question = (question or "").strip()
        if not question:
            return TurnResult(TurnStatus.EMPTY, "")

        history_lines = self.memory.render_lines()
        search_query = build_search_query(question, history_lines)

        with self._deadline_factory(self.config.timeout) as deadline:

            # -------------------------------------------------
            # Searching
            # -------------------------------------------------
            try:
                hits = await self.search_tool.ainvoke(search_query, timeout=deadline.remaining())
            except CaptchaDetectedError:
                logger.warning("Turn aborted: CAPTCHA detected by %s", self.search_tool.name)
                return TurnResult(TurnStatus.CAPTCHA, CAPTCHA_MESSAGE, search_query=search_query)
            except SearchError as exc:
                logger.warning("Turn aborted: search failed: %s", exc)
                return TurnResult(
                    TurnStatus.SEARCH_FAILED,
                    f"Search failed: {exc}",
                    search_query=search_query,
                )
            except Exception as exc:
                logger.exception("Search tool %s failed unexpectedly", self.search_tool.name)
                return TurnResult(
                    TurnStatus.SEARCH_FAILED,
                    f"Search failed: {exc}",
                    search_query=search_query,
                )

            # -------------------------------------------------
            # PromptBuilding
            # -------------------------------------------------
            prompt = build_search_prompt(question, history_lines, format_hits(hits))
            logger.debug("Prompt assembled: %d chars, %d hit(s)", len(prompt), len(hits))

            if on_status is not None:
                on_status(GENERATING_STATUS)

            # -------------------------------------------------
            # Generating
            # -------------------------------------------------
            try:
                answer = await self._generate(prompt, deadline)
            except DeadlineExceededError:
                logger.warning("Turn aborted: generation exceeded %gs", self.config.timeout)
                return TurnResult(
                    TurnStatus.TIMEOUT,
                    f"Operation timed out after {self.config.timeout:g} seconds",
                    search_query=search_query,
                )
            except CompletionError as exc:
                logger.warning("Turn aborted: completion failed: %s", exc)
                return TurnResult(
                    TurnStatus.COMPLETION_FAILED,
                    f"Error: {exc}",
                    search_query=search_query,
                )
            except Exception as exc:
                logger.exception("LLM generation failed")
                return TurnResult(
                    TurnStatus.COMPLETION_FAILED,
                    f"Error: {exc}",
                    search_query=search_query,
                )

        # -------------------------------------------------
        # Reporting
        # -------------------------------------------------
        self.memory.add_exchange(question, answer)
        logger.info("Turn answered: %d chars, memory holds %d turn(s)", len(answer), len(self.memory))
        return TurnResult(TurnStatus.ANSWERED, answer, answer=answer, search_query=search_query)

    async def _generate(self, prompt: str, deadline: Deadline) -> str:
        """Run the blocking completion call in a thread, bounded by the deadline."""
        deadline.check()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(
                    generate_answer,
                    prompt,
                    self.config,
                    deadline,
                    self.backend,
                ),
                timeout=deadline.remaining(),
            )
        except asyncio.TimeoutError as exc:
            raise DeadlineExceededError() from exc
