"""DuckDuckGo HTML retrieval module for search-augmented answering.

Architectural role:
    Executes the outbound web search for one turn and returns structured hits to
    `searchchat.core.engine`. Also exposes the search step as a named tool
    capability (`SearchTool`) so orchestration can be driven by stubs in tests.

Retrieval strategy:
    1. Wait a fixed pre-request delay (crude client-side rate limiting).
    2. GET the provider HTML endpoint with the fully URL-encoded query and a
       desktop-browser `User-Agent`.
    3. Reject anti-bot challenge pages (`CAPTCHA` marker) before anything else.
    4. Reject non-200 statuses.
    5. Hand the body to `extractor.extract_hits`.

Failure model:
    Every failure is raised as a `SearchError` subclass. No retries are attempted;
    a failed search ends the turn.

Determinism and performance:
    Deterministic for a fixed provider response. In practice results depend on
    provider ranking and throttling. Each call costs at least `delay_seconds`.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol
from urllib.parse import quote_plus

import httpx

from searchchat.core.errors import (
    CaptchaDetectedError,
    SearchBadStatusError,
    SearchNetworkError,
    SearchParseError,
    SearchReadError,
)
from searchchat.retrieval.web.extractor import (
    MAX_RESULTS,
    NO_RESULTS,
    SearchHit,
    extract_hits,
    format_hits,
)


logger = logging.getLogger(__name__)


CAPTCHA_MARKER = "CAPTCHA"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass(frozen=True)
class WebModuleConfig:
    """Runtime configuration for `WebSearchModule`.

    Only `WEB_USER_AGENT` is read from the environment. Timing and result caps
    are fixed defaults and can be overridden explicitly (tests pass
    `delay_seconds=0`).
    """

    base_url: str = "https://duckduckgo.com/html/"
    user_agent: str = os.getenv("WEB_USER_AGENT", DEFAULT_USER_AGENT).strip()
    timeout_seconds: float = 10.0
    delay_seconds: float = 2.0
    max_results: int = MAX_RESULTS


class WebSearchModule:
    """Rate-limited DuckDuckGo search returning structured hits.

    Args:
        config: Endpoint, header, and timing configuration.
        sleep: Awaitable delay function used for rate limiting.
        transport: Optional httpx transport (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        config: WebModuleConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or WebModuleConfig()
        self._sleep = sleep
        self._transport = transport

    def retrieve(self, query: str, timeout: float | None = None) -> list[SearchHit]:
        """Synchronous wrapper for `aretrieve`.

        Edge cases:
            Calling from an already running event loop propagates `asyncio.run`
            limitations.
        """
        return self._run_async(self.aretrieve(query, timeout=timeout))

    async def aretrieve(self, query: str, timeout: float | None = None) -> list[SearchHit]:
        """Search the provider and return at most `max_results` hits.

        Args:
            query: Search text of any length.
            timeout: Optional remaining caller budget in seconds. The effective
                client timeout is the smaller of this and `timeout_seconds`.

        Returns:
            Extracted hits in document order, or `[NO_RESULTS]` when the page
            contained no result containers.

        Raises:
            CaptchaDetectedError: Body contains the challenge marker.
            SearchBadStatusError: Non-200 response.
            SearchNetworkError: Transport failure or client timeout.
            SearchReadError: Body could not be read.
            SearchParseError: Markup could not be parsed.
        """
        if self.config.delay_seconds > 0:
            await self._sleep(self.config.delay_seconds)

        body = await self._fetch(self.build_url(query), self._effective_timeout(timeout))

        try:
            hits = extract_hits(body, max_results=self.config.max_results)
        except Exception as exc:
            logger.warning("Failed to parse search results: %s", exc)
            raise SearchParseError(f"failed to parse search results: {exc}") from exc

        logger.info("Search returned %d hit(s)", len(hits))
        if not hits:
            return [NO_RESULTS]
        return hits

    def build_url(self, query: str) -> str:
        """Build the provider URL with the query fully URL-encoded."""
        return f"{self.config.base_url}?q={quote_plus(query)}"

    async def _fetch(self, url: str, timeout: float) -> str:
        """GET one result page and return its body after status/CAPTCHA checks."""
        logger.debug("Search request: url_length=%d timeout=%.1fs", len(url), timeout)

        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                headers=self._default_headers(),
                transport=self._transport,
            ) as client:
                try:
                    request = client.build_request("GET", url)
                except httpx.InvalidURL as exc:
                    logger.warning("Search request rejected: %s", exc)
                    raise SearchNetworkError(f"failed to create request: {exc}") from exc

                response = await client.send(request, stream=True)
                try:
                    try:
                        await response.aread()
                        body = response.text
                    except (
                        httpx.StreamError,
                        httpx.ReadError,
                        httpx.RemoteProtocolError,
                        UnicodeDecodeError,
                    ) as exc:
                        raise SearchReadError(f"failed to read response body: {exc}") from exc
                finally:
                    await response.aclose()
        except httpx.TransportError as exc:
            logger.warning("Search transport failure: %s", exc)
            raise SearchNetworkError(f"failed to perform search: {exc}") from exc

        if CAPTCHA_MARKER in body:
            logger.warning("CAPTCHA page received (status=%s)", response.status_code)
            raise CaptchaDetectedError()

        if response.status_code != 200:
            logger.warning("Search returned status %s", response.status_code)
            raise SearchBadStatusError(response.status_code)

        return body

    def _effective_timeout(self, timeout: float | None) -> float:
        if timeout is None:
            return self.config.timeout_seconds
        return max(0.001, min(self.config.timeout_seconds, timeout))

    def _default_headers(self) -> dict[str, str]:
        """Build default HTTP headers for result-page requests."""
        return {
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
            "User-Agent": self.config.user_agent,
        }

    def _run_async(self, coroutine: Any) -> Any:
        """Execute coroutine synchronously with `asyncio.run`."""
        return asyncio.run(coroutine)


# =========================================================
# TOOL CAPABILITY
# =========================================================

class SearchTool(Protocol):
    """Named search capability consumed by orchestration."""

    name: str
    description: str

    async def ainvoke(self, query: str, timeout: float | None = None) -> list[SearchHit]:
        """Run the search and return structured hits."""
        ...

    def invoke(self, query: str) -> str:
        """Run the search and return prompt-ready text."""
        ...


class DuckDuckGoSearchTool:
    """Production `SearchTool` backed by `WebSearchModule`."""

    name = "search"
    description = "Searches from DuckDuckGo"

    def __init__(self, module: WebSearchModule | None = None) -> None:
        self.module = module or WebSearchModule()

    async def ainvoke(self, query: str, timeout: float | None = None) -> list[SearchHit]:
        return await self.module.aretrieve(query, timeout=timeout)

    def invoke(self, query: str) -> str:
        return format_hits(self.module.retrieve(query))
