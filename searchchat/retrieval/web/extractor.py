"""Structured hit extraction from DuckDuckGo HTML result pages.

Architectural role:
    Pure parsing layer used by `web_module.WebSearchModule`. Turns raw result markup
    into an ordered, bounded list of `SearchHit` records and renders those records
    into prompt-ready text.

Extraction strategy:
    1. Parse markup with BeautifulSoup (`html.parser`).
    2. Select `.result__body` containers in document order.
    3. Per container read `.result__title` text, `.result__title a[href]`, and
       `.result__snippet` text.
    4. Stop after `max_results` containers.

Determinism:
    Fully deterministic for identical markup. No network access, no module state.

Edge cases:
    - Missing title/link/snippet fields become empty strings.
    - Markup without containers yields an empty list (the retriever maps this to
      the `NO_RESULTS` placeholder).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup


MAX_RESULTS = 5
NO_RESULTS_TEXT = "No results found."


@dataclass(frozen=True)
class SearchHit:
    """Single structured search result."""

    title: str
    link: str
    snippet: str

    @property
    def is_placeholder(self) -> bool:
        """Whether this hit is the `NO_RESULTS` sentinel rather than a real result."""
        return self == NO_RESULTS


# Returned as the only element when a search succeeded but matched nothing.
NO_RESULTS = SearchHit(title=NO_RESULTS_TEXT, link="", snippet="")


def extract_hits(html: str, max_results: int = MAX_RESULTS) -> list[SearchHit]:
    """Extract up to `max_results` hits from a result page.

    Args:
        html: Raw result-page markup.
        max_results: Container cap applied in document order.

    Returns:
        Ordered hit list, possibly empty.
    """
    if not html or max_results <= 0:
        return []

    soup = BeautifulSoup(html, "html.parser")

    hits: list[SearchHit] = []
    for container in soup.select(".result__body"):
        if len(hits) >= max_results:
            break

        title_node = container.select_one(".result__title")
        link_node = container.select_one(".result__title a")
        snippet_node = container.select_one(".result__snippet")

        hits.append(
            SearchHit(
                title=_node_text(title_node),
                link=(link_node.get("href") or "").strip() if link_node is not None else "",
                snippet=_node_text(snippet_node),
            )
        )

    return hits


def format_hits(hits: list[SearchHit]) -> str:
    """Render hits as prompt text blocks separated by blank lines."""
    if not hits or (len(hits) == 1 and hits[0].is_placeholder):
        return NO_RESULTS_TEXT

    return "\n".join(
        f"Title: {hit.title}\nLink: {hit.link}\nSnippet: {hit.snippet}\n"
        for hit in hits
    )


def _node_text(node) -> str:
    if node is None:
        return ""
    return re.sub(r"\s+", " ", node.get_text()).strip()
