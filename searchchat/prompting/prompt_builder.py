"""Prompt assembly helpers used by core orchestration.

This module is intentionally narrow: it only builds strings from already
retrieved inputs. Search, memory updates, deadlines, and model invocation happen
outside this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed ordering of prompt components.
    - No hidden side effects (no I/O, no global state mutation).

Prompt safety model:
    Search snippets are interpolated as raw strings. The instructions tell the model
    to answer from the results and to say so when they are not relevant.
"""

from typing import List


# =========================================================
# SEARCH QUERY
# =========================================================
# The search query carries the whole rendered history in front of the raw
# question, so it grows with the conversation just like the prompt does.

def build_search_query(question: str, history_lines: List[str]) -> str:
    """Prefix `question` with the rendered conversation history.

    Args:
        question: Raw user input for this turn.
        history_lines: Rendered memory snapshot, oldest first.

    Returns:
        `question` unchanged when there is no history, otherwise the history
        lines joined by newlines, a newline, then `question`.
    """
    if not history_lines:
        return question
    return "\n".join(history_lines) + "\n" + question


# =========================================================
# ANSWER PROMPT
# =========================================================
# Prompt component order:
#   1) Instructional preamble
#   2) Conversation history
#   3) Current question
#   4) Search results
#   5) Answering instructions and cue ("Your answer:")

def build_search_prompt(question: str, history_lines: List[str], search_results: str) -> str:
    """Build the search-augmented answer prompt.

    Args:
        question: Raw user question for this turn.
        history_lines: Rendered memory snapshot, oldest first.
        search_results: Hits already formatted by `extractor.format_hits`.

    Returns:
        Fully assembled prompt string.

    Edge cases:
        - Empty history yields an empty history section (header remains).
        - `question` is stripped before insertion.
    """
    history_block = "\n".join(history_lines)

    return (
        "You are an AI assistant that uses search results to answer questions accurately.\n"
        "Base your answers on the provided search results and conversation history.\n"
        "If the search results don't contain relevant information, say so.\n\n"
        "Conversation history:\n"
        + history_block +
        "\n\nCurrent question: "
        + question.strip() +
        "\n\nSearch results:\n"
        + search_results +
        "\n\nInstructions:\n"
        "1. Analyze the search results and conversation history carefully.\n"
        "2. Provide a comprehensive answer based on the information in the search results "
        "and relevant context from the conversation history.\n"
        "3. If the search results don't contain relevant information to answer the question, "
        "state that clearly.\n"
        "4. Keep your answer concise and to the point.\n\n"
        "Your answer:"
    )
