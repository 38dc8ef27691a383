"""
Tests for search query and prompt assembly.
"""

from searchchat.prompting.prompt_builder import build_search_prompt, build_search_query


def test_query_without_history_is_question():
    assert build_search_query("What is Go?", []) == "What is Go?"


def test_query_with_history():
    lines = ["User: What is Go?", "Assistant: A language."]
    assert build_search_query("Who made it?", lines) == (
        "User: What is Go?\nAssistant: A language.\nWho made it?"
    )


def test_prompt_section_order():
    prompt = build_search_prompt(
        "Who made it?",
        ["User: What is Go?", "Assistant: A language."],
        "Title: Go\nLink: https://go.dev\nSnippet: Made at Google.\n",
    )
    markers = [
        "You are an AI assistant that uses search results",
        "Conversation history:\nUser: What is Go?\nAssistant: A language.",
        "Current question: Who made it?",
        "Search results:\nTitle: Go\nLink: https://go.dev\nSnippet: Made at Google.",
        "Instructions:\n1. Analyze",
        "4. Keep your answer concise and to the point.",
        "Your answer:",
    ]
    positions = [prompt.index(marker) for marker in markers]
    assert positions == sorted(positions)
    assert prompt.endswith("Your answer:")


def test_prompt_with_empty_history_keeps_header():
    prompt = build_search_prompt("q", [], "No results found.")
    assert "Conversation history:\n\n\nCurrent question: q" in prompt
    assert "Search results:\nNo results found.\n" in prompt


def test_prompt_is_deterministic():
    args = ("q", ["User: a"], "No results found.")
    assert build_search_prompt(*args) == build_search_prompt(*args)
