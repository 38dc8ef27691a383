"""
Tests for DuckDuckGo result extraction.
"""

from searchchat.retrieval.web.extractor import (
    NO_RESULTS,
    NO_RESULTS_TEXT,
    SearchHit,
    extract_hits,
    format_hits,
)


def _result(i, title=True, link=True, snippet=True):
    title_html = ""
    if title:
        href = f' href="https://example.com/{i}"' if link else ""
        title_html = f'<h2 class="result__title"><a class="result__a"{href}>Result <b>{i}</b></a></h2>'
    snippet_html = f'<a class="result__snippet">Snippet   for\n {i}</a>' if snippet else ""
    return f'<div class="result results_links"><div class="result__body">{title_html}{snippet_html}</div></div>'


def _page(*results):
    return "<html><body><div id=\"links\">" + "".join(results) + "</div></body></html>"


# ===================================================================
# extract_hits
# ===================================================================


class TestExtractHits:

    def test_extracts_fields_in_document_order(self):
        hits = extract_hits(_page(_result(1), _result(2)))
        assert hits == [
            SearchHit("Result 1", "https://example.com/1", "Snippet for 1"),
            SearchHit("Result 2", "https://example.com/2", "Snippet for 2"),
        ]

    def test_caps_at_five(self):
        hits = extract_hits(_page(*[_result(i) for i in range(8)]))
        assert len(hits) == 5
        assert [h.link for h in hits] == [f"https://example.com/{i}" for i in range(5)]

    def test_returns_all_when_fewer_than_cap(self):
        for n in range(0, 6):
            assert len(extract_hits(_page(*[_result(i) for i in range(n)]))) == n

    def test_custom_cap(self):
        assert len(extract_hits(_page(*[_result(i) for i in range(4)]), max_results=2)) == 2

    def test_missing_snippet_is_empty(self):
        hits = extract_hits(_page(_result(1, snippet=False)))
        assert hits[0].snippet == ""
        assert hits[0].title == "Result 1"

    def test_missing_title_is_empty(self):
        hits = extract_hits(_page(_result(1, title=False)))
        assert hits[0].title == ""
        assert hits[0].link == ""
        assert hits[0].snippet == "Snippet for 1"

    def test_missing_href_is_empty(self):
        hits = extract_hits(_page(_result(1, link=False)))
        assert hits[0].link == ""
        assert hits[0].title == "Result 1"

    def test_empty_container_yields_empty_hit(self):
        hits = extract_hits('<div class="result__body"></div>')
        assert hits == [SearchHit("", "", "")]

    def test_no_containers(self):
        assert extract_hits("<html><body><p>nothing</p></body></html>") == []

    def test_empty_input(self):
        assert extract_hits("") == []

    def test_malformed_markup_does_not_raise(self):
        html = '<div class="result__body"><h2 class="result__title"><a href="/x">Broken'
        hits = extract_hits(html)
        assert hits == [SearchHit("Broken", "/x", "")]

    def test_idempotent(self):
        html = _page(*[_result(i) for i in range(3)])
        assert extract_hits(html) == extract_hits(html)


# ===================================================================
# format_hits
# ===================================================================


class TestFormatHits:

    def test_formats_blocks(self):
        text = format_hits([
            SearchHit("A", "https://a", "sa"),
            SearchHit("B", "https://b", "sb"),
        ])
        assert text == (
            "Title: A\nLink: https://a\nSnippet: sa\n"
            "\n"
            "Title: B\nLink: https://b\nSnippet: sb\n"
        )

    def test_placeholder(self):
        assert format_hits([NO_RESULTS]) == NO_RESULTS_TEXT

    def test_empty_list(self):
        assert format_hits([]) == NO_RESULTS_TEXT

    def test_placeholder_flag(self):
        assert NO_RESULTS.is_placeholder
        assert SearchHit(NO_RESULTS_TEXT, "", "").is_placeholder
        assert not SearchHit(NO_RESULTS_TEXT, "https://a", "").is_placeholder

    def test_equal_placeholder_copy_renders_as_no_results(self):
        assert format_hits([SearchHit(NO_RESULTS_TEXT, "", "")]) == NO_RESULTS_TEXT
