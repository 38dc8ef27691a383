"""Web retrieval subpackage.

Architectural role:
    Issues the outbound search request and turns result markup into structured
    hits for prompt construction.

Security model:
    Result snippets are third-party text and are passed to the prompt as data.
"""
