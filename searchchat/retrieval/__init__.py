"""Retrieval package.

Scope:
    - `web`: DuckDuckGo search, CAPTCHA detection, and result extraction.
"""
