"""Prompting package.

Deterministic search-query and prompt construction helpers used by the core
orchestration layer. No retrieval, memory writes, or model invocation.
"""
