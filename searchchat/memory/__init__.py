"""Memory subsystem package.

Holds `conversation_memory`, the bounded in-process log of recent turns that is
injected into search queries and prompts.
"""
