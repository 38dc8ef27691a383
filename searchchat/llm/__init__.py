"""LLM access package.

Module split:
    - `provider_config`: fixed model settings, provider endpoints, key lookup.
    - `service`: prompt-to-answer adapter and delivery-mode handling.
    - `client`: OpenAI-compatible HTTP transport and response parsing.
"""
