"""SearchChat API adapter package.

Architectural role:
- Defines the external interaction boundary (interactive CLI).
- Performs process startup: logging and model configuration.
- Delegates turn orchestration to the core layer.
"""
