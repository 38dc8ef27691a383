"""SearchChat: a conversational assistant grounded in live web search.

Package layout:
    - `api`: interactive CLI adapter and process startup.
    - `core`: per-turn orchestration, deadline handling, and error taxonomy.
    - `llm`: provider configuration, completion transport, and answer service.
    - `memory`: bounded short-term conversation memory.
    - `prompting`: search-query and prompt assembly.
    - `retrieval`: DuckDuckGo search and result extraction.
"""

__version__ = "0.1.0"
