"""Core orchestration package.

Composition:
    - `engine`: per-turn search -> prompt -> completion control flow.
    - `deadline`: shared, releasable per-turn time bound.
    - `errors`: search/completion/configuration exception taxonomy.
    - `turn_types`: turn outcome schema consumed by the CLI.

Package import itself is side-effect free.
"""
