"""Turn outcome data contracts for `searchchat.core.engine`.

Architectural role:
    Defines the structure returned by `Engine.process_message` and consumed by the
    CLI adapter, which prints `message` (and nothing else) for every outcome.

Determinism:
    Purely structural and state-free.
"""

from dataclasses import dataclass
from enum import Enum


class TurnStatus(str, Enum):
    ANSWERED = "answered"
    CAPTCHA = "captcha"
    SEARCH_FAILED = "search_failed"
    TIMEOUT = "timeout"
    COMPLETION_FAILED = "completion_failed"
    EMPTY = "empty"


@dataclass
class TurnResult:
    """Outcome of one processed turn.

    Attributes:
        status: Which exit path the turn took.
        message: User-facing output line (the answer itself on success).
        answer: Generated answer on success, otherwise `None`.
        search_query: Effective query sent to the search step, if one was sent.
    """

    status: TurnStatus
    message: str
    answer: str | None = None
    search_query: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is TurnStatus.ANSWERED
