"""Bounded short-term conversation memory.

Purpose of this abstraction:
    Keep the most recent exchanges of the current process so they can be injected
    into the next search query and prompt. The memory is an explicitly owned object
    held by one `Engine`; there is no module-level session state.

Bounds:
    - At most `MAX_TURNS` (10) stored turns, i.e. five full exchanges.
    - User text is truncated to 100 characters, assistant text to 200 characters,
      before storage.
    - Eviction is FIFO: the oldest turns are dropped first.

Write policy:
    Only fully successful exchanges are appended. Failure paths in the engine never
    touch memory.

Persistence:
    None. Memory lives for the process lifetime only.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum


MAX_TURNS = 10
ELLIPSIS = "..."


class Role(str, Enum):
    USER = "User"
    ASSISTANT = "Assistant"


MAX_TEXT_LENGTH = {
    Role.USER: 100,
    Role.ASSISTANT: 200,
}


@dataclass(frozen=True)
class ConversationTurn:
    """One stored message."""

    role: Role
    text: str

    def render(self) -> str:
        return f"{self.role.value}: {self.text}"


def truncate_text(text: str, max_length: int) -> str:
    """Cut `text` to `max_length` characters, ending in an ellipsis when cut.

    Text that already fits is returned unchanged. Longer text keeps its first
    `max_length - 3` characters followed by `...`, so the result is exactly
    `max_length` characters long.
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return ELLIPSIS[:max_length]
    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS


class ConversationMemory:
    """Ordered, bounded log of prior turns (oldest first)."""

    def __init__(self, max_turns: int = MAX_TURNS) -> None:
        self.max_turns = max_turns
        self._turns = deque()

    def append(self, turn: ConversationTurn) -> None:
        """Store `turn` after role-specific truncation, evicting the oldest overflow."""
        limit = MAX_TEXT_LENGTH[turn.role]
        self._turns.append(ConversationTurn(turn.role, truncate_text(turn.text, limit)))
        while len(self._turns) > self.max_turns:
            self._turns.popleft()

    def add_exchange(self, question: str, answer: str) -> None:
        """Append one user turn and one assistant turn."""
        self.append(ConversationTurn(Role.USER, question))
        self.append(ConversationTurn(Role.ASSISTANT, answer))

    def snapshot(self) -> tuple:
        """Return stored turns, oldest first, without mutating memory."""
        return tuple(self._turns)

    def render_lines(self) -> list:
        return [turn.render() for turn in self._turns]

    def clear(self) -> None:
        self._turns.clear()

    def __len__(self) -> int:
        return len(self._turns)
