"""
Tests for the per-turn deadline.
"""

import pytest

from searchchat.core.deadline import Deadline
from searchchat.core.errors import CompletionError, DeadlineExceededError


class TestDeadline:

    def test_remaining_counts_down(self, clock):
        deadline = Deadline(120, clock=clock)
        clock.advance(20)
        assert deadline.remaining() == 100
        assert not deadline.expired

    def test_remaining_never_negative(self, clock):
        deadline = Deadline(1, clock=clock)
        clock.advance(5)
        assert deadline.remaining() == 0.0
        assert deadline.expired

    def test_check_raises_after_expiry(self, clock):
        deadline = Deadline(10, clock=clock)
        deadline.check()
        clock.advance(10)
        with pytest.raises(DeadlineExceededError):
            deadline.check()

    def test_deadline_error_is_completion_error(self):
        assert issubclass(DeadlineExceededError, CompletionError)

    def test_context_manager_releases(self, clock):
        with Deadline(10, clock=clock) as deadline:
            assert not deadline.released
        assert deadline.released
        with pytest.raises(DeadlineExceededError):
            deadline.check()

    def test_released_on_exception(self, clock):
        deadline = Deadline(10, clock=clock)
        with pytest.raises(RuntimeError):
            with deadline:
                raise RuntimeError("boom")
        assert deadline.released

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            Deadline(0)
