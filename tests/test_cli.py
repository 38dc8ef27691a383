"""
Tests for the interactive CLI loop and startup.
"""

import pytest

from searchchat.api import cli
from searchchat.core.errors import ConfigurationError
from searchchat.core.turn_types import TurnResult, TurnStatus
from searchchat.llm.provider_config import ModelConfig


class FakeEngine:
    def __init__(self):
        self.questions = []

    async def process_message(self, question, on_status=None):
        self.questions.append(question)
        if on_status is not None:
            on_status("Generating response...")
        return TurnResult(TurnStatus.ANSWERED, f"answer to {question}", answer=f"answer to {question}")


def _reader(lines):
    queue = list(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        if not queue:
            raise EOFError
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    read_line.prompts = prompts
    return read_line


class TestRunLoop:

    def setup_method(self):
        self.engine = FakeEngine()
        self.output = []

    def test_answers_then_quits(self):
        read_line = _reader(["What is Go?", "quit", "never read"])
        cli.run_loop(self.engine, read_line=read_line, write=self.output.append)

        assert self.engine.questions == ["What is Go?"]
        assert self.output == ["\nGenerating response...", "answer to What is Go?"]
        assert read_line.prompts == [cli.INPUT_PROMPT] * 2

    @pytest.mark.parametrize("command", ["quit", "QUIT", "  Quit  "])
    def test_quit_variants(self, command):
        cli.run_loop(self.engine, read_line=_reader([command]), write=self.output.append)
        assert self.engine.questions == []
        assert self.output == []

    def test_exit_is_a_question(self):
        cli.run_loop(self.engine, read_line=_reader(["exit", "quit"]), write=self.output.append)
        assert self.engine.questions == ["exit"]

    def test_empty_lines_skipped(self):
        cli.run_loop(self.engine, read_line=_reader(["", "   ", "hi", "quit"]), write=self.output.append)
        assert self.engine.questions == ["hi"]

    def test_input_is_trimmed(self):
        cli.run_loop(self.engine, read_line=_reader(["  hi  ", "quit"]), write=self.output.append)
        assert self.engine.questions == ["hi"]

    def test_eof_ends_loop(self):
        cli.run_loop(self.engine, read_line=_reader(["hi"]), write=self.output.append)
        assert self.engine.questions == ["hi"]
        assert self.output[-1] == ""

    def test_keyboard_interrupt_ends_loop(self):
        read_line = _reader([KeyboardInterrupt()])
        cli.run_loop(self.engine, read_line=read_line, write=self.output.append)
        assert self.output == ["\nInterrupted."]


class TestMain:

    def test_configuration_error_exits_with_one(self, monkeypatch):
        def broken():
            raise ConfigurationError("OPENAI KEY FILE NOT FOUND")

        monkeypatch.setattr(cli, "build_model_config", broken)
        monkeypatch.setattr(cli, "run_loop", lambda engine: pytest.fail("loop must not start"))
        assert cli.main() == 1

    def test_starts_loop(self, monkeypatch):
        started = []
        monkeypatch.setattr(cli, "build_model_config", ModelConfig)
        monkeypatch.setattr(cli, "run_loop", started.append)
        assert cli.main() == 0
        assert len(started) == 1
        assert started[0].config.model_name == "llama3.1"


def test_is_quit_command():
    assert cli.is_quit_command(" QuIt ")
    assert not cli.is_quit_command("quitting")
