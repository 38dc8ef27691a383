"""
Interactive CLI entrypoint for SearchChat.

Architectural role:
- Provides a terminal-only interface over the core engine.
- Performs process startup: logging setup and model configuration.
- Delegates each turn to `searchchat.core.engine.Engine.process_message`.

Request lifecycle (per user turn, CLI):
1. Read a single line from stdin.
2. Stop on `quit` (case-insensitive, surrounding whitespace ignored).
3. Forward other non-empty input to the engine, one turn at a time.
4. Print the status line, then the answer or the error line.

Error handling strategy:
- Invalid model configuration at startup is logged and exits with status 1.
- EOF and keyboard interrupts terminate the loop without traceback output.
- Turn failures never end the loop; the engine reports them as messages.
"""

import asyncio
import logging
import os
import sys

from searchchat.core.engine import Engine
from searchchat.core.errors import ConfigurationError
from searchchat.llm.provider_config import build_model_config


logger = logging.getLogger(__name__)

INPUT_PROMPT = "Enter your question (or 'quit' to exit): "
QUIT_COMMAND = "quit"


def configure_logging():
    """Configure root logging once for the process (`LOG_LEVEL`, default WARNING)."""
    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] %(levelname)s - %(message)s",
    )


def is_quit_command(text):
    return text.strip().lower() == QUIT_COMMAND


def run_loop(engine, read_line=input, write=print):
    """
    Run the interactive question/answer loop until `quit`, EOF, or Ctrl-C.

    Args:
        engine: Turn processor exposing `process_message`.
        read_line: Prompting line reader (injected by tests).
        write: Output function (injected by tests).
    """
    while True:

        try:
            question = read_line(INPUT_PROMPT).strip()

        except EOFError:
            write("")
            break

        except KeyboardInterrupt:
            write("\nInterrupted.")
            break

        if is_quit_command(question):
            break

        if not question:
            continue

        result = asyncio.run(
            engine.process_message(question, on_status=lambda status: write(f"\n{status}"))
        )
        write(result.message)


# =========================================================
# UTF-8 SAFE STDOUT
# Configures best-effort UTF-8 console output without failing startup.
# =========================================================

def _reconfigure_stdout():
    if hasattr(sys.stdout, "reconfigure"):
        try:
            sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
        except (OSError, ValueError):
            logger.debug("stdout reconfiguration not supported")


def main():
    """Start the assistant; returns the process exit status."""
    configure_logging()
    _reconfigure_stdout()

    try:
        config = build_model_config()
    except ConfigurationError as exc:
        logger.error("Failed to initialize LLM: %s", exc)
        return 1

    logger.info("Using model %s via %s (timeout %gs)", config.model_name, config.provider, config.timeout)

    run_loop(Engine(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
