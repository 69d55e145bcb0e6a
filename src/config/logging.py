"""
Logging setup.

Tool and bootstrap modules log through the standard ``logging`` module;
records are rendered by Rich so they sit nicely next to the chat output.
"""

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a Rich handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, markup=False, rich_tracebacks=True)],
        force=True,
    )

    # Client libraries are chatty at INFO
    for noisy in ("httpx", "chromadb"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
