"""Observers offered every decoded cargo message.

The extractors call an observer for each message before classifying it.
``log_message`` is the default; ``print_message`` writes to stderr instead,
which is handy when writing tests against a cargo project.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable

from cargo_harness.core.logging import get_logger
from cargo_harness.models.diagnostic import DiagnosticLevel
from cargo_harness.models.message import (
    BuildFinished,
    BuildScriptExecuted,
    CompilerArtifact,
    CompilerMessage,
    Message,
)

log = get_logger(__name__)

MessageObserver = Callable[[Message], None]

_DIAGNOSTIC_LOG_LEVELS: dict[DiagnosticLevel, int] = {
    DiagnosticLevel.ICE: logging.ERROR,
    DiagnosticLevel.ERROR: logging.ERROR,
    DiagnosticLevel.WARNING: logging.WARNING,
    DiagnosticLevel.FAILURE_NOTE: logging.INFO,
    DiagnosticLevel.NOTE: logging.INFO,
    DiagnosticLevel.HELP: logging.INFO,
}


def describe_message(message: Message) -> tuple[int, str]:
    """Log level and human-readable text for one message."""
    if isinstance(message, BuildFinished):
        return logging.DEBUG, f"Build Finished: {message.success}"
    if isinstance(message, CompilerArtifact):
        return logging.DEBUG, f"Building {message.package_id}"
    if isinstance(message, CompilerMessage):
        diagnostic = message.message
        known = diagnostic.known_level
        if known is None:
            return logging.WARNING, f"Unknown diagnostic level {diagnostic.level}: {diagnostic.text}"
        return _DIAGNOSTIC_LOG_LEVELS[known], diagnostic.text
    if isinstance(message, BuildScriptExecuted):
        return logging.DEBUG, f"Ran script from {message.package_id}"
    return logging.WARNING, f"Unknown message: {message.reason}"


def log_message(message: Message) -> None:
    level, text = describe_message(message)
    log.log(level, text, reason=message.reason)


def print_message(message: Message) -> None:
    _, text = describe_message(message)
    print(text, file=sys.stderr)


def null_observer(message: Message) -> None:
    """Discard the message."""
