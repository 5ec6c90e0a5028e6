"""
Console narration of test phases.

Scenario output (test start, numbered phases, outcome lines) goes through
the standard ``logging`` module so pytest can capture it per test and
show it only on failure, or live with ``-o log_cli=true``.
"""

from __future__ import annotations

import logging
import sys

NARRATION_LOGGER_NAME = "storefront.narration"

_MARKERS = {
    "info": "[INFO]",
    "success": "[ OK ]",
    "warning": "[WARN]",
    "error": "[FAIL]",
}


class NarrationHandler(logging.StreamHandler):
    """Stream handler that writes narration lines without decoration."""

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)
        self.setFormatter(logging.Formatter("%(message)s"))


def configure_narration(stream=None) -> logging.Logger:
    """
    Attach a bare ``%(message)s`` stdout handler to the narration logger.

    Safe to call repeatedly; the handler is only added once.
    """
    logger = logging.getLogger(NARRATION_LOGGER_NAME)
    if not any(isinstance(handler, NarrationHandler) for handler in logger.handlers):
        logger.addHandler(NarrationHandler(stream))
    logger.setLevel(logging.INFO)
    return logger


class TestLogger:
    """
    Formats test narration lines.

    Stateless apart from the logger it writes to, so one instance can be
    shared by every test in a worker.
    """

    __test__ = False

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or configure_narration()

    def test_start(self, test_name: str) -> None:
        self._logger.info("\nTEST START: %s", test_name)

    def phase(self, number: int, description: str) -> None:
        self._logger.info("\nPHASE %d: %s", number, description)

    def info(self, message: str) -> None:
        self._logger.info("   %s %s", _MARKERS["info"], message)

    def success(self, message: str) -> None:
        self._logger.info("   %s %s", _MARKERS["success"], message)

    def warning(self, message: str) -> None:
        self._logger.warning("   %s %s", _MARKERS["warning"], message)

    def error(self, message: str) -> None:
        self._logger.error("   %s %s", _MARKERS["error"], message)


narrator = TestLogger()
