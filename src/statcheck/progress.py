"""Side-channel sink for configuration problems and test outcomes.

Configuration checks never raise; they record a diagnostic here so that every
problem in a plan is reported in one pass. The caller decides whether the
accumulated errors stop the run.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any


class DiagnosticCode(str, Enum):
    MISSING_ON_FAIL = "missing-onFail"
    MISSING_OPERATOR = "missing-operator"
    BAD_OPERATOR = "bad-operator"
    MISSING_STATISTIC = "missing-statistic"
    MISSING_VALUE = "missing-value"
    BAD_TYPE = "bad-type"
    BAD_INT = "bad-int"
    UNKNOWN_OPTION = "unknown-option"
    TEST_PASSED = "test-passed"
    TEST_FAILED = "test-failed"


class Level(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["level"] = self.level.value
        d["code"] = self.code.value
        return d


_LOG_LEVELS = {
    Level.ERROR: logging.ERROR,
    Level.WARNING: logging.WARNING,
    Level.INFO: logging.INFO,
}


class Progress:
    """Thread-safe accumulator of diagnostics."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger
        self._entries: list[Diagnostic] = []
        self._lock = threading.Lock()

    def error(self, code: DiagnosticCode, message: str, field: str | None = None) -> None:
        self._add(Diagnostic(Level.ERROR, code, message, field))

    def warn(self, code: DiagnosticCode, message: str, field: str | None = None) -> None:
        self._add(Diagnostic(Level.WARNING, code, message, field))

    def info(self, code: DiagnosticCode, message: str, field: str | None = None) -> None:
        self._add(Diagnostic(Level.INFO, code, message, field))

    def _add(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._entries.append(diagnostic)
        if self.logger is not None:
            self.logger.log(_LOG_LEVELS[diagnostic.level], diagnostic.message)

    def _by_level(self, level: Level) -> list[Diagnostic]:
        with self._lock:
            return [d for d in self._entries if d.level is level]

    @property
    def errors(self) -> list[Diagnostic]:
        return self._by_level(Level.ERROR)

    @property
    def warnings(self) -> list[Diagnostic]:
        return self._by_level(Level.WARNING)

    @property
    def infos(self) -> list[Diagnostic]:
        return self._by_level(Level.INFO)

    @property
    def entries(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._entries)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def codes(self) -> list[DiagnosticCode]:
        return [d.code for d in self.entries]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
            "infos": [d.to_dict() for d in self.infos],
        }
