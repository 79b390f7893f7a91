"""Base data structures for the test system."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar

from statcheck.messages import Messages, messages as default_messages
from statcheck.progress import DiagnosticCode, Progress

CounterLookup = Callable[[str], int | None]


class OnFail(str, Enum):
    """What the pipeline records when a test does not pass."""

    WARN = "warn"
    ERROR = "error"
    INFO = "info"
    IGNORE = "ignore"

    @classmethod
    def parse(cls, value: object) -> OnFail | None:
        if isinstance(value, OnFail):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class AssertionResult:
    """Result of evaluating a single test.

    Attributes:
        name: Display name of the test (e.g. "stats:requests.count").
        passed: Whether the test condition held.
        message: Human-readable pass or fail explanation.
        test_type: Type key of the test (e.g. "stats").
        on_fail: Policy applied when the test failed.
    """

    name: str
    passed: bool
    message: str
    test_type: str
    on_fail: OnFail | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "test_type": self.test_type,
            "on_fail": self.on_fail.value if self.on_fail else None,
        }


class AutomationTest(ABC):
    """A pass/fail check attached to a job in an automation plan."""

    TEST_TYPE: ClassVar[str]

    def __init__(self, job_type: str, messages: Messages | None = None):
        self.job_type = job_type
        self.messages = messages or default_messages

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def on_fail(self) -> OnFail | None: ...

    @property
    def test_type(self) -> str:
        return self.TEST_TYPE

    @abstractmethod
    def run_test(self, lookup: CounterLookup, progress: Progress) -> bool:
        """Evaluate the condition, recording evaluation problems on *progress*."""

    @property
    @abstractmethod
    def passed_message(self) -> str: ...

    @property
    @abstractmethod
    def failed_message(self) -> str: ...

    def evaluate(self, lookup: CounterLookup, progress: Progress) -> AssertionResult:
        passed = self.run_test(lookup, progress)
        message = self.passed_message if passed else self.failed_message
        self.log_to_progress(passed, message, progress)
        return AssertionResult(
            name=self.name,
            passed=passed,
            message=message,
            test_type=self.test_type,
            on_fail=self.on_fail,
        )

    def log_to_progress(self, passed: bool, message: str, progress: Progress) -> None:
        if passed:
            progress.info(DiagnosticCode.TEST_PASSED, message)
            return

        # An unset policy only survives when config errors were ignored.
        policy = self.on_fail or OnFail.ERROR
        if policy is OnFail.ERROR:
            progress.error(DiagnosticCode.TEST_FAILED, message)
        elif policy is OnFail.WARN:
            progress.warn(DiagnosticCode.TEST_FAILED, message)
        elif policy is OnFail.INFO:
            progress.info(DiagnosticCode.TEST_FAILED, message)
