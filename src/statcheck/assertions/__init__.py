"""Test system for checking automation plan outcomes."""

from __future__ import annotations

from typing import Any, Mapping

from statcheck.assertions.base import AssertionResult, AutomationTest, CounterLookup, OnFail
from statcheck.assertions.statistic import EvaluationResult, StatisticAssertion
from statcheck.messages import Messages, messages as default_messages
from statcheck.progress import DiagnosticCode, Progress

TEST_TYPES: dict[str, type[AutomationTest]] = {
    StatisticAssertion.TEST_TYPE: StatisticAssertion,
}


def create_test(
    test_data: Mapping[str, Any],
    job_type: str,
    progress: Progress,
    messages: Messages | None = None,
) -> AutomationTest | None:
    """Build the test named by ``test_data["type"]``, or record a diagnostic."""
    test_type = test_data.get("type")
    test_cls = TEST_TYPES.get(test_type) if isinstance(test_type, str) else None
    if test_cls is None:
        progress.error(
            DiagnosticCode.BAD_TYPE,
            (messages or default_messages).get("tests.error.badtype", job_type, test_type),
            field="type",
        )
        return None
    return test_cls(test_data, job_type, progress, messages)


__all__ = [
    "AssertionResult",
    "AutomationTest",
    "CounterLookup",
    "EvaluationResult",
    "OnFail",
    "StatisticAssertion",
    "TEST_TYPES",
    "create_test",
]
