from __future__ import annotations

from typing import Any

from statcheck.assertions.base import AssertionResult, OnFail


def collect_metrics(
    results: list[AssertionResult], duration_seconds: float | None = None
) -> dict[str, Any]:
    """Collect summary metrics for the tests of a single job."""
    passed = sum(1 for r in results if r.passed)
    failed = len(results) - passed
    pass_rate = (passed / len(results) * 100) if results else 0.0

    # Failures by the policy that was applied to them
    by_policy = {policy.value: 0 for policy in OnFail}
    for r in results:
        if not r.passed:
            policy = r.on_fail or OnFail.ERROR
            by_policy[policy.value] += 1

    return {
        "wall_clock_seconds": duration_seconds,
        "test_count": len(results),
        "test_pass_count": passed,
        "test_fail_count": failed,
        "test_pass_rate": round(pass_rate, 2),
        "error_count": by_policy[OnFail.ERROR.value],
        "warning_count": by_policy[OnFail.WARN.value],
        "info_count": by_policy[OnFail.INFO.value],
        "ignored_count": by_policy[OnFail.IGNORE.value],
    }
