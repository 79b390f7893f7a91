"""Statistic tests: compare a tracked counter against a threshold."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from statcheck.assertions.base import AutomationTest, CounterLookup, OnFail
from statcheck.messages import Messages
from statcheck.operators import Operator
from statcheck.progress import DiagnosticCode, Progress

KNOWN_OPTIONS = ("type", "name", "statistic", "operator", "value", "onFail")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass
class EvaluationResult:
    observed_value: int
    passed: bool


class StatisticAssertion(AutomationTest):
    """Passes when ``<statistic> <operator> <value>`` holds.

    Construction never raises: every configuration problem is recorded on the
    progress sink so that the whole plan can be reported at once, and the
    object stays queryable for its configured fields.
    """

    TEST_TYPE = "stats"

    @dataclass
    class Data:
        statistic: str | None = None
        name: str | None = None
        operator: str | None = None
        value: int | None = None
        on_fail: OnFail | None = None

    def __init__(
        self,
        test_data: Mapping[str, Any],
        job_type: str,
        progress: Progress,
        messages: Messages | None = None,
    ):
        super().__init__(job_type, messages)
        self.stat = 0
        self._result: EvaluationResult | None = None
        self.data = self._bind(test_data, progress)
        self._validate(progress)

    @classmethod
    def from_params(
        cls,
        statistic: str,
        name: str,
        operator: str,
        value: int,
        on_fail: str,
        job_type: str,
        progress: Progress,
        messages: Messages | None = None,
    ) -> StatisticAssertion:
        test_data = {
            "statistic": statistic,
            "name": name,
            "operator": operator,
            "value": value,
            "onFail": on_fail,
        }
        return cls(test_data, job_type, progress, messages)

    def _bind(self, test_data: Mapping[str, Any], progress: Progress) -> Data:
        data = self.Data()
        raw_name = test_data.get("name")
        data.name = str(raw_name) if raw_name not in (None, "") else None
        statistic = test_data.get("statistic")
        data.statistic = str(statistic) if statistic is not None else None
        operator = test_data.get("operator")
        data.operator = str(operator) if operator is not None else None
        data.on_fail = OnFail.parse(test_data.get("onFail"))

        # name is set first so diagnostics below can refer to it
        self.data = data

        if "value" in test_data and test_data["value"] is not None:
            data.value = _to_int(test_data["value"])
            if data.value is None:
                progress.error(
                    DiagnosticCode.BAD_INT,
                    self.messages.get(
                        "options.error.badint",
                        self.job_type,
                        self.name,
                        "value",
                        test_data["value"],
                    ),
                    field="value",
                )

        for key in test_data:
            if key not in KNOWN_OPTIONS:
                progress.warn(
                    DiagnosticCode.UNKNOWN_OPTION,
                    self.messages.get(
                        "options.error.unknown", self.job_type, self.name, key
                    ),
                    field=str(key),
                )
        return data

    def _validate(self, progress: Progress) -> None:
        if self.data.on_fail is None:
            progress.error(
                DiagnosticCode.MISSING_ON_FAIL,
                self.messages.get("tests.error.badonfail", self.job_type, self.name),
                field="onFail",
            )
        if not self.data.operator:
            progress.error(
                DiagnosticCode.MISSING_OPERATOR,
                self.messages.get(
                    "tests.stats.error.nooperator", self.job_type, self.name
                ),
                field="operator",
            )
        elif Operator.from_symbol(self.data.operator) is None:
            progress.error(
                DiagnosticCode.BAD_OPERATOR,
                self.messages.get(
                    "tests.stats.error.badoperator",
                    self.job_type,
                    self.name,
                    self.data.operator,
                ),
                field="operator",
            )
        if not self.data.statistic:
            progress.error(
                DiagnosticCode.MISSING_STATISTIC,
                self.messages.get(
                    "tests.stats.error.nostatistic", self.job_type, self.name
                ),
                field="statistic",
            )
        if self.data.value is None:
            progress.error(
                DiagnosticCode.MISSING_VALUE,
                self.messages.get("tests.stats.error.novalue", self.job_type, self.name),
                field="value",
            )

    @property
    def name(self) -> str:
        if self.data.name:
            return self.data.name
        if self.data.statistic:
            return f"{self.TEST_TYPE}:{self.data.statistic}"
        return self.TEST_TYPE

    @property
    def on_fail(self) -> OnFail | None:
        return self.data.on_fail

    @property
    def operator(self) -> Operator:
        op = Operator.from_symbol(self.data.operator)
        if op is None:
            raise RuntimeError(f"Unexpected operator {self.data.operator!r}")
        return op

    @property
    def result(self) -> EvaluationResult | None:
        """Outcome of the most recent evaluation, if any."""
        return self._result

    def run_test(self, lookup: CounterLookup, progress: Progress) -> bool:
        if self.data.value is None:
            progress.error(
                DiagnosticCode.MISSING_VALUE,
                self.messages.get("tests.stats.error.novalue", self.job_type, self.name),
                field="value",
            )
            self._result = EvaluationResult(observed_value=self.stat, passed=False)
            return False

        observed = lookup(self.data.statistic or "")
        self.stat = observed if observed is not None else 0

        passed = self.operator.compare(self.stat, self.data.value)
        self._result = EvaluationResult(observed_value=self.stat, passed=passed)
        return passed

    def _reason(self, op: Operator) -> str:
        return f"{self.stat} {op.symbol} {self.data.value}"

    @property
    def passed_message(self) -> str:
        return self.messages.get(
            "tests.pass",
            self.job_type,
            self.test_type,
            self.name,
            self._reason(self.operator),
        )

    @property
    def failed_message(self) -> str:
        if self.data.value is None:
            return self.messages.get(
                "tests.stats.error.novalue", self.job_type, self.name
            )
        return self.messages.get(
            "tests.fail",
            self.job_type,
            self.test_type,
            self.name,
            self._reason(self.operator.inverse),
        )


def _to_int(value: Any) -> int | None:
    """Coerce a config value to a 64-bit int, rejecting bools and fractional numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    elif isinstance(value, str):
        try:
            result = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not INT64_MIN <= result <= INT64_MAX:
        return None
    return result
