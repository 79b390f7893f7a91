"""Tests for the test factory and on-fail policy handling."""

import pytest

from statcheck.assertions import (
    AssertionResult,
    OnFail,
    StatisticAssertion,
    create_test,
)
from statcheck.progress import DiagnosticCode, Level
from statcheck.stats import InMemoryStats


# --- create_test dispatcher ---


def test_create_test_stats(stats_data, progress):
    test = create_test(stats_data, "spider", progress)
    assert isinstance(test, StatisticAssertion)
    assert test.job_type == "spider"
    assert progress.entries == []


@pytest.mark.parametrize("test_type", ["bogus", None, 3])
def test_create_test_bad_type(stats_data, progress, test_type):
    stats_data["type"] = test_type
    assert create_test(stats_data, "spider", progress) is None
    assert progress.codes() == [DiagnosticCode.BAD_TYPE]


def test_create_test_missing_type(progress):
    assert create_test({"statistic": "x"}, "spider", progress) is None
    assert progress.codes() == [DiagnosticCode.BAD_TYPE]


# --- OnFail.parse ---


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("warn", OnFail.WARN),
        ("Error", OnFail.ERROR),
        (" info ", OnFail.INFO),
        ("ignore", OnFail.IGNORE),
        (OnFail.WARN, OnFail.WARN),
        ("fatal", None),
        (None, None),
        (1, None),
    ],
)
def test_on_fail_parse(raw, expected):
    assert OnFail.parse(raw) is expected


# --- evaluate / policy ---


def test_evaluate_pass_logs_info(stats_data, progress):
    test = create_test(stats_data, "spider", progress)
    result = test.evaluate(InMemoryStats({"requests.count": 1}), progress)
    assert isinstance(result, AssertionResult)
    assert result.passed is True
    assert result.name == "request budget"
    assert result.test_type == "stats"
    assert "1 < 50" in result.message
    assert [(d.level, d.code) for d in progress.entries] == [
        (Level.INFO, DiagnosticCode.TEST_PASSED)
    ]


@pytest.mark.parametrize(
    "policy, level",
    [
        ("error", Level.ERROR),
        ("warn", Level.WARNING),
        ("info", Level.INFO),
    ],
)
def test_evaluate_failure_follows_policy(stats_data, progress, policy, level):
    stats_data["onFail"] = policy
    test = create_test(stats_data, "spider", progress)
    result = test.evaluate(InMemoryStats({"requests.count": 99}), progress)
    assert result.passed is False
    assert result.on_fail is OnFail(policy)
    assert "99 >= 50" in result.message
    assert [(d.level, d.code) for d in progress.entries] == [
        (level, DiagnosticCode.TEST_FAILED)
    ]


def test_evaluate_failure_ignored(stats_data, progress):
    stats_data["onFail"] = "ignore"
    test = create_test(stats_data, "spider", progress)
    result = test.evaluate(InMemoryStats({"requests.count": 99}), progress)
    assert result.passed is False
    assert progress.entries == []


def test_evaluate_without_threshold_reports_no_value(stats_data, progress):
    del stats_data["value"]
    test = create_test(stats_data, "spider", progress)
    result = test.evaluate(InMemoryStats(), progress)
    assert result.passed is False
    assert "no value" in result.message
    # once at construction, once at evaluation
    assert progress.codes().count(DiagnosticCode.MISSING_VALUE) == 2


def test_result_to_dict(stats_data, progress):
    test = create_test(stats_data, "spider", progress)
    result = test.evaluate(InMemoryStats(), progress)
    assert result.to_dict() == {
        "name": "request budget",
        "passed": True,
        "message": result.message,
        "test_type": "stats",
        "on_fail": "warn",
    }
