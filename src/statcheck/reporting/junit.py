from __future__ import annotations

from pathlib import Path
from typing import Any

from junitparser import Failure, JUnitXml, Skipped, TestCase, TestSuite


def write_junit(run_dir: Path, all_results: dict[str, dict[str, Any]]) -> Path:
    """Write junit.xml from per-job results dict, return path."""
    xml = JUnitXml()

    for job_name, job_result in all_results.items():
        metrics = job_result.get("metrics", {})
        tests = job_result.get("tests", [])

        suite = TestSuite(job_name)

        prop_keys = [
            "job_type",
            "test_pass_rate",
            "error_count",
            "warning_count",
            "info_count",
            "ignored_count",
        ]
        props = {**metrics, "job_type": job_result.get("job_type")}
        for key in prop_keys:
            val = props.get(key)
            if val is not None:
                suite.add_property(key, str(val))

        # One test case per test; ignored failures are reported as skipped
        for test in tests:
            case = TestCase(test["name"])
            case.classname = f"{job_name}.{test.get('test_type', 'test')}"
            if not test.get("passed", True):
                if test.get("on_fail") == "ignore":
                    case.result = [Skipped(test.get("message", ""))]
                else:
                    case.result = [
                        Failure(test.get("message", ""), type_=test.get("on_fail"))
                    ]
            suite.add_testcase(case)

        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = float(metrics.get("wall_clock_seconds") or 0.0)

        # Use append (not +=) to preserve properties and time
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def summarize(junit_path: Path) -> dict[str, int]:
    """Read back a junit.xml and total its tests, failures and skips."""
    xml = JUnitXml.fromfile(str(junit_path))
    totals = {"suites": 0, "tests": 0, "failures": 0, "skipped": 0}
    for suite in xml:
        totals["suites"] += 1
        totals["tests"] += suite.tests
        totals["failures"] += suite.failures
        totals["skipped"] += suite.skipped
    return totals
