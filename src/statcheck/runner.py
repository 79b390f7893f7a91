from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from statcheck.assertions import AutomationTest, CounterLookup, create_test
from statcheck.config import JobConfig, PlanConfig
from statcheck.messages import Messages, load_messages
from statcheck.metrics import collect_metrics
from statcheck.progress import Progress
from statcheck.stats import InMemoryStats, load_stats
from statcheck.verbose import close_logger, setup_logger

JobName = str


@dataclass
class JobTests:
    job: JobConfig
    tests: list[AutomationTest] = field(default_factory=list)


def build_tests(
    config: PlanConfig, progress: Progress, messages: Messages | None = None
) -> list[JobTests]:
    """Instantiate every test in the plan, recording problems on *progress*."""
    built = []
    for job in config.jobs:
        job_tests = JobTests(job=job)
        for test_data in job.tests:
            test = create_test(test_data, job.type, progress, messages)
            if test is not None:
                job_tests.tests.append(test)
        built.append(job_tests)
    return built


class Runner:
    """Evaluates the tests of an automation plan against a counter snapshot."""

    def __init__(
        self,
        config: PlanConfig,
        output_dir: Path,
        stats: CounterLookup | None = None,
        verbose: bool = False,
        parallel_jobs: int = 1,
    ):
        self.config = config
        self.output_dir = output_dir
        self.stats = stats
        self.verbose = verbose
        self.parallel_jobs = parallel_jobs
        self.progress: Progress | None = None

    def _resolve_stats(self) -> CounterLookup:
        if self.stats is not None:
            return self.stats
        if self.config.stats is not None:
            return load_stats(Path(self.config.stats))
        # No snapshot means nothing has been counted yet
        return InMemoryStats()

    def execute(self) -> Path:
        """Validate and run all tests. Returns the run directory."""
        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S_%f")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log",
            verbose=self.verbose,
            logger_name=f"statcheck_run_{run_id}",
        )
        try:
            return self._execute(run_dir, logger)
        finally:
            close_logger(logger)

    def _execute(self, run_dir: Path, logger: logging.Logger) -> Path:
        logger.debug("Starting plan run")

        progress = Progress(logger=logger)
        self.progress = progress

        messages = (
            load_messages(Path(self.config.messages)) if self.config.messages else None
        )
        plan = build_tests(self.config, progress, messages)

        if progress.has_errors():
            self._write_progress(run_dir, progress)
            details = "\n".join(f"  {d.message}" for d in progress.errors)
            raise ValueError(f"Plan has configuration errors:\n{details}")

        lookup = self._resolve_stats()
        total = sum(len(jt.tests) for jt in plan)
        print(
            f"Running {total} test(s) in {len(plan)} job(s) with parallelism {self.parallel_jobs}..."
        )

        all_results: dict[JobName, dict[str, Any]] = {}
        with ThreadPoolExecutor(max_workers=self.parallel_jobs) as executor:
            future_to_job = {
                executor.submit(self._run_job, jt, lookup, progress, logger): jt
                for jt in plan
            }
            completed_count = 0
            for future in as_completed(future_to_job):
                jt = future_to_job[future]
                job_name = jt.job.display_name
                result = future.result()
                completed_count += 1
                status = "PASS" if result["all_passed"] else "FAIL"
                n_passed = result["metrics"]["test_pass_count"]
                print(
                    f"  [{completed_count}/{len(future_to_job)}] {status}  {job_name} ({n_passed}/{len(jt.tests)} tests)"
                )
                all_results[job_name] = result

        # Report jobs in plan order regardless of completion order
        ordered = {
            jt.job.display_name: all_results[jt.job.display_name] for jt in plan
        }
        self._write_results(run_dir, ordered, progress)
        return run_dir

    def _run_job(
        self,
        job_tests: JobTests,
        lookup: CounterLookup,
        progress: Progress,
        logger: logging.Logger,
    ) -> dict[str, Any]:
        """Evaluate the tests of a single job."""
        job = job_tests.job
        logger.debug(f"Evaluating {len(job_tests.tests)} test(s) for job '{job.display_name}'")

        start = time.monotonic()
        results = [test.evaluate(lookup, progress) for test in job_tests.tests]
        duration = time.monotonic() - start

        logger.debug(
            f"Job '{job.display_name}' completed: "
            f"{sum(1 for r in results if r.passed)}/{len(results)} tests passed"
        )

        return {
            "job_type": job.type,
            "metrics": collect_metrics(results, duration_seconds=duration),
            "tests": [r.to_dict() for r in results],
            "all_passed": all(r.passed for r in results),
        }

    def _write_progress(self, run_dir: Path, progress: Progress) -> None:
        (run_dir / "progress.yaml").write_text(
            yaml.dump(progress.to_dict(), default_flow_style=False, sort_keys=False)
        )

    def _write_results(
        self,
        run_dir: Path,
        all_results: dict[JobName, dict[str, Any]],
        progress: Progress,
    ) -> None:
        """Write junit.xml, progress.yaml and meta.yaml to the run directory."""
        from statcheck.reporting.junit import write_junit

        write_junit(run_dir, all_results)
        self._write_progress(run_dir, progress)

        try:
            import importlib.metadata

            statcheck_version = importlib.metadata.version("statcheck")
        except Exception:
            statcheck_version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "jobs": list(all_results.keys()),
            "stats": self.config.stats,
            "statcheck_version": statcheck_version,
            "errors": len(progress.errors),
            "warnings": len(progress.warnings),
        }

        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))
