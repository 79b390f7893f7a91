from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="statcheck", help="Check automation statistics against thresholds")
schema_app = typer.Typer(name="schema", help="Generate schema tooling")
app.add_typer(schema_app, name="schema")


def _load_plan(config: str):
    from pydantic import ValidationError

    from statcheck.config import load_config

    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: plan file not found: {config}", err=True)
        raise typer.Exit(1)

    try:
        return load_config(config_path)
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid plan {config}: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def run(
    config: str = typer.Argument(help="Path to plan YAML"),
    stats: str | None = typer.Option(
        None, help="Counter snapshot (YAML or JSON), overrides the plan's stats file"
    ),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    parallel: int = typer.Option(
        1, "--parallel", "-p", min=1, max=100, help="Number of jobs to evaluate in parallel"
    ),
    fail_on_warning: bool = typer.Option(
        False, "--fail-on-warning", help="Exit non-zero when any warning was recorded"
    ),
):
    """Evaluate the tests of a plan against a counter snapshot."""
    from statcheck.reporting.junit import summarize
    from statcheck.runner import Runner
    from statcheck.stats import load_stats

    plan = _load_plan(config)

    lookup = None
    if stats is not None:
        stats_path = Path(stats)
        if not stats_path.exists():
            typer.echo(f"Error: stats file not found: {stats}", err=True)
            raise typer.Exit(1)
        try:
            lookup = load_stats(stats_path)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    runner = Runner(
        config=plan,
        output_dir=Path(output_dir),
        stats=lookup,
        verbose=verbose,
        parallel_jobs=parallel,
    )

    try:
        run_dir = runner.execute()
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    totals = summarize(run_dir / "junit.xml")
    typer.echo(
        f"Run complete: {run_dir} "
        f"({totals['tests']} tests, {totals['failures']} failed, {totals['skipped']} ignored)"
    )
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    progress = runner.progress
    if progress is not None and progress.has_errors():
        raise typer.Exit(1)
    if fail_on_warning and progress is not None and progress.has_warnings():
        raise typer.Exit(1)


@app.command()
def check(
    config: str = typer.Argument(help="Path to plan YAML"),
):
    """Validate a plan's tests without evaluating them."""
    from statcheck.messages import load_messages
    from statcheck.progress import Progress
    from statcheck.runner import build_tests

    plan = _load_plan(config)
    try:
        messages = load_messages(Path(plan.messages)) if plan.messages else None
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    progress = Progress()
    build_tests(plan, progress, messages)

    for d in progress.errors:
        typer.echo(f"ERROR   [{d.code.value}] {d.message}", err=True)
    for d in progress.warnings:
        typer.echo(f"WARNING [{d.code.value}] {d.message}", err=True)

    if progress.has_errors():
        typer.echo(f"{len(progress.errors)} error(s) in {config}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Plan OK: {len(plan.jobs)} job(s), {plan.test_count()} test(s)")


@app.command()
def init(
    dir: str = typer.Option(
        "statcheck", "--dir", help="Directory to initialize the plan in"
    ),
):
    """Initialize a new project with an example plan and counter snapshot."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "plan.yaml"
    if example.exists():
        typer.echo(f"plan.yaml already exists in {dir}, skipping.")
        return

    example.write_text("""\
stats: ./stats.yaml

jobs:
  - type: spider
    name: crawl
    tests:
      - type: stats
        name: at least one URL found
        statistic: spider.urls.found
        operator: ">="
        value: 1
        onFail: error
      - type: stats
        statistic: spider.errors
        operator: "=="
        value: 0
        onFail: warn
""")

    (project_dir / "stats.yaml").write_text("""\
spider:
  urls:
    found: 12
  errors: 0
""")

    typer.echo(f"Initialized plan in {dir}:")
    typer.echo("  plan.yaml   - example plan with statistic tests")
    typer.echo("  stats.yaml  - example counter snapshot")


@schema_app.command("generate")
def schema_generate(
    dir: str = typer.Option(
        "statcheck", "--dir", help="Project directory for default schema/doc outputs"
    ),
    out: str | None = typer.Option(
        None,
        help="Output path for JSON Schema (defaults to <dir>/schemas/statcheck.schema.json)",
    ),
    doc: str | None = typer.Option(
        None, help="Output path for schema docs (defaults to <dir>/docs/schema.md)"
    ),
):
    """Generate JSON Schema and docs for the plan YAML format."""
    from statcheck.schema import write_json_schema, write_schema_doc

    project_dir = Path(dir)
    out_path = (
        Path(out)
        if out is not None
        else project_dir / "schemas" / "statcheck.schema.json"
    )
    doc_path = Path(doc) if doc is not None else project_dir / "docs" / "schema.md"
    write_json_schema(out_path)
    write_schema_doc(doc_path)
    typer.echo(f"Wrote schema: {out_path}")
    typer.echo(f"Wrote docs: {doc_path}")
