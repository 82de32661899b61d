from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="budgetcheck", help="Verify budget arithmetic and config templates")
schema_app = typer.Typer(name="schema", help="Generate schema tooling")
app.add_typer(schema_app, name="schema")


@app.command()
def run(
    config: str | None = typer.Argument(None, help="Path to budgetcheck YAML config"),
    suite: str | None = typer.Option(
        None, help="Run only this suite (cost or template)"
    ),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Run the configured checks and exit non-zero if any failed."""
    from pydantic import ValidationError

    from budgetcheck.config import load_config
    from budgetcheck.runner import Runner

    config_path = Path(config) if config is not None else None
    if config_path is not None and not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)

    try:
        suite_config = load_config(config_path)
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid config: {e}", err=True)
        raise typer.Exit(1)

    runner = Runner(
        config=suite_config,
        output_dir=Path(output_dir),
        suite_filter=suite,
        verbose=verbose,
    )

    try:
        run_dir = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if runner.interrupted:
        typer.echo(f"Partial run saved: {run_dir}")
    else:
        typer.echo(f"Run complete: {run_dir}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if runner.exit_code != 0:
        raise typer.Exit(runner.exit_code)


@app.command()
def report(
    run_dir: str = typer.Argument(help="Path to run output directory"),
    open_report: bool = typer.Option(
        False, "--open", help="Open report.html in browser after generating"
    ),
):
    """Render an HTML report from a previous run."""
    from budgetcheck.reporting.junit import generate_report

    run_path = Path(run_dir)
    if not run_path.exists() or not (run_path / "junit.xml").exists():
        typer.echo(f"Error: not a valid run directory: {run_dir}", err=True)
        raise typer.Exit(1)

    report_path = generate_report(run_path)
    typer.echo(f"Report generated: {report_path}")

    if open_report:
        import webbrowser

        webbrowser.open(report_path.resolve().as_uri())


def _examples_source() -> Path | None:
    # Installed package: examples are bundled next to cli.py
    pkg = Path(__file__).parent / "examples"
    if pkg.exists():
        return pkg
    # Development: examples live at repo root (three levels up from src/budgetcheck/cli.py)
    repo = Path(__file__).parent.parent.parent / "examples"
    if repo.exists():
        return repo
    return None


EXAMPLE_CONFIG = """\
suites: [cost, template]

cost_model:
  source: lib/budget-firewall.sh
  models:
    deepseek/deepseek-v3: {input: 0.27, output: 1.10}
    anthropic/claude-opus-4.5: {input: 5.00, output: 25.00}

budget:
  monthly_usd: 65.00
  work_usd: 45.50
  personal_usd: 19.50

command:
  argv: [lib/budget-firewall.sh]
  help_ceiling_ms: 1000
  status_ceiling_ms: 5000

template:
  path: templates/dcp.jsonc.tmpl
"""


@app.command()
def init(
    dir: str = typer.Option(
        "budgetcheck", "--dir", help="Directory to initialize the project in"
    ),
    with_examples: bool = typer.Option(
        False,
        "--with-examples",
        help="Copy the example template and budget script into the project",
    ),
):
    """Initialize a new project with an example config."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "budgetcheck.yaml"
    if example.exists():
        typer.echo(f"budgetcheck.yaml already exists in {dir}, skipping.")
        return

    example.write_text(EXAMPLE_CONFIG)
    typer.echo(f"Initialized budgetcheck project in {dir}:")
    typer.echo("  budgetcheck.yaml - example config")

    if with_examples:
        src = _examples_source()
        if src is None:
            typer.echo("Error: bundled examples not found.", err=True)
            raise typer.Exit(1)
        import shutil

        for sub in ("lib", "templates"):
            shutil.copytree(src / sub, project_dir / sub, dirs_exist_ok=True)
        typer.echo("  lib/             - example budget command")
        typer.echo("  templates/       - example dcp.jsonc.tmpl")


@schema_app.command("generate")
def schema_generate(
    dir: str = typer.Option(
        "budgetcheck", "--dir", help="Project directory for default schema/doc outputs"
    ),
    out: str | None = typer.Option(
        None,
        help="Output path for JSON Schema (defaults to <dir>/schemas/budgetcheck.schema.json)",
    ),
    doc: str | None = typer.Option(
        None, help="Output path for schema docs (defaults to <dir>/docs/schema.md)"
    ),
):
    """Generate JSON Schema and docs for the config YAML format."""
    from budgetcheck.schema import write_json_schema, write_schema_doc

    project_dir = Path(dir)
    out_path = (
        Path(out)
        if out is not None
        else project_dir / "schemas" / "budgetcheck.schema.json"
    )
    doc_path = Path(doc) if doc is not None else project_dir / "docs" / "schema.md"
    write_json_schema(out_path)
    write_schema_doc(doc_path)
    typer.echo(f"Wrote schema: {out_path}")
    typer.echo(f"Wrote docs: {doc_path}")
