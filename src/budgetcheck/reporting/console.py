"""Colored per-assertion console output."""

from __future__ import annotations

import typer

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.metrics import RunSummary


def print_header(title: str) -> None:
    typer.echo(f"=== {title} ===")
    typer.echo("")


def print_result(result: AssertionResult) -> None:
    if result.passed:
        typer.echo(typer.style("PASS", fg=typer.colors.GREEN) + f": {result.name}")
        return
    typer.echo(typer.style("FAIL", fg=typer.colors.RED) + f": {result.name}")
    typer.echo(f"       Expected: {result.expected}")
    typer.echo(f"       Got: {result.actual}")


def print_summary(summary: RunSummary) -> None:
    passed = typer.style(f"Passed: {summary.passed}", fg=typer.colors.GREEN)
    failed = typer.style(f"Failed: {summary.failed}", fg=typer.colors.RED)
    typer.echo("")
    typer.echo(f"Total: {summary.run} | {passed} | {failed}")


def print_blank() -> None:
    typer.echo("")
