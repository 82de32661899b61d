"""Cost-model checks: pricing arithmetic, budget splits and budget command latency."""

from __future__ import annotations

import logging
from pathlib import Path

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.assertions.deterministic import (
    check_command_latency,
    check_text_matches,
    time_command,
)
from budgetcheck.assertions.numeric import check_approx_equal, check_exact, check_less_than
from budgetcheck.checks.base import BaseChecker, Check
from budgetcheck.config import SuiteConfig
from budgetcheck.costs import convert_currency, share_percent, split_budget, token_cost
from budgetcheck.metrics import compute_stats


def _read_source(path: Path, logger: logging.Logger) -> str | None:
    if not path.is_file():
        logger.warning(f"Cost definition source {path} not found")
        return None
    return path.read_text(encoding="utf-8", errors="replace")


def check_cost_definitions(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    """Look for each configured pattern in the cost-definition source."""
    path = config.resolve(config.cost_model.source)
    text = _read_source(path, logger)
    return [
        check_text_matches(
            text,
            pat.pattern,
            logger,
            name=pat.name,
            source=path.name,
            required=pat.required,
        )
        for pat in config.cost_model.patterns
    ]


def check_budget_split(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    budget = config.budget
    eps = config.cost_model.epsilon
    work_pct = share_percent(budget.work_usd, budget.monthly_usd)
    personal_pct = share_percent(budget.personal_usd, budget.monthly_usd)
    return [
        check_approx_equal(
            f"{budget.work_share:g}/{budget.personal_share:g} budget split adds up to total",
            budget.work_usd + budget.personal_usd,
            budget.monthly_usd,
            logger,
            epsilon=eps,
        ),
        check_approx_equal(
            f"Work budget is {budget.work_share:g}% of total",
            work_pct,
            budget.work_share,
            logger,
            epsilon=budget.share_epsilon,
        ),
        check_approx_equal(
            f"Personal budget is {budget.personal_share:g}% of total",
            personal_pct,
            budget.personal_share,
            logger,
            epsilon=budget.share_epsilon,
        ),
    ]


def check_command_startup(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    """Time the help and status invocations of the budget command.

    Exit status is intentionally unchecked; only elapsed time is judged.
    """
    cmd = config.command
    return [
        check_command_latency(
            cmd.argv + cmd.help_args,
            cmd.help_ceiling_ms,
            logger,
            name=f"Budget command startup < {cmd.help_ceiling_ms:.0f}ms",
            cwd=config.base_dir,
            timeout=cmd.timeout_seconds,
        ),
        check_command_latency(
            cmd.argv + cmd.status_args,
            cmd.status_ceiling_ms,
            logger,
            name=f"Budget status command < {cmd.status_ceiling_ms:.0f}ms",
            cwd=config.base_dir,
            timeout=cmd.timeout_seconds,
        ),
    ]


def check_cost_formula(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    return [
        check_approx_equal(
            "Large token count calculation (100M tokens = $14.00)",
            token_cost(100_000_000, 0.14),
            14.00,
            logger,
            epsilon=0.1,
        ),
        check_exact("Zero tokens = zero cost", token_cost(0, 3.00), 0.0, logger),
        check_approx_equal(
            "Fractional token cost is accurate",
            token_cost(999, 1.00),
            0.000999,
            logger,
            epsilon=0.0001,
        ),
        check_approx_equal(
            "Sub-cent precision is maintained",
            token_cost(1000, 0.14),
            0.00014,
            logger,
            epsilon=0.00001,
        ),
    ]


def check_model_ordering(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    ref = config.cost_model.reference
    results = [
        check_less_than(
            "Cheap model costs less than mid-range model",
            ref.cheap,
            ref.mid,
            logger,
            lower_label="cheap",
            upper_label="mid",
        ),
        check_less_than(
            "Expensive model costs more than mid-range model",
            ref.mid,
            ref.expensive,
            logger,
            lower_label="mid",
            upper_label="expensive",
        ),
        check_less_than(
            "Output tokens cost more than input",
            ref.input,
            ref.output,
            logger,
            lower_label="input",
            upper_label="output",
        ),
    ]
    for model, pricing in config.cost_model.models.items():
        ordered = pricing.output >= pricing.input
        logger.info(f"Pricing for {model}: input={pricing.input} output={pricing.output}")
        results.append(
            AssertionResult(
                name=f"{model} output price is not below input price",
                passed=ordered,
                message=f"input {pricing.input}, output {pricing.output}",
                expected="output >= input",
                actual=f"{pricing.output} vs {pricing.input}",
            )
        )
    return results


def check_repeated_status(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    """Run status several times and report timings. Never fails."""
    cmd = config.command
    timings = [
        time_command(
            cmd.argv + cmd.status_args,
            logger,
            cwd=config.base_dir,
            timeout=cmd.timeout_seconds,
        ).elapsed_ms
        for _ in range(cmd.repeat)
    ]
    stats = compute_stats(timings)
    logger.info(f"Status timings over {cmd.repeat} runs: {stats.to_dict()}")
    return [
        AssertionResult(
            name=f"{cmd.repeat} rapid status checks completed (avg {stats.avg:.0f}ms each)",
            passed=True,
            message=(
                f"avg {stats.avg:.0f}ms, min {stats.min:.0f}ms, "
                f"max {stats.max:.0f}ms, stddev {stats.stddev:.1f}ms"
            ),
            actual=stats.to_dict(),
            informational=True,
        )
    ]


def check_large_budget(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    return [
        check_approx_equal(
            "Large budget split calculation ($10,000 -> $7,000 work)",
            split_budget(10000, 70),
            7000.00,
            logger,
            epsilon=1,
        )
    ]


def check_currency_conversion(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    budget = config.budget
    return [
        check_approx_equal(
            "USD to AUD conversion works",
            convert_currency(budget.monthly_usd, budget.aud_rate),
            budget.expected_aud,
            logger,
            epsilon=budget.currency_epsilon,
            informational=True,
        )
    ]


def check_negative_input(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    """Negative tokens propagate to negative costs; callers must validate input."""
    ref = config.cost_model.reference
    return [
        check_approx_equal(
            "Negative values produce negative costs (input validation needed)",
            token_cost(-1_000_000, ref.cheap),
            -ref.cheap,
            logger,
            epsilon=1e-9,
            informational=True,
        )
    ]


def check_small_values(config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
    remaining = config.budget.small_remaining_usd
    representable = remaining > 0 and round(remaining, 6) == remaining
    logger.info(f"Small remaining budget {remaining} representable={representable}")
    return [
        AssertionResult(
            name="Very small budget values are representable",
            passed=True,
            message=f"{remaining:.6f}" if representable else f"{remaining!r} loses precision at 6 dp",
            expected=f"{remaining:.6f}",
            actual=repr(remaining),
            informational=True,
        )
    ]


class CostModelChecker(BaseChecker):
    def suite_name(self) -> str:
        return "cost"

    def title(self) -> str:
        return "Budget Calculation Tests"

    def checks(self) -> list[Check]:
        return [
            check_cost_definitions,
            check_budget_split,
            check_command_startup,
            check_cost_formula,
            check_model_ordering,
            check_repeated_status,
            check_large_budget,
            check_currency_conversion,
            check_negative_input,
            check_small_values,
        ]
