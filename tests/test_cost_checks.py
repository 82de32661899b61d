"""Tests for the cost-model checker."""

from pathlib import Path

import pytest

import budgetcheck.checks.cost_model as cost_model
from budgetcheck.checks import CostModelChecker, get_checker
from budgetcheck.checks.cost_model import (
    check_budget_split,
    check_command_startup,
    check_cost_definitions,
    check_cost_formula,
    check_currency_conversion,
    check_model_ordering,
    check_negative_input,
    check_repeated_status,
)
from budgetcheck.config import ModelPricing, load_config


@pytest.fixture
def config(project_dir: Path):
    return load_config(project_dir / "budgetcheck.yaml")


def test_get_checker_known_and_unknown():
    assert isinstance(get_checker("cost"), CostModelChecker)
    with pytest.raises(ValueError, match="Unknown suite"):
        get_checker("network")


def test_full_battery_passes_on_example_project(config, logger):
    results = CostModelChecker().run(config, logger)
    failed = [r for r in results if not r.passed]
    assert failed == []
    # 3 patterns, 3 split, 2 latency, 4 formula, 3 ordering, 1 repeat,
    # 1 large split, 1 currency, 1 negative, 1 small value
    assert len(results) == 20


def test_cost_definitions_found(config, logger):
    results = check_cost_definitions(config, logger)
    assert [r.passed for r in results] == [True, True, True]


def test_cost_definitions_missing_source_fails_each_required_pattern(config, logger, project_dir):
    (project_dir / "lib" / "budget-firewall.sh").unlink()
    results = check_cost_definitions(config, logger)
    assert [r.passed for r in results] == [False, False, True]
    assert all("not found" in r.message for r in results)


def test_cost_definitions_pattern_missing(config, logger, project_dir):
    (project_dir / "lib" / "budget-firewall.sh").write_text("echo nothing to see\n")
    results = check_cost_definitions(config, logger)
    assert results[0].passed is False
    assert results[0].actual == "not found"


def test_budget_split_detects_bad_totals(config, logger):
    config.budget.work_usd = 40.00
    results = check_budget_split(config, logger)
    assert [r.passed for r in results] == [False, False, True]
    assert results[0].expected == "65.0 ± 0.01"


def test_cost_formula_all_pass(config, logger):
    results = check_cost_formula(config, logger)
    assert all(r.passed for r in results)
    assert results[1].name == "Zero tokens = zero cost"


def test_model_ordering_flags_inverted_pricing(config, logger):
    config.cost_model.models = {"odd/model": ModelPricing(input=5.0, output=1.0)}
    results = check_model_ordering(config, logger)
    assert [r.passed for r in results] == [True, True, True, False]
    assert "odd/model" in results[-1].name


def test_model_ordering_reference_inverted(config, logger):
    config.cost_model.reference.cheap = 5.0
    results = check_model_ordering(config, logger)
    assert results[0].passed is False


def test_command_startup_ignores_exit_status(config, logger):
    config.command.argv = ["false"]
    results = check_command_startup(config, logger)
    assert all(r.passed for r in results)


def test_command_startup_fails_when_slow(config, logger):
    config.command.argv = ["sleep", "0.3"]
    config.command.help_args = []
    config.command.status_args = []
    config.command.help_ceiling_ms = 50
    results = check_command_startup(config, logger)
    assert results[0].passed is False
    assert results[1].passed is True


def test_repeated_status_is_informational(config, logger, mocker):
    spy = mocker.spy(cost_model, "time_command")
    config.command.argv = ["false"]
    config.command.repeat = 3
    results = check_repeated_status(config, logger)
    assert len(results) == 1
    assert results[0].passed is True
    assert results[0].informational is True
    assert spy.call_count == 3


def test_currency_mismatch_degrades_to_pass(config, logger):
    config.budget.aud_rate = 2.0
    results = check_currency_conversion(config, logger)
    assert results[0].passed is True
    assert "informational" in results[0].message


def test_negative_input(config, logger):
    result = check_negative_input(config, logger)[0]
    assert result.passed is True
    assert result.actual == pytest.approx(-0.14)


def test_raising_check_is_isolated(config, logger, mocker):
    def boom(cfg, log):
        raise RuntimeError("kaboom")

    checker = CostModelChecker()
    mocker.patch.object(checker, "checks", return_value=[boom, check_cost_formula])
    results = checker.run(config, logger)
    assert results[0].passed is False
    assert results[0].name == "boom"
    assert "kaboom" in results[0].message
    assert all(r.passed for r in results[1:])
    assert len(results) == 5
