import pytest

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.metrics import RunSummary, compute_stats, summarize


def _result(passed: bool) -> AssertionResult:
    return AssertionResult(name="a", passed=passed)


def test_record_returns_new_summary():
    empty = RunSummary()
    after = empty.record(_result(True))
    assert empty == RunSummary(run=0, passed=0, failed=0)
    assert after == RunSummary(run=1, passed=1, failed=0)


def test_summary_is_frozen():
    with pytest.raises(AttributeError):
        RunSummary().failed = 3  # type: ignore[misc]


def test_summarize_counts():
    summary = summarize([_result(True), _result(False), _result(True)])
    assert summary.run == 3
    assert summary.passed == 2
    assert summary.failed == 1


def test_exit_code_zero_when_all_passed():
    summary = summarize([_result(True), _result(True)])
    assert summary.all_passed is True
    assert summary.exit_code == 0


def test_exit_code_one_when_any_failed():
    assert summarize([_result(True), _result(False)]).exit_code == 1


def test_empty_run_exits_zero():
    assert summarize([]).exit_code == 0


def test_merge():
    merged = RunSummary(2, 2, 0).merge(RunSummary(3, 1, 2))
    assert merged == RunSummary(run=5, passed=3, failed=2)


def test_compute_stats():
    stats = compute_stats([10.0, 20.0, 30.0])
    assert stats.avg == 20.0
    assert stats.min == 10.0
    assert stats.max == 30.0
    assert stats.stddev == pytest.approx(8.165, abs=0.001)


def test_compute_stats_ignores_none():
    stats = compute_stats([None, 5.0])
    assert stats.avg == 5.0


def test_compute_stats_empty():
    stats = compute_stats([])
    assert stats.to_dict() == {"avg": None, "min": None, "max": None, "stddev": None}
