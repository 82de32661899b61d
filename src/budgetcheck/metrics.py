from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from functools import reduce
from typing import Iterable

import numpy as np

from budgetcheck.assertions.base import AssertionResult


@dataclass(frozen=True)
class MetricStatistics:
    """Statistics for a single metric across repeated measurements."""

    avg: float | None
    min: float | None
    max: float | None
    stddev: float | None

    def to_dict(self) -> dict[str, float | None]:
        return asdict(self)


@dataclass(frozen=True)
class RunSummary:
    """Pass/fail counts for a run. Recording a result returns a new summary."""

    run: int = 0
    passed: int = 0
    failed: int = 0

    def record(self, result: AssertionResult) -> RunSummary:
        if result.passed:
            return replace(self, run=self.run + 1, passed=self.passed + 1)
        return replace(self, run=self.run + 1, failed=self.failed + 1)

    def merge(self, other: RunSummary) -> RunSummary:
        return RunSummary(
            run=self.run + other.run,
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
        )

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def summarize(results: Iterable[AssertionResult]) -> RunSummary:
    """Fold assertion results into a summary."""
    return reduce(lambda summary, result: summary.record(result), results, RunSummary())


def compute_stats(values: list[float | int | None]) -> MetricStatistics:
    """Compute avg, min, max, stddev for a list of numeric values."""
    nums = [v for v in values if v is not None]
    if not nums:
        return MetricStatistics(avg=None, min=None, max=None, stddev=None)

    arr = np.array(nums)
    return MetricStatistics(
        avg=round(float(np.mean(arr)), 4),
        min=round(float(np.min(arr)), 4),
        max=round(float(np.max(arr)), 4),
        stddev=round(float(np.std(arr)), 4),
    )
