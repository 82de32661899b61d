"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AssertionResult:
    """Result of evaluating a single assertion.

    Attributes:
        name: Human-readable label (e.g. "Work budget is 70% of total").
        passed: Whether the assertion held.
        message: Detail about the result, shown in logs and reports.
        expected: What the check wanted, rendered on failure.
        actual: What the check observed, rendered on failure.
        informational: The check never fails; a mismatch is reported
            in the message but still counts as a pass.
    """

    name: str
    passed: bool
    message: str = ""
    expected: Any = None
    actual: Any = None
    informational: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "expected": None if self.expected is None else str(self.expected),
            "actual": None if self.actual is None else str(self.actual),
            "informational": self.informational,
        }
