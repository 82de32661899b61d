"""Assertion primitives shared by the checkers."""

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.assertions.numeric import approx_equal, check_approx_equal

__all__ = ["AssertionResult", "approx_equal", "check_approx_equal"]
