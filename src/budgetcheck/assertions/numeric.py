"""Numeric comparison assertions (tolerance equality, ordering)."""

from __future__ import annotations

import logging

from budgetcheck.assertions.base import AssertionResult

DEFAULT_EPSILON = 0.01


def approx_equal(actual: float, expected: float, epsilon: float = DEFAULT_EPSILON) -> bool:
    """True when ``|actual - expected| <= epsilon``."""
    return abs(actual - expected) <= epsilon


def check_approx_equal(
    name: str,
    actual: float,
    expected: float,
    logger: logging.Logger,
    epsilon: float = DEFAULT_EPSILON,
    informational: bool = False,
) -> AssertionResult:
    """Compare two numbers within an absolute epsilon.

    With ``informational=True`` a mismatch is still reported as a pass, and the
    message says the value was off.
    """
    matched = approx_equal(actual, expected, epsilon)
    logger.info(f"Checking {name}: actual={actual} expected={expected} epsilon={epsilon} matched={matched}")

    if matched:
        message = f"{actual} is within {epsilon} of {expected}"
    else:
        message = f"{actual} differs from {expected} by more than {epsilon}"
        if informational:
            message += " (informational, not counted as a failure)"

    return AssertionResult(
        name=name,
        passed=matched or informational,
        message=message,
        expected=f"{expected} ± {epsilon}",
        actual=actual,
        informational=informational,
    )


def check_exact(
    name: str, actual: float, expected: float, logger: logging.Logger
) -> AssertionResult:
    """Compare two numbers for exact equality."""
    matched = actual == expected
    logger.info(f"Checking {name}: actual={actual} expected={expected} matched={matched}")
    return AssertionResult(
        name=name,
        passed=matched,
        message=f"{actual} == {expected}" if matched else f"{actual} != {expected}",
        expected=expected,
        actual=actual,
    )


def check_less_than(
    name: str,
    lower: float,
    upper: float,
    logger: logging.Logger,
    lower_label: str = "lower",
    upper_label: str = "upper",
) -> AssertionResult:
    """Check that ``lower < upper`` strictly."""
    ordered = lower < upper
    logger.info(f"Checking {name}: {lower_label}={lower} {upper_label}={upper} ordered={ordered}")
    return AssertionResult(
        name=name,
        passed=ordered,
        message=f"{lower_label} ({lower}) < {upper_label} ({upper})"
        if ordered
        else f"{lower_label} ({lower}) is not below {upper_label} ({upper})",
        expected=f"{lower_label} < {upper_label}",
        actual=f"{lower} vs {upper}",
    )
