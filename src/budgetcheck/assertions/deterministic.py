"""Deterministic assertion checks (file existence, content, command latency)."""

from __future__ import annotations

import logging
import re
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from budgetcheck.assertions.base import AssertionResult


def _quoted_key(key: str) -> str:
    return f'"{key}"'


def check_file_exists(path: str | Path, logger: logging.Logger, name: str | None = None) -> AssertionResult:
    """Check that a file exists."""
    path = Path(path)
    logger.info(f"Checking file_exists: {path}")

    passed = path.is_file()
    logger.info(f"File {path} exists={passed}")

    return AssertionResult(
        name=name or f"file_exists:{path.name}",
        passed=passed,
        message=f"{path} exists" if passed else f"{path} does not exist",
        expected="file present",
        actual="present" if passed else "missing",
    )


def check_text_contains(
    text: str | None,
    needle: str,
    logger: logging.Logger,
    name: str,
    source: str = "file",
) -> AssertionResult:
    """Check that ``text`` contains the literal ``needle``.

    ``text=None`` means the source could not be read; that counts as a miss.
    """
    if text is None:
        logger.warning(f"{source} not found, cannot look for '{needle}'")
        return AssertionResult(
            name=name,
            passed=False,
            message=f"{source} not found",
            expected=f"'{needle}' present",
            actual=f"{source} not found",
        )

    found = needle in text
    logger.info(f"Literal '{needle}' found={found} in {source}")
    return AssertionResult(
        name=name,
        passed=found,
        message=f"{source} contains '{needle}'" if found else f"{source} does not contain '{needle}'",
        expected=f"'{needle}' present",
        actual="present" if found else "not found",
    )


def check_text_matches(
    text: str | None,
    pattern: str,
    logger: logging.Logger,
    name: str,
    source: str = "file",
    required: bool = True,
) -> AssertionResult:
    """Check that ``text`` matches a regex pattern.

    When ``required`` is False a miss is reported but still passes.
    """
    if text is None:
        logger.warning(f"{source} not found, cannot match '{pattern}'")
        return AssertionResult(
            name=name,
            passed=not required,
            message=f"{source} not found",
            expected=f"match for /{pattern}/",
            actual=f"{source} not found",
            informational=not required,
        )

    matched = re.search(pattern, text) is not None
    logger.info(f"Pattern '{pattern}' matched={matched} in {source}")

    if matched:
        message = f"{source} matches pattern '{pattern}'"
    elif required:
        message = f"{source} does not match pattern '{pattern}'"
    else:
        message = f"{source} does not match pattern '{pattern}' (format may vary)"

    return AssertionResult(
        name=name,
        passed=matched or not required,
        message=message,
        expected=f"match for /{pattern}/",
        actual="matched" if matched else "not found",
        informational=not required,
    )


def check_quoted_keys(
    text: str | None, keys: list[str], logger: logging.Logger, name: str, source: str = "file"
) -> AssertionResult:
    """Check that every key occurs as a quoted JSON key, stopping at the first miss."""
    if text is None:
        logger.warning(f"{source} not found, cannot look for keys")
        return AssertionResult(
            name=name,
            passed=False,
            message=f"{source} not found",
            expected=", ".join(keys),
            actual=f"{source} not found",
        )

    for key in keys:
        if _quoted_key(key) not in text:
            logger.info(f"Required key '{key}' missing from {source}")
            return AssertionResult(
                name=name,
                passed=False,
                message=f"{source} is missing key '{key}'",
                expected=", ".join(keys),
                actual=f"missing '{key}'",
            )

    logger.info(f"All required keys present in {source}: {keys}")
    return AssertionResult(
        name=name,
        passed=True,
        message=f"{source} has keys {', '.join(keys)}",
        expected=", ".join(keys),
        actual="all present",
    )


@dataclass(frozen=True)
class Invocation:
    """Outcome of one timed command invocation."""

    elapsed_ms: float
    exit_code: int | None
    launched: bool
    timed_out: bool = False


def time_command(
    argv: list[str],
    logger: logging.Logger,
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> Invocation:
    """Run ``argv`` and measure wall-clock time.

    Output is discarded and the exit status is never judged; a command that
    fails to launch still yields an elapsed time.
    """
    logger.info(f"Timing command: {' '.join(argv)}")
    start = time.perf_counter()
    try:
        result = subprocess.run(
            argv,
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.warning(f"Command timed out after {timeout}s")
        return Invocation(elapsed_ms=elapsed_ms, exit_code=None, launched=True, timed_out=True)
    except OSError as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"Command failed to launch (ignored): {e}")
        return Invocation(elapsed_ms=elapsed_ms, exit_code=None, launched=False)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.debug(f"Command exited with code {result.returncode} (ignored) after {elapsed_ms:.0f}ms")
    return Invocation(elapsed_ms=elapsed_ms, exit_code=result.returncode, launched=True)


def check_command_latency(
    argv: list[str],
    ceiling_ms: float,
    logger: logging.Logger,
    name: str,
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> AssertionResult:
    """Check that a command returns in under ``ceiling_ms`` milliseconds.

    Only elapsed time is judged: a non-zero exit or a launch failure does not
    fail the check.
    """
    inv = time_command(argv, logger, cwd=cwd, timeout=timeout)
    passed = not inv.timed_out and inv.elapsed_ms < ceiling_ms

    if inv.timed_out:
        message = f"timed out after {timeout}s"
    else:
        message = f"{inv.elapsed_ms:.0f}ms (ceiling {ceiling_ms:.0f}ms)"
    if not inv.launched:
        message += ", command did not launch"

    return AssertionResult(
        name=f"{name} ({inv.elapsed_ms:.0f}ms)",
        passed=passed,
        message=message,
        expected=f"<{ceiling_ms:.0f}ms",
        actual=f"{inv.elapsed_ms:.0f}ms",
    )
