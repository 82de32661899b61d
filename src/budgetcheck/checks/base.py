from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from budgetcheck.assertions.base import AssertionResult
from budgetcheck.config import SuiteConfig

Check = Callable[[SuiteConfig, logging.Logger], list[AssertionResult]]


class BaseChecker(ABC):
    """A fixed battery of independent checks.

    Every check runs even if an earlier one failed or raised.
    """

    @abstractmethod
    def suite_name(self) -> str:
        """Identifier used for suite selection and report grouping."""
        ...

    @abstractmethod
    def title(self) -> str:
        """Heading printed before the suite's results."""
        ...

    @abstractmethod
    def checks(self) -> list[Check]:
        """The checks to run, in order."""
        ...

    def run(self, config: SuiteConfig, logger: logging.Logger) -> list[AssertionResult]:
        results: list[AssertionResult] = []
        for check in self.checks():
            check_name = getattr(check, "__name__", repr(check))
            logger.debug(f"Running {self.suite_name()} check '{check_name}'")
            try:
                results.extend(check(config, logger))
            except Exception as e:
                logger.error(f"Check '{check_name}' raised {type(e).__name__}: {e}")
                results.append(
                    AssertionResult(
                        name=check_name,
                        passed=False,
                        message=f"check raised {type(e).__name__}: {e}",
                        expected="check completes",
                        actual=f"{type(e).__name__}: {e}",
                    )
                )
        return results
