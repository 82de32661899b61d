from budgetcheck.checks.base import BaseChecker, Check
from budgetcheck.checks.cost_model import CostModelChecker
from budgetcheck.checks.template import TemplateChecker

_CHECKERS: dict[str, type[BaseChecker]] = {
    "cost": CostModelChecker,
    "template": TemplateChecker,
}


def get_checker(suite_name: str) -> BaseChecker:
    cls = _CHECKERS.get(suite_name)
    if cls is None:
        raise ValueError(
            f"Unknown suite: {suite_name!r}. "
            f"Available: {', '.join(sorted(_CHECKERS))}"
        )
    return cls()


__all__ = [
    "BaseChecker",
    "Check",
    "CostModelChecker",
    "TemplateChecker",
    "get_checker",
]
