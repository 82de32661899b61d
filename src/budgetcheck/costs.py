"""Token pricing and budget arithmetic."""

from __future__ import annotations

TOKENS_PER_UNIT = 1_000_000


def token_cost(tokens: float, cost_per_million: float) -> float:
    """Cost of ``tokens`` at a per-million-token price.

    Negative token counts yield negative costs; rejecting them is up to the
    caller.
    """
    return tokens / TOKENS_PER_UNIT * cost_per_million


def share_percent(part: float, total: float) -> float:
    """``part`` as a percentage of ``total``."""
    if total == 0:
        raise ValueError("total must be non-zero")
    return part / total * 100


def split_budget(total: float, share: float) -> float:
    """Amount of ``total`` allocated to a ``share`` given in percent."""
    return total * share / 100


def convert_currency(amount: float, rate: float) -> float:
    return amount * rate
