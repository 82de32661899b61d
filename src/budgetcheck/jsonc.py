"""JSON-with-comments helpers for configuration templates."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

_PLACEHOLDER_RE = re.compile(r"\{\{[^}]*\}\}")

# Strings are matched first so that "//" inside a string value survives.
_TOKEN_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)


class StructureValidity(str, Enum):
    VALID = "valid"
    VALID_BY_HEURISTIC = "valid-by-heuristic"
    INVALID = "invalid"

    @property
    def ok(self) -> bool:
        return self is not StructureValidity.INVALID


def extract_json_block(text: str) -> str | None:
    """Return the lines from the first line starting with ``{`` through the
    first later line that is exactly ``}``. None if either end is missing."""
    lines = text.splitlines()
    start = next((i for i, line in enumerate(lines) if line.startswith("{")), None)
    if start is None:
        return None
    end = next(
        (i for i in range(start + 1, len(lines)) if lines[i].rstrip() == "}"),
        None,
    )
    if end is None:
        return None
    return "\n".join(lines[start : end + 1])


def substitute_placeholders(text: str, value: str = "1") -> str:
    """Replace every ``{{...}}`` placeholder with ``value``."""
    return _PLACEHOLDER_RE.sub(value, text)


def strip_comments(text: str) -> str:
    """Remove ``//`` line comments and ``/* */`` block comments outside strings."""

    def _replace(m: re.Match) -> str:
        token = m.group(0)
        if token.startswith('"'):
            return token
        if token.startswith("/*"):
            return " "
        return ""

    return _TOKEN_RE.sub(_replace, text)


def parse_jsonc(text: str) -> Any:
    """Parse JSONC text. Raises ``json.JSONDecodeError`` on malformed input."""
    return json.loads(strip_comments(text))


def has_quoted_key(text: str, key: str) -> bool:
    return f'"{key}"' in text


def validate_structure(
    text: str, heuristic_keys: list[str], placeholder_value: str = "1"
) -> tuple[StructureValidity, str]:
    """Validate the JSON block of a template.

    Tries a real parse of the extracted block first. If that fails, falls back to
    checking that ``heuristic_keys`` appear as quoted keys anywhere in ``text``,
    which is a much weaker guarantee than a parse. Returns the validity level and
    a reason.
    """
    block = extract_json_block(text)
    if block is None:
        reason = "no top-level JSON block found"
    else:
        try:
            parse_jsonc(substitute_placeholders(block, placeholder_value))
            return StructureValidity.VALID, "JSON block parses after comment removal"
        except json.JSONDecodeError as e:
            reason = f"JSON block does not parse: {e.msg} (line {e.lineno}, column {e.colno})"

    missing = [k for k in heuristic_keys if not has_quoted_key(text, k)]
    if not missing:
        return (
            StructureValidity.VALID_BY_HEURISTIC,
            f"{reason}; structure verified by keys {', '.join(heuristic_keys)}",
        )
    return StructureValidity.INVALID, f"{reason}; missing keys {', '.join(missing)}"
