"""Generate JSON Schema and docs for the budgetcheck YAML format."""

from __future__ import annotations

import json
from pathlib import Path

from budgetcheck.config import SuiteConfig

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def generate_json_schema() -> dict:
    """JSON Schema for the config file, usable by YAML language servers."""
    schema = SuiteConfig.model_json_schema()
    schema["$schema"] = JSON_SCHEMA_DRAFT
    schema["title"] = "budgetcheck config"
    return schema


def write_json_schema(path: Path) -> None:
    _ensure_parent(path)
    path.write_text(json.dumps(generate_json_schema(), indent=2, sort_keys=True) + "\n")


def _describe_fields(props: dict) -> list[str]:
    lines = []
    for key, prop in props.items():
        default = prop.get("default")
        suffix = f" (default: `{json.dumps(default)}`)" if "default" in prop else ""
        lines.append(f"- `{key}`{suffix}")
    return lines


def generate_schema_doc() -> str:
    schema = generate_json_schema()
    defs = schema.get("$defs", {})

    sections = [
        ("cost_model", "CostModelConfig"),
        ("budget", "BudgetConfig"),
        ("command", "CommandConfig"),
        ("template", "TemplateConfig"),
    ]

    lines: list[str] = []
    lines.append("# budgetcheck YAML Schema")
    lines.append("")
    lines.append("This doc is generated from the Pydantic models.")
    lines.append("")
    lines.append("## Top-level keys")
    lines.append("- `suites`: list of suites to run (`cost`, `template`).")
    lines.append("- `base_dir`: directory relative paths resolve against.")
    for key, _ in sections:
        lines.append(f"- `{key}`: see below.")
    for key, model_name in sections:
        lines.append("")
        lines.append(f"## `{key}`")
        lines.extend(_describe_fields(defs.get(model_name, {}).get("properties", {})))

    lines.append("")
    return "\n".join(lines)


def write_schema_doc(path: Path) -> None:
    _ensure_parent(path)
    path.write_text(generate_schema_doc())
