from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SuiteName(str, Enum):
    COST = "cost"
    TEMPLATE = "template"


class PatternSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    pattern: str
    required: bool = True


class ModelPricing(BaseModel):
    """Price per million tokens, in USD."""

    model_config = ConfigDict(extra="forbid")
    input: float = Field(ge=0)
    output: float = Field(ge=0)


class ReferencePrices(BaseModel):
    model_config = ConfigDict(extra="forbid")
    cheap: float = 0.14
    mid: float = 3.00
    expensive: float = 15.00
    input: float = 3.00
    output: float = 15.00


def _default_patterns() -> list[PatternSpec]:
    return [
        PatternSpec(
            name="DeepSeek cost model is defined",
            pattern=r"0\.14|0\.00014|deepseek",
        ),
        PatternSpec(
            name="Claude cost model is defined",
            pattern=r"3\.[0-9]+|15\.[0-9]+|sonnet|claude",
        ),
        PatternSpec(
            name="Cost model uses per-million-tokens format",
            pattern=r"per.*million|/M|1000000|1_000_000|MODEL.*COST",
            required=False,
        ),
    ]


class CostModelConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    source: str = "lib/budget-firewall.sh"
    epsilon: float = Field(default=0.01, gt=0)
    patterns: list[PatternSpec] = Field(default_factory=_default_patterns)
    reference: ReferencePrices = Field(default_factory=ReferencePrices)
    models: dict[str, ModelPricing] = {}


class BudgetConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    monthly_usd: float = 65.00
    work_usd: float = 45.50
    personal_usd: float = 19.50
    work_share: float = 70.0
    personal_share: float = 30.0
    share_epsilon: float = 0.1
    aud_rate: float = 1.54
    expected_aud: float = 100.10
    currency_epsilon: float = 1.0
    small_remaining_usd: float = 0.001

    @model_validator(mode="after")
    def shares_must_sum_to_100(self) -> BudgetConfig:
        if abs(self.work_share + self.personal_share - 100.0) > 1e-9:
            raise ValueError(
                f"work_share + personal_share must be 100, got "
                f"{self.work_share} + {self.personal_share}"
            )
        return self


class CommandConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    argv: list[str] = ["lib/budget-firewall.sh"]
    help_args: list[str] = ["--help"]
    status_args: list[str] = ["status"]
    help_ceiling_ms: float = Field(default=1000, gt=0)
    status_ceiling_ms: float = Field(default=5000, gt=0)
    repeat: int = Field(default=5, ge=1)
    timeout_seconds: float | None = None

    @field_validator("argv")
    @classmethod
    def argv_must_not_be_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("command argv must not be empty")
        return v


DEFAULT_MARKERS = [
    "CACHE INVALIDATION AWARENESS",
    "TURN PROTECTION",
    "ERROR RETENTION",
    "DEDUPLICATION",
    "SUPERSEDE WRITES",
    "NUDGE FREQUENCY",
    "COST IMPLICATIONS",
    "re-read storms",
    "RECOMMENDED SETTINGS BY USE CASE",
    "Large codebase",
    "Quick bug fixes",
]


class TemplateConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    path: str = "templates/dcp.jsonc.tmpl"
    markers: list[str] = Field(default_factory=lambda: list(DEFAULT_MARKERS))
    required_keys: list[str] = ["enabled", "turnProtection", "strategies", "tools"]
    structure_keys: list[str] = ["enabled", "turnProtection", "strategies"]
    placeholder_value: str = "1"


class SuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    suites: list[SuiteName] = [SuiteName.COST, SuiteName.TEMPLATE]
    cost_model: CostModelConfig = Field(default_factory=CostModelConfig)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    command: CommandConfig = Field(default_factory=CommandConfig)
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    base_dir: str = "."

    @field_validator("suites")
    @classmethod
    def suites_must_not_be_empty(cls, v: list[SuiteName]) -> list[SuiteName]:
        if not v:
            raise ValueError("suites must not be empty")
        return v

    def resolve(self, path: str) -> Path:
        """Resolve a configured path against ``base_dir``."""
        p = Path(path)
        if p.is_absolute():
            return p
        return (Path(self.base_dir) / p).resolve()


def _expand_all(config: SuiteConfig) -> None:
    """Expand ${VAR} references in paths and argv.

    Raises ValueError listing every missing variable so the user can fix them
    all at once rather than hitting them one-by-one mid-run.
    """
    missing: list[str] = []

    def _expand(label: str, value: str) -> str:
        try:
            return expandvars(value, nounset=True)
        except Exception:
            missing.append(f"  {label}={value}")
            return value

    config.cost_model.source = _expand("cost_model.source", config.cost_model.source)
    config.template.path = _expand("template.path", config.template.path)
    config.command.argv = [
        _expand(f"command.argv[{i}]", arg) for i, arg in enumerate(config.command.argv)
    ]

    if missing:
        details = "\n".join(missing)
        raise ValueError(f"Missing environment variables in config:\n{details}")


def _resolve_command(config: SuiteConfig) -> None:
    # Only the executable is path-like; a bare name is looked up on PATH.
    exe, *args = config.command.argv
    if "/" in exe and not Path(exe).is_absolute():
        config.command.argv = [str(config.resolve(exe)), *args]


def load_config(path: Path | None = None) -> SuiteConfig:
    """Load and validate a suite config from a YAML file.

    With no path, returns the defaults rooted at the current directory.
    """
    if path is None:
        config = SuiteConfig(base_dir=str(Path.cwd()))
    else:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"config must be a mapping, got {type(raw).__name__}")
        # Relative paths resolve against the config file location
        base_dir = Path(raw.get("base_dir", "."))
        if not base_dir.is_absolute():
            base_dir = path.parent.resolve() / base_dir
        raw["base_dir"] = str(base_dir.resolve())
        config = SuiteConfig(**raw)

    _expand_all(config)
    _resolve_command(config)
    return config
