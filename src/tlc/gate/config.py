"""Gate configuration — defaults, project overrides, and rule resolution.

The project config lives in `.tlc.json` at the project root under a `gate` key:

    {"gate": {"strictness": "standard", "rules": {"no-console-log": false},
              "ignore": ["vendor/*"], "models": ["anthropic:claude-sonnet-4-5"]}}

Loading never raises. A missing or broken file yields the defaults.
"""

import json
import logging
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from tlc.gate.models import Severity

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".tlc.json"

DEFAULT_LLM_TIMEOUT_MS = 60_000

DEFAULT_IGNORE: tuple[str, ...] = (
    "*.md",
    "*.lock",
    "*.min.js",
    "*.map",
    "**/*.snap",
    "package-lock.json",
    "node_modules/*",
    "dist/*",
    "build/*",
    "coverage/*",
)

# Severity override, or False to disable the rule
RuleSetting = Severity | Literal[False]


class Strictness(StrEnum):
    """How strict the team wants the gate to be."""

    RELAXED = "relaxed"
    STANDARD = "standard"
    STRICT = "strict"


class GateConfig(BaseModel):
    """Resolved gate configuration for one invocation.

    JSON keys are camelCase (`preCommit`, `llmTimeout`); Python attributes are snake_case.
    """

    enabled: bool = True
    strictness: Strictness = Strictness.STRICT
    pre_commit: bool = Field(default=True, alias="preCommit")
    pre_push: bool = Field(default=True, alias="prePush")
    rules: dict[str, RuleSetting] = Field(default_factory=dict)
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    models: list[str] = Field(
        default_factory=list, description="LLM backends for review; empty skips the LLM phase"
    )
    llm_timeout: int = Field(
        default=DEFAULT_LLM_TIMEOUT_MS, alias="llmTimeout", description="LLM phase timeout (ms)"
    )
    per_model_timeout: int | None = Field(
        default=None, alias="modelTimeout", description="Per-model timeout (ms); None waits"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


_SCALAR_FIELDS: tuple[str, ...] = (
    "enabled",
    "strictness",
    "pre_commit",
    "pre_push",
    "models",
    "llm_timeout",
    "per_model_timeout",
)


def _lookup(overrides: Mapping[str, Any], field_name: str) -> tuple[bool, Any]:
    """Find an override by its JSON alias or its Python name."""
    alias = GateConfig.model_fields[field_name].alias
    for key in (alias, field_name):
        if key is not None and key in overrides:
            return True, overrides[key]
    return False, None


def _dedupe(patterns: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for pattern in patterns:
        if pattern not in seen:
            seen.add(pattern)
            result.append(pattern)
    return result


def merge_gate_config(defaults: GateConfig, overrides: Mapping[str, Any]) -> GateConfig:
    """Reconcile user overrides onto defaults, field by field.

    - Scalars (and the `models` list) overwrite when present
    - `rules` is a shallow merge, user keys win
    - `ignore` is defaults + user patterns with duplicates removed

    Args:
        defaults: Base configuration
        overrides: Raw `gate` object from the project config

    Returns:
        New GateConfig

    Raises:
        ValueError: If `rules`/`ignore` have the wrong shape or values fail validation
    """
    data: dict[str, Any] = {
        "rules": dict(defaults.rules),
        "ignore": list(defaults.ignore),
    }
    for name in _SCALAR_FIELDS:
        present, value = _lookup(overrides, name)
        data[name] = value if present else getattr(defaults, name)

    user_rules = overrides.get("rules", {})
    if not isinstance(user_rules, Mapping):
        raise ValueError("'rules' must be an object mapping rule ids to severities")
    data["rules"].update(user_rules)

    user_ignore = overrides.get("ignore", [])
    if not isinstance(user_ignore, list):
        raise ValueError("'ignore' must be a list of patterns")
    if not all(isinstance(pattern, str) for pattern in user_ignore):
        raise ValueError("'ignore' patterns must be strings")
    data["ignore"] = _dedupe([*data["ignore"], *user_ignore])

    return GateConfig.model_validate(data)


def load_gate_config(project_root: Path) -> GateConfig:
    """Load the gate config for a project, falling back to defaults.

    Args:
        project_root: Directory containing `.tlc.json`

    Returns:
        Merged GateConfig (defaults if the file is absent or unusable)
    """
    defaults = GateConfig()
    path = project_root / CONFIG_FILENAME

    if not path.is_file():
        logger.debug("No %s in %s, using default gate config", CONFIG_FILENAME, project_root)
        return defaults

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return defaults

    gate = raw.get("gate") if isinstance(raw, dict) else None
    if gate is None:
        return defaults
    if not isinstance(gate, dict):
        logger.warning("Ignoring 'gate' in %s: expected an object", path)
        return defaults

    try:
        return merge_gate_config(defaults, gate)
    except ValueError as e:
        logger.warning("Ignoring invalid gate config in %s: %s", path, e)
        return defaults


def resolve_rule_severity(
    rule_id: str, built_in: Severity, config: GateConfig
) -> Severity | Literal[False]:
    """Effective severity of a rule: the config override if any, else the built-in level.

    Returns False when the config disables the rule.
    """
    if rule_id in config.rules:
        return config.rules[rule_id]
    return built_in


def should_ignore_file(path: str, config: GateConfig) -> bool:
    """Check a path against the config's ignore patterns.

    Pattern grammar:
    - `**/*.ext` matches the basename (or the path) by suffix
    - `**/name` without a wildcard tail is an exact path match like any other pattern
    - `*.ext` matches the path by suffix
    - `dir/*` matches any path under `dir/`
    - anything else is an exact path match
    """
    normalized = path.replace("\\", "/").removeprefix("./")
    basename = normalized.rsplit("/", 1)[-1]

    for pattern in config.ignore:
        if pattern.startswith("**/*"):
            suffix = pattern[4:]
            if basename.endswith(suffix) or normalized.endswith(suffix):
                return True
        elif pattern.startswith("*") and not pattern.startswith("**/"):
            if normalized.endswith(pattern[1:]):
                return True
        elif pattern.endswith("/*"):
            if normalized.startswith(pattern[:-1]):
                return True
        elif normalized == pattern:
            return True
    return False
