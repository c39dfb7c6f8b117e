"""TLC gate — static rules plus multi-model LLM review before push.

Public API:
    Models: Finding, Severity, FindingSource, FileChange, GateSummary, StaticResult,
            ModelReview, ModelReviewResult, MultiModelResult, GateResult
    Config: GateConfig, Strictness, load_gate_config, merge_gate_config,
            resolve_rule_severity, should_ignore_file
    Static: Rule, StaticGateEngine, run_static_gate, calculate_score, group_findings_by_file
    LLM: review_with_models, aggregate_findings, calculate_consensus, merge_summaries
    Gate: PushGate, run_push_gate, format_gate_report
"""

from tlc.gate.config import (
    GateConfig,
    Strictness,
    load_gate_config,
    merge_gate_config,
    resolve_rule_severity,
    should_ignore_file,
)
from tlc.gate.engine import (
    Rule,
    StaticGateEngine,
    calculate_score,
    group_findings_by_file,
    run_static_gate,
)
from tlc.gate.models import (
    FileChange,
    Finding,
    FindingSource,
    GateResult,
    GateSummary,
    ModelReview,
    ModelReviewResult,
    MultiModelResult,
    Severity,
    StaticResult,
)
from tlc.gate.push_gate import PushGate, run_push_gate
from tlc.gate.reporter import format_gate_report
from tlc.gate.reviewer import (
    aggregate_findings,
    calculate_consensus,
    merge_summaries,
    review_with_models,
)

__all__ = [
    "FileChange",
    "Finding",
    "FindingSource",
    "GateConfig",
    "GateResult",
    "GateSummary",
    "ModelReview",
    "ModelReviewResult",
    "MultiModelResult",
    "PushGate",
    "Rule",
    "Severity",
    "StaticGateEngine",
    "StaticResult",
    "Strictness",
    "aggregate_findings",
    "calculate_consensus",
    "calculate_score",
    "format_gate_report",
    "group_findings_by_file",
    "load_gate_config",
    "merge_gate_config",
    "merge_summaries",
    "resolve_rule_severity",
    "review_with_models",
    "run_push_gate",
    "run_static_gate",
    "should_ignore_file",
]
