"""Static gate engine — runs rule checks over changed files."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from tlc.gate.config import GateConfig, resolve_rule_severity, should_ignore_file
from tlc.gate.models import FileChange, Finding, GateSummary, Severity, StaticResult

logger = logging.getLogger(__name__)

# Pure, synchronous check: (file_path, content) -> findings
RuleCheck = Callable[[str, str], list[Finding]]

SCORE_PENALTY: dict[Severity, int] = {
    Severity.BLOCK: 20,
    Severity.WARN: 5,
    Severity.INFO: 1,
}


@dataclass(frozen=True)
class Rule:
    """A registered rule check with its built-in severity."""

    id: str
    check: RuleCheck
    severity: Severity = Severity.WARN
    description: str = ""


class StaticGateEngine:
    """Runs enabled rules against changed files and produces a pass/fail verdict."""

    def __init__(self, config: GateConfig, rules: list[Rule] | None = None) -> None:
        """Initialize engine.

        Args:
            config: Resolved gate configuration
            rules: Rule checks in registration order (none if omitted)
        """
        self.config = config
        self.rules = list(rules or [])

    def enabled_rules(self) -> list[Rule]:
        """Rules not disabled by the config, in registration order."""
        return [
            rule
            for rule in self.rules
            if resolve_rule_severity(rule.id, rule.severity, self.config) is not False
        ]

    def run(self, files: list[FileChange]) -> StaticResult:
        """Check every non-ignored file with every enabled rule.

        Findings keep file order, then rule order, then each rule's own order.
        Each finding's severity is rewritten to the config-resolved level.

        Args:
            files: Changed files with their content

        Returns:
            StaticResult; passed iff no block findings remain

        Raises:
            Exception: Whatever a rule check raises (broken rules fail loudly)
        """
        start_time = time.time()
        rules = self.enabled_rules()
        findings: list[Finding] = []
        files_checked = 0

        for change in files:
            if should_ignore_file(change.path, self.config):
                logger.debug("Ignoring %s", change.path)
                continue
            files_checked += 1

            for rule in rules:
                try:
                    raw = rule.check(change.path, change.content)
                except Exception:
                    logger.error("Rule %s raised on %s", rule.id, change.path)
                    raise
                findings.extend(self._resolve(raw, change.path))

        summary = GateSummary.from_findings(findings)
        duration_ms = int((time.time() - start_time) * 1000)

        return StaticResult(
            passed=summary.block == 0,
            findings=findings,
            summary=summary,
            files_checked=files_checked,
            duration_ms=duration_ms,
        )

    def _resolve(self, raw: list[Finding], path: str) -> list[Finding]:
        """Attach the file path and apply severity overrides; drop disabled rules."""
        resolved: list[Finding] = []
        for finding in raw:
            severity = resolve_rule_severity(finding.rule, finding.severity, self.config)
            if severity is False:
                continue
            resolved.append(finding.model_copy(update={"file": path, "severity": severity}))
        return resolved


def run_static_gate(
    files: list[FileChange],
    config: GateConfig,
    rules: list[Rule],
) -> StaticResult:
    """Helper function to run the static gate.

    Args:
        files: Changed files
        config: Resolved gate configuration
        rules: Rule checks to run

    Returns:
        StaticResult from the engine
    """
    return StaticGateEngine(config=config, rules=rules).run(files)


def calculate_score(findings: list[Finding]) -> int:
    """Score 0-100: block costs 20, warn 5, info 1, floored at zero."""
    penalty = sum(SCORE_PENALTY[f.severity] for f in findings)
    return max(0, 100 - penalty)


def group_findings_by_file(findings: list[Finding]) -> dict[str, list[Finding]]:
    """Group findings by file, preserving first-seen file order."""
    grouped: dict[str, list[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.file, []).append(finding)
    return grouped
