"""Gate reporter — renders a GateResult as terminal text.

Pure formatting. Decisions are already made by the time a result gets here.
"""

from tlc.gate.engine import group_findings_by_file
from tlc.gate.models import Finding, GateResult, Severity
from tlc.gate.reviewer import calculate_consensus

BADGES: dict[Severity, str] = {
    Severity.BLOCK: "[BLOCK]",
    Severity.WARN: "[WARN]",
    Severity.INFO: "[INFO]",
}

BYPASS_HINT = "To bypass (not recommended): git push --no-verify"


def format_finding(finding: Finding, total_models: int = 0) -> list[str]:
    """Render one finding as indented lines."""
    location = f"L{finding.line}" if finding.line is not None else "file"
    lines = [f"  {BADGES[finding.severity]} {location} {finding.rule}: {finding.message}"]
    if finding.fix:
        lines.append(f"      fix: {finding.fix}")
    if finding.flagged_by:
        consensus = calculate_consensus(finding, total_models)
        lines.append(f"      flagged by: {', '.join(finding.flagged_by)} ({consensus:.0f}%)")
    return lines


def format_summary_line(result: GateResult) -> str:
    """One-line verdict."""
    if result.passed:
        return f"{result.static_result.files_checked} files passed"
    return f"{result.summary.block} blocking, {result.summary.warn} warnings — blocked"


def format_gate_report(result: GateResult) -> str:
    """Render a gate result grouped by file with severity badges.

    Args:
        result: Gate result to render

    Returns:
        Multi-line report text (no trailing newline)
    """
    lines: list[str] = []
    status = "PASSED" if result.passed else "BLOCKED"
    lines.append(f"Push gate: {status}")

    total_models = result.llm_result.queried_count if result.llm_result else 0

    grouped = group_findings_by_file(result.findings)
    for file, findings in grouped.items():
        lines.append("")
        lines.append(file)
        for finding in findings:
            lines.extend(format_finding(finding, total_models))

    lines.append("")
    lines.append(
        f"{result.summary.total} findings: {result.summary.block} block, "
        f"{result.summary.warn} warn, {result.summary.info} info"
    )

    if result.overridden:
        lines.append("Static gate failed but was overridden (TLC_GATE_OVERRIDE)")
    if result.llm_result is not None and result.llm_result.summary:
        lines.append("")
        lines.append("LLM review:")
        lines.extend(f"  {line}" for line in result.llm_result.summary.splitlines())
        usage = result.llm_result.usage
        lines.append(f"  ({usage.total_tokens} tokens over {usage.requests} requests)")
    elif result.llm_skipped and result.static_result.passed:
        lines.append("LLM review skipped; static checks only")

    lines.append(format_summary_line(result))
    if not result.passed:
        lines.append(BYPASS_HINT)

    return "\n".join(lines)
