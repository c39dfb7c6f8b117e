"""Gate data models.

Findings flow through three stages:
- Rule checks and review models produce bare findings
- The multi-model reviewer adds `flagged_by` (which models agreed)
- The push gate adds `source` (static or llm) when merging phases

All models are frozen. A GateResult is built once per run and only read afterwards.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from tlc.providers.base import TokenUsage


class Severity(StrEnum):
    """Finding severity.

    BLOCK fails the gate, WARN is reported but non-blocking, INFO is informational.
    """

    BLOCK = "block"
    WARN = "warn"
    INFO = "info"

    @property
    def priority(self) -> int:
        """Ordinal used for conflict resolution: block(3) > warn(2) > info(1)."""
        return _SEVERITY_PRIORITY[self]


_SEVERITY_PRIORITY: dict[Severity, int] = {
    Severity.BLOCK: 3,
    Severity.WARN: 2,
    Severity.INFO: 1,
}


class FindingSource(StrEnum):
    """Which gate phase produced a finding."""

    STATIC = "static"
    LLM = "llm"


class Finding(BaseModel):
    """A single detected issue."""

    severity: Severity
    rule: str = Field(description="Stable rule identifier, e.g. 'no-hardcoded-secrets'")
    file: str = Field(description="File path relative to the project root")
    line: int | None = Field(
        default=None, description="1-based line number; None for file-level findings"
    )
    message: str = Field(description="Human-readable description of the issue")
    fix: str | None = Field(default=None, description="Remediation hint")
    flagged_by: list[str] = Field(
        default_factory=list,
        description="Models that independently raised this finding, first-seen order",
    )
    source: FindingSource | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def identity(self) -> tuple[str, int | None, str]:
        """Deduplication key. A missing line stays None and never matches line 1."""
        return (self.file, self.line, self.rule)


class FileChange(BaseModel):
    """A changed file handed to the gate."""

    path: str
    content: str

    model_config = ConfigDict(frozen=True)


class GateSummary(BaseModel):
    """Finding counts per severity."""

    total: int = 0
    block: int = 0
    warn: int = 0
    info: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> "GateSummary":
        """Count findings by severity."""
        counts = {severity: 0 for severity in Severity}
        for finding in findings:
            counts[finding.severity] += 1
        return cls(
            total=len(findings),
            block=counts[Severity.BLOCK],
            warn=counts[Severity.WARN],
            info=counts[Severity.INFO],
        )


class StaticResult(BaseModel):
    """Outcome of the static rule phase."""

    passed: bool
    findings: list[Finding]
    summary: GateSummary
    files_checked: int = 0
    duration_ms: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def score(self) -> int:
        """Quality score 0-100 derived from the findings."""
        from tlc.gate.engine import calculate_score

        return calculate_score(self.findings)


class ModelReview(BaseModel):
    """What a single review model returns for a diff.

    Also used as the structured output type for LLM agents.
    """

    findings: list[Finding] = Field(
        default_factory=list,
        description="Confirmed issues in the diff. Zero findings is a valid outcome.",
    )
    summary: str | None = Field(default=None, description="One-paragraph synopsis of the diff")


class ModelReviewResult(BaseModel):
    """A review attributed to the model that produced it."""

    model: str
    findings: list[Finding]
    summary: str | None = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
    duration_ms: int = 0

    model_config = ConfigDict(frozen=True)


class MultiModelResult(BaseModel):
    """Aggregated output of all review models that succeeded."""

    findings: list[Finding]
    summary: str
    model_count: int
    models: list[str] = Field(default_factory=list)
    failed_models: list[str] = Field(default_factory=list)
    usage: TokenUsage = Field(default_factory=lambda: TokenUsage(requests=0))

    model_config = ConfigDict(frozen=True)

    @property
    def queried_count(self) -> int:
        """Models asked to review, whether they answered or not."""
        return len(self.models) + len(self.failed_models)


class GateResult(BaseModel):
    """Final verdict of one push gate run."""

    passed: bool
    overridden: bool = False
    llm_skipped: bool
    static_result: StaticResult
    llm_result: MultiModelResult | None = None
    findings: list[Finding]
    summary: GateSummary
    duration_ms: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def blocking_findings(self) -> list[Finding]:
        """Findings with block severity."""
        return [f for f in self.findings if f.severity == Severity.BLOCK]
