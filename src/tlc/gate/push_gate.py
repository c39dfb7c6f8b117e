"""PushGate — sequences the static phase and the LLM phase into one verdict.

Static phase first. If it fails:
- with override: pass, marked overridden, static findings reported unchanged
- without override: fail, LLM phase never invoked

If it passes, the LLM phase runs under a timeout. Any LLM error or timeout, or a
review where every model failed, is absorbed (llm_skipped=True); the gate never
blocks a push just because the LLM phase was unavailable. Static-phase errors
propagate.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from tlc.gate.config import DEFAULT_LLM_TIMEOUT_MS
from tlc.gate.models import (
    FileChange,
    Finding,
    FindingSource,
    GateResult,
    GateSummary,
    MultiModelResult,
    StaticResult,
)

logger = logging.getLogger(__name__)

StaticGateFn = Callable[[list[FileChange]], StaticResult]
LlmReviewFn = Callable[[list[FileChange]], Awaitable[MultiModelResult]]


class PushGate:
    """Runs the two-phase push gate."""

    def __init__(
        self,
        static_gate: StaticGateFn,
        llm_review: LlmReviewFn | None = None,
        llm_timeout_ms: int | None = DEFAULT_LLM_TIMEOUT_MS,
    ) -> None:
        """Initialize push gate.

        Args:
            static_gate: Synchronous static check over the changed files
            llm_review: Async LLM review (None skips the LLM phase)
            llm_timeout_ms: Timeout for the whole LLM phase (None waits indefinitely)
        """
        self.static_gate = static_gate
        self.llm_review = llm_review
        self.llm_timeout_ms = llm_timeout_ms

    async def run(self, files: list[FileChange], override: bool = False) -> GateResult:
        """Run the gate over the changed files.

        Args:
            files: Changed files
            override: Human-authorized bypass of a failing static phase

        Returns:
            GateResult with merged, source-tagged findings
        """
        start_time = time.time()

        static_result = self.static_gate(files)

        if not static_result.passed:
            if override:
                logger.info("Static gate failed; override applied")
            return GateResult(
                passed=override,
                overridden=override,
                llm_skipped=True,
                static_result=static_result,
                llm_result=None,
                findings=static_result.findings,
                summary=static_result.summary,
                duration_ms=self._elapsed_ms(start_time),
            )

        llm_result = await self._run_llm_phase(files)

        findings = _tag(static_result.findings, FindingSource.STATIC)
        if llm_result is not None:
            findings += _tag(llm_result.findings, FindingSource.LLM)
        summary = GateSummary.from_findings(findings)

        return GateResult(
            passed=summary.block == 0,
            overridden=False,
            llm_skipped=llm_result is None or llm_result.model_count == 0,
            static_result=static_result,
            llm_result=llm_result,
            findings=findings,
            summary=summary,
            duration_ms=self._elapsed_ms(start_time),
        )

    async def _run_llm_phase(self, files: list[FileChange]) -> MultiModelResult | None:
        """Run the LLM review. Returns None if skipped, failed, or timed out."""
        if self.llm_review is None:
            logger.debug("No LLM review configured; static-only gate")
            return None

        try:
            if self.llm_timeout_ms is None:
                return await self.llm_review(files)
            return await asyncio.wait_for(
                self.llm_review(files), timeout=self.llm_timeout_ms / 1000
            )
        except TimeoutError:
            logger.warning(
                "LLM review timed out (timeout: %sms); static-only gate", self.llm_timeout_ms
            )
            return None
        except Exception as e:
            logger.warning("LLM review failed (%s); static-only gate", e)
            return None

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)


def _tag(findings: list[Finding], source: FindingSource) -> list[Finding]:
    return [finding.model_copy(update={"source": source}) for finding in findings]


async def run_push_gate(
    static_gate: StaticGateFn,
    llm_review: LlmReviewFn | None,
    files: list[FileChange],
    override: bool = False,
    llm_timeout_ms: int | None = DEFAULT_LLM_TIMEOUT_MS,
) -> GateResult:
    """Helper function to run the push gate.

    Args:
        static_gate: Synchronous static check over the changed files
        llm_review: Async LLM review (None skips the LLM phase)
        files: Changed files
        override: Human-authorized bypass of a failing static phase
        llm_timeout_ms: Timeout for the whole LLM phase

    Returns:
        GateResult from the gate
    """
    gate = PushGate(
        static_gate=static_gate,
        llm_review=llm_review,
        llm_timeout_ms=llm_timeout_ms,
    )
    return await gate.run(files, override=override)
