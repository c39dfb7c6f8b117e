"""Multi-model reviewer — fan a diff out to several LLMs and merge what they agree on.

Each model runs concurrently. A model that raises or times out is dropped; the
rest are aggregated. Findings are deduplicated on (file, line, rule):
- `flagged_by` collects every model that raised the finding
- the highest severity wins, and its message comes with it
- equal severities keep the first-seen message

Uses dependency injection for the actual model call (ReviewFn), so this module
never imports a provider.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from tlc.gate.models import Finding, ModelReview, ModelReviewResult, MultiModelResult
from tlc.providers.base import AgentResult, TokenUsage

logger = logging.getLogger(__name__)

# DI type: caller provides an async function (diff, model) -> AgentResult[ModelReview]
ReviewFn = Callable[[str, str], Awaitable[AgentResult[ModelReview]]]

ALL_MODELS_FAILED = "All models failed — static-only fallback"


async def _review_one(
    diff: str,
    model: str,
    review_fn: ReviewFn,
    timeout_ms: int | None,
) -> ModelReviewResult | None:
    """Run one model. Returns None if it failed or timed out."""
    try:
        if timeout_ms is None:
            result = await review_fn(diff, model)
        else:
            result = await asyncio.wait_for(review_fn(diff, model), timeout=timeout_ms / 1000)
    except TimeoutError:
        logger.warning("Review model %s timed out (timeout: %sms)", model, timeout_ms)
        return None
    except Exception as e:
        logger.warning("Review model %s failed: %s", model, e)
        return None

    return ModelReviewResult(
        model=model,
        findings=result.output.findings,
        summary=result.output.summary,
        usage=result.usage,
        duration_ms=result.duration_ms,
    )


async def review_with_models(
    diff: str,
    models: list[str],
    review_fn: ReviewFn,
    timeout_ms: int | None = None,
) -> MultiModelResult:
    """Review a diff with every model concurrently and aggregate the results.

    Never raises for model failures. If every model fails (or none are given) the
    result has no findings and model_count 0.

    Args:
        diff: Diff text to review
        models: Model identifiers, e.g. "anthropic:claude-sonnet-4-5"
        review_fn: Async function that reviews a diff with one model
        timeout_ms: Per-model timeout in milliseconds (None waits indefinitely)

    Returns:
        MultiModelResult with deduplicated findings
    """
    outcomes = await asyncio.gather(
        *(_review_one(diff, model, review_fn, timeout_ms) for model in models)
    )
    results = [outcome for outcome in outcomes if outcome is not None]
    failed = [model for model, outcome in zip(models, outcomes, strict=True) if outcome is None]

    if not results:
        return MultiModelResult(
            findings=[],
            summary=ALL_MODELS_FAILED,
            model_count=0,
            failed_models=failed,
        )

    return MultiModelResult(
        findings=aggregate_findings(results),
        summary=merge_summaries(results),
        model_count=len(results),
        models=[result.model for result in results],
        failed_models=failed,
        usage=sum((result.usage for result in results), TokenUsage(requests=0)),
    )


def aggregate_findings(results: list[ModelReviewResult]) -> list[Finding]:
    """Deduplicate findings across models, tracking which models flagged each one.

    Args:
        results: Successful model results in aggregation order

    Returns:
        One finding per (file, line, rule), in first-seen order
    """
    merged: dict[tuple[str, int | None, str], Finding] = {}

    for result in results:
        for finding in result.findings:
            key = finding.identity
            existing = merged.get(key)

            if existing is None:
                merged[key] = finding.model_copy(update={"flagged_by": [result.model]})
                continue

            flagged_by = existing.flagged_by
            if result.model not in flagged_by:
                flagged_by = [*flagged_by, result.model]

            if finding.severity.priority > existing.severity.priority:
                merged[key] = finding.model_copy(update={"flagged_by": flagged_by})
            else:
                merged[key] = existing.model_copy(update={"flagged_by": flagged_by})

    return list(merged.values())


def calculate_consensus(finding: Finding, total_models: int) -> float:
    """Percentage of queried models that flagged the finding (0 when no models)."""
    if total_models == 0:
        return 0.0
    return 100 * len(finding.flagged_by) / total_models


def merge_summaries(results: list[ModelReviewResult]) -> str:
    """Join per-model summaries as "[model]: summary" lines, skipping empty ones."""
    return "\n".join(f"[{result.model}]: {result.summary}" for result in results if result.summary)
