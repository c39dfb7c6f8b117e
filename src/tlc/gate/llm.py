"""LLM-backed review function and LLM phase wiring for the push gate."""

from typing import cast

from pydantic_ai.models import KnownModelName

from tlc.gate.models import FileChange, ModelReview, MultiModelResult
from tlc.gate.prompts import build_review_prompt, get_system_prompt
from tlc.gate.push_gate import LlmReviewFn
from tlc.gate.reviewer import ReviewFn, review_with_models
from tlc.providers.base import AgentResult
from tlc.providers.pydantic_ai import PydanticAIProvider


def build_review_fn() -> ReviewFn:
    """Build a ReviewFn that reviews a diff with a Pydantic AI model.

    One provider is created per model string on first use and reused afterwards.
    Provider construction errors (e.g. missing API key) surface as that model failing.

    Returns:
        Async callable: (diff, model) -> AgentResult[ModelReview] with usage and timing
    """
    providers: dict[str, PydanticAIProvider[ModelReview]] = {}

    async def review_fn(diff: str, model: str) -> AgentResult[ModelReview]:
        provider = providers.get(model)
        if provider is None:
            provider = PydanticAIProvider(
                model=cast(KnownModelName, model),
                output_type=ModelReview,
                system_prompt=get_system_prompt(),
            )
            providers[model] = provider
        return await provider.invoke(build_review_prompt(diff))

    return review_fn


def render_files_as_diff(files: list[FileChange]) -> str:
    """Fallback review input when no git diff is available: whole files as additions."""
    parts: list[str] = []
    for change in files:
        lines = change.content.split("\n")
        parts.append(f"--- /dev/null\n+++ b/{change.path}\n@@ -0,0 +1,{len(lines)} @@")
        parts.extend(f"+{line}" for line in lines)
    return "\n".join(parts)


def build_llm_review(
    models: list[str],
    review_fn: ReviewFn,
    diff: str | None = None,
    per_model_timeout_ms: int | None = None,
) -> LlmReviewFn:
    """Build the push gate's LLM phase.

    Args:
        models: Model identifiers to fan out to
        review_fn: Function that reviews a diff with one model
        diff: Precomputed diff text (rendered from the files if None or empty)
        per_model_timeout_ms: Timeout applied to each model call

    Returns:
        Async callable: files -> MultiModelResult
    """

    async def llm_review(files: list[FileChange]) -> MultiModelResult:
        review_input = diff or render_files_as_diff(files)
        return await review_with_models(
            review_input, models, review_fn, timeout_ms=per_model_timeout_ms
        )

    return llm_review
