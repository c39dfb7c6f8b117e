"""Pydantic AI provider implementation.

Wraps a Pydantic AI Agent with usage tracking and timing. Any model Pydantic AI
knows ("anthropic:...", "openai:...", "google-gla:...") can be a review model.
"""

import time
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.models import KnownModelName, Model
from pydantic_ai.models.test import TestModel

from tlc.providers.base import AgentProvider, AgentResult, TokenUsage


class PydanticAIProvider[OutputT](AgentProvider[OutputT]):
    """Pydantic AI implementation of AgentProvider.

    Example:
        provider = PydanticAIProvider(
            model="anthropic:claude-sonnet-4-5",
            output_type=ModelReview,
            system_prompt=get_system_prompt(),
        )
        result = await provider.invoke(build_review_prompt(diff))
    """

    def __init__(
        self,
        model: Model | KnownModelName | str,
        output_type: type[OutputT],
        system_prompt: str = "",
    ) -> None:
        """Initialize provider with model and output type.

        Args:
            model: Pydantic AI model (Model instance, TestModel, or "provider:name" string)
            output_type: Structured output type (BaseModel subclass or str)
            system_prompt: Optional system prompt for the agent
        """
        self._agent: Agent[None, OutputT] = Agent(
            model=model, output_type=output_type, system_prompt=system_prompt
        )
        self._model_name, self._provider_name = self._parse_model_name(model)

    def _parse_model_name(self, model: Model | KnownModelName | str | Any) -> tuple[str, str]:
        """Split a model identifier into (model_name, provider_name)."""
        if isinstance(model, TestModel):
            return ("test", "test")

        model_str = model if isinstance(model, str) else str(model)
        if ":" in model_str:
            provider, model_name = model_str.split(":", 1)
            return (model_name, provider)
        return (model_str, "unknown")

    async def invoke(self, prompt: str, **kwargs: Any) -> AgentResult[OutputT]:
        """Invoke the agent with a prompt.

        Args:
            prompt: User prompt
            **kwargs: Passed through to Agent.run

        Returns:
            AgentResult with output, usage, and timing
        """
        start = time.monotonic()
        result = await self._agent.run(prompt, **kwargs)
        duration_ms = int((time.monotonic() - start) * 1000)

        run_usage = result.usage()
        usage = TokenUsage(
            input_tokens=run_usage.input_tokens or 0,
            output_tokens=run_usage.output_tokens or 0,
            total_tokens=run_usage.total_tokens or 0,
            requests=run_usage.requests or 1,
        )

        return AgentResult(
            output=result.output,
            usage=usage,
            model=self._model_name,
            provider=self._provider_name,
            duration_ms=duration_ms,
        )
