"""Core provider abstractions.

- TokenUsage: token counts for one invocation
- AgentResult: structured output plus usage and timing
- AgentProvider: abstract base class for provider implementations

No pydantic-ai dependency here.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class TokenUsage(BaseModel):
    """Token usage for one invocation. Counts default to 0."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    requests: int = 1

    model_config = ConfigDict(frozen=True)

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
            requests=self.requests + other.requests,
        )


class AgentResult[OutputT](BaseModel):
    """Result from an agent invocation.

    Generic over output type: a review model (ModelReview) or plain str.
    """

    output: OutputT
    usage: TokenUsage
    model: str
    provider: str
    duration_ms: int


class AgentProvider[OutputT](ABC):
    """Abstract base class for agent providers, generic over output type."""

    @abstractmethod
    async def invoke(self, prompt: str, **kwargs: object) -> AgentResult[OutputT]:
        """Invoke the agent with a prompt.

        Args:
            prompt: User prompt to send to the agent
            **kwargs: Provider-specific arguments

        Returns:
            AgentResult with typed output, usage, and metadata
        """
        ...
