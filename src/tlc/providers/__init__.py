"""TLC providers — AI provider abstraction layer."""

from tlc.providers.base import AgentProvider, AgentResult, TokenUsage
from tlc.providers.pydantic_ai import PydanticAIProvider

__all__ = [
    "AgentProvider",
    "AgentResult",
    "PydanticAIProvider",
    "TokenUsage",
]
