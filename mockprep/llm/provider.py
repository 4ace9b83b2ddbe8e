"""
Chat-completion provider abstraction.

The question service talks to language models only through LLMProvider, so
the vendor SDK stays out of the interview logic and tests can stub it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

ChatMessages = List[Dict[str, str]]


@dataclass
class LLMResponse:
    """Text returned by one completion call, with usage accounting."""
    content: str
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    cost_estimate: float = 0.0
    finish_reason: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class LLMProvider(ABC):
    """One synchronous completion per call; providers never retry on their own."""

    @abstractmethod
    def chat(
        self,
        messages: ChatMessages,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
        **kwargs
    ) -> LLMResponse:
        """
        Run a chat completion.

        Args:
            messages: Role/content dicts, system prompt first
            model: Provider model name
            temperature: Sampling temperature
            max_tokens: Completion token cap (provider default when None)
            json_output: Constrain the reply to a single JSON object

        Returns:
            LLMResponse; content is "" when the model returned nothing
        """

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        return 0.0
