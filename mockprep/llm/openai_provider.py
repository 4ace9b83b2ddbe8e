"""
OpenAI chat-completions provider.
"""
import logging
from typing import Optional

from openai import OpenAI, APIError

from mockprep.core.config import OPENAI_API_KEY, OPENAI_TIMEOUT_SECONDS
from mockprep.llm.provider import ChatMessages, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 2000

# USD per 1M tokens
MODEL_PRICING = {
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
}
FALLBACK_PRICING = MODEL_PRICING["gpt-4o-mini"]


class OpenAIProvider(LLMProvider):
    """
    LLMProvider over the official SDK.

    The SDK's own retries are switched off: every generation, evaluation and
    summary request is attempted exactly once and failures surface to the caller.
    """

    def __init__(self, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        if client is None:
            api_key = api_key or OPENAI_API_KEY
            if not api_key:
                raise ValueError("OPENAI_API_KEY not configured")
            client = OpenAI(api_key=api_key, timeout=OPENAI_TIMEOUT_SECONDS, max_retries=0)
        self.client = client

    def chat(
        self,
        messages: ChatMessages,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
        **kwargs
    ) -> LLMResponse:
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
                **kwargs
            )
        except APIError as e:
            logger.error(f"OpenAI request failed: model={model}: {e}")
            raise

        choice = completion.choices[0]
        usage = completion.usage
        tokens_in = usage.prompt_tokens if usage else 0
        tokens_out = usage.completion_tokens if usage else 0

        response = LLMResponse(
            content=choice.message.content or "",
            model=model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost_estimate=self.estimate_cost(tokens_in, tokens_out, model),
            finish_reason=choice.finish_reason,
        )
        if response.truncated:
            logger.warning(f"Completion hit the token limit: model={model}, tokens_out={tokens_out}")
        logger.debug(f"Completion: model={model}, in={tokens_in}, out={tokens_out}, cost=${response.cost_estimate:.5f}")
        return response

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        pricing = MODEL_PRICING.get(model, FALLBACK_PRICING)
        return (tokens_in * pricing["input"] + tokens_out * pricing["output"]) / 1_000_000
