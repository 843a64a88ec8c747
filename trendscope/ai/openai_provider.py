"""TrendScope — OpenAI Provider."""

from typing import Optional

from openai import AsyncOpenAI

from trendscope.ai.base_provider import LLMReasoner
from trendscope.config import settings
from trendscope.core.logging import get_logger

logger = get_logger("ai.openai")


class OpenAIProvider(LLMReasoner):
    """OpenAI chat-completions reasoner (JSON mode for structured calls)."""

    name = "openai"

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self.client = client or (
            AsyncOpenAI(api_key=settings.openai_api_key)
            if settings.openai_api_key
            else None
        )
        self.model = model or settings.openai_model

    def is_available(self) -> bool:
        return self.client is not None

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_output: bool,
    ) -> str:
        kwargs = {}
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        content = response.choices[0].message.content if response.choices else None
        logger.debug(f"OpenAI returned {len(content or '')} chars")
        return content or ""
