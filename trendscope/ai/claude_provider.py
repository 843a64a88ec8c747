"""TrendScope — Anthropic Claude Provider."""

from typing import Optional

from anthropic import AsyncAnthropic

from trendscope.ai.base_provider import LLMReasoner
from trendscope.config import settings
from trendscope.core.logging import get_logger

logger = get_logger("ai.claude")


class ClaudeProvider(LLMReasoner):
    """Anthropic Claude reasoner."""

    name = "claude"

    def __init__(self, client: Optional[AsyncAnthropic] = None, model: Optional[str] = None):
        self.client = client or (
            AsyncAnthropic(api_key=settings.anthropic_api_key)
            if settings.anthropic_api_key
            else None
        )
        self.model = model or settings.claude_model

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
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[
                {"role": "user", "content": user_prompt},
            ],
        )
        return response.content[0].text if response.content else ""
