"""TrendScope — Sarvam AI Provider (model: sarvam-m)."""

from typing import Optional

from sarvamai import AsyncSarvamAI

from trendscope.ai.base_provider import LLMReasoner
from trendscope.config import settings
from trendscope.core.logging import get_logger

logger = get_logger("ai.sarvam")


class SarvamProvider(LLMReasoner):
    """Sarvam AI reasoner."""

    name = "sarvam"

    def __init__(self, client: Optional[AsyncSarvamAI] = None):
        self.client = client or (
            AsyncSarvamAI(api_subscription_key=settings.sarvam_api_key)
            if settings.sarvam_api_key
            else None
        )

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
        response = await self.client.chat.completions(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""
