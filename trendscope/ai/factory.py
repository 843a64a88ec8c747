"""TrendScope — Reasoner Provider Selection."""

from typing import Dict, Tuple, Type

from trendscope.ai.base_provider import LLMReasoner
from trendscope.ai.claude_provider import ClaudeProvider
from trendscope.ai.openai_provider import OpenAIProvider
from trendscope.ai.sarvam_provider import SarvamProvider
from trendscope.config import settings
from trendscope.core.errors import ReasonerUnavailableError

PROVIDERS: Dict[str, Type[LLMReasoner]] = {
    "openai": OpenAIProvider,
    "claude": ClaudeProvider,
    "sarvam": SarvamProvider,
}


def select_provider(provider_name: str = "auto") -> Tuple[str, LLMReasoner]:
    """Select and return an available reasoner.

    When provider_name is 'auto', tries DEFAULT_AI_PROVIDER first,
    then falls through remaining providers.
    """
    if provider_name == "auto":
        default = settings.default_ai_provider
        if default in PROVIDERS:
            p = PROVIDERS[default]()
            if p.is_available():
                return default, p
        for name, cls in PROVIDERS.items():
            if name == default:
                continue
            provider = cls()
            if provider.is_available():
                return name, provider
        raise ReasonerUnavailableError(
            "No AI provider configured. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, or SARVAM_API_KEY in .env."
        )
    if provider_name in PROVIDERS:
        provider = PROVIDERS[provider_name]()
        if not provider.is_available():
            raise ReasonerUnavailableError(f"{provider_name} provider not configured.")
        return provider_name, provider
    raise ReasonerUnavailableError(
        f"Unknown provider '{provider_name}'. Use: auto, {', '.join(PROVIDERS)}"
    )
