"""
Factory to get the configured LLM client.
"""

from typing import Optional

from research_assistant.config import Settings
from research_assistant.llm.base import BaseLLMClient


def get_client(
    provider: str = "gemini",
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> BaseLLMClient:
    """
    Return an LLM client for the given provider.

    Args:
        provider: Only "gemini" is supported
        model: Model name; defaults to settings.model
        api_key: Optional; otherwise settings.api_key (GOOGLE_API_KEY / API_KEY)
        settings: Settings to read defaults from; loaded from the environment when omitted

    Returns:
        BaseLLMClient implementation
    """
    settings = settings or Settings.from_env()
    provider = (provider or "").lower().strip()

    if provider == "gemini":
        # Deferred so the statistics and parsing modules import without google-genai
        from research_assistant.llm.gemini_client import GeminiLLMClient
        return GeminiLLMClient(model=model or settings.model, api_key=api_key or settings.require_api_key())

    raise ValueError(f"Unknown provider: {provider}. Use: gemini")
