"""
Google Gemini client implementing BaseLLMClient on the google-genai SDK.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import google.genai as genai

from research_assistant.errors import UpstreamError
from research_assistant.llm.base import BaseLLMClient, SearchResponse
from research_assistant.llm.schemas import GroundingChunk

logger = logging.getLogger(__name__)


def _messages_to_prompt_and_system(messages: List[Dict[str, Any]], system: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """Collapse chat messages into one prompt string and a system instruction."""
    sys_text = system
    user_parts = []
    for m in messages:
        role = m.get("role", "user")
        content = m.get("content", "")
        if not isinstance(content, str):
            continue
        if role == "system":
            sys_text = content
        elif role == "user":
            user_parts.append(content)
    return "\n\n".join(user_parts), sys_text


def _describe_missing_text(response: Any) -> str:
    finish_reason_str = "unknown"
    candidates = getattr(response, "candidates", None)
    if candidates:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        if finish_reason is not None:
            finish_reason_str = finish_reason.name if hasattr(finish_reason, "name") else str(finish_reason)
    return (
        f"Response has no text content. Finish reason: {finish_reason_str}. "
        "This may indicate the content was blocked or filtered."
    )


class GeminiLLMClient(BaseLLMClient):
    """Client for the Gemini API (text, JSON mode and Google Search grounding)."""

    def __init__(self, model: str = "gemini-2.5-flash", api_key: Optional[str] = None, client: Any = None):
        """
        Initialize Gemini client.

        Args:
            model: Model name (e.g., "gemini-2.5-flash")
            api_key: API key
            client: Pre-built genai.Client (mainly for tests)
        """
        super().__init__(model=model, api_key=api_key)
        if client is not None:
            self.client = client
            return
        if not api_key:
            raise ValueError(
                "GOOGLE_API_KEY not found in environment variables. "
                "Please set it in .env file or as environment variable."
            )
        try:
            self.client = genai.Client(api_key=api_key)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize Gemini Client: {e}")

    def _call(self, contents: str, config: Optional[Any]) -> Any:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise UpstreamError(f"Error generating content with Gemini API: {e}") from e

        candidates = getattr(response, "candidates", None)
        if candidates:
            finish_reason = getattr(candidates[0], "finish_reason", None)
            if finish_reason is not None and getattr(finish_reason, "name", str(finish_reason)) == "RECITATION":
                raise UpstreamError(_describe_missing_text(response))
        return response

    @staticmethod
    def _text_of(response: Any) -> str:
        try:
            text = response.text
        except (AttributeError, ValueError):
            text = None
        if text is None:
            raise UpstreamError(_describe_missing_text(response))
        return text

    def generate_text(
        self,
        messages: List[Dict[str, Any]],
        *,
        system: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        prompt, sys_text = _messages_to_prompt_and_system(messages, system=system)

        config_dict: Dict[str, Any] = {}
        if temperature is not None:
            config_dict["temperature"] = temperature
        if max_tokens is not None:
            config_dict["max_output_tokens"] = max_tokens
        if sys_text is not None:
            config_dict["system_instruction"] = sys_text
        if json_mode:
            config_dict["response_mime_type"] = "application/json"

        config = genai.types.GenerateContentConfig(**config_dict) if config_dict else None
        return self._text_of(self._call(prompt, config))

    def search(self, prompt: str) -> SearchResponse:
        config = genai.types.GenerateContentConfig(
            tools=[genai.types.Tool(google_search=genai.types.GoogleSearch())],
        )
        response = self._call(prompt, config)
        return SearchResponse(text=self._text_of(response), sources=self._grounding_chunks(response))

    @staticmethod
    def _grounding_chunks(response: Any) -> List[GroundingChunk]:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []
        metadata = getattr(candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []
        sources = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            uri = getattr(web, "uri", None)
            if uri:
                sources.append(GroundingChunk(uri=uri, title=getattr(web, "title", None) or ""))
        logger.debug(f"Search returned {len(sources)} grounding sources")
        return sources
