"""
Base types and protocol for generative-language clients.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from research_assistant.llm.schemas import GroundingChunk


@dataclass
class SearchResponse:
    """Answer from a search-grounded call plus the web sources it cites."""

    text: str
    sources: List[GroundingChunk] = field(default_factory=list)


class BaseLLMClient(ABC):
    """Abstract base for LLM clients used by the assistant."""

    def __init__(self, model: str, api_key: Optional[str] = None):
        self.model = model
        self.api_key = api_key

    @abstractmethod
    def generate_text(
        self,
        messages: List[Dict[str, Any]],
        *,
        system: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate text from messages.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": str}
            system: Optional system instruction
            temperature: Sampling temperature
            max_tokens: Max output tokens
            json_mode: Ask the provider for a JSON-only reply

        Returns:
            Generated text string
        """
        pass

    def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Single prompt generation."""
        return self.generate_text(
            messages=[{"role": "user", "content": prompt}],
            system=system_instruction,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )

    def search(self, prompt: str) -> SearchResponse:
        """
        Answer a prompt with web-search grounding.

        Providers without grounding support raise NotImplementedError.
        """
        raise NotImplementedError(f"{self.__class__.__name__} does not support grounded search")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
