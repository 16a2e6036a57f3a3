"""
Helper functions: generate_text and generate_structured using any BaseLLMClient.
"""

from typing import Optional, Type

from research_assistant.llm.base import BaseLLMClient
from research_assistant.llm.extraction import Extraction, extract_structure


def generate_text(
    client: BaseLLMClient,
    prompt: str,
    *,
    system: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
) -> str:
    """Convenience wrapper around client.generate_content."""
    return client.generate_content(
        prompt,
        system_instruction=system,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def generate_structured(
    client: BaseLLMClient,
    prompt: str,
    schema: Type,
    *,
    system: Optional[str] = None,
    temperature: float = 0.3,
) -> Extraction:
    """
    Ask for a JSON reply and recover it with the tolerant extractor.

    Provider errors propagate; a reply that cannot be parsed comes back as an
    absent Extraction rather than an exception.
    """
    text = client.generate_content(
        prompt,
        system_instruction=system,
        temperature=temperature,
        json_mode=True,
    )
    return extract_structure(text, schema)
