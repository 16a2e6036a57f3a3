"""
LLM client abstraction and tolerant parsing of structured replies.
"""

from research_assistant.llm.base import BaseLLMClient, SearchResponse
from research_assistant.llm.extraction import (
    Extraction,
    extract_json,
    extract_structure,
    scrape_field,
    scrape_list,
)
from research_assistant.llm.factory import get_client
from research_assistant.llm.helpers import generate_structured, generate_text

__all__ = [
    "BaseLLMClient",
    "SearchResponse",
    "Extraction",
    "extract_json",
    "extract_structure",
    "scrape_field",
    "scrape_list",
    "get_client",
    "generate_structured",
    "generate_text",
]
