"""AI-backed assistant features."""

from research_assistant.agents.assistant import (
    LiteratureSearchResult,
    ResearchAssistant,
    TaskOutcome,
    USER_ERROR_MESSAGE,
)
from research_assistant.agents.prompts import AIPersona, Language

__all__ = [
    "AIPersona",
    "Language",
    "LiteratureSearchResult",
    "ResearchAssistant",
    "TaskOutcome",
    "USER_ERROR_MESSAGE",
]
