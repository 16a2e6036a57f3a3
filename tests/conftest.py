"""
Shared pytest fixtures for statistics, extraction and assistant unit tests.
All in-memory; no network calls and no writes outside tmp_path.
"""

import threading
from typing import Any, Dict, List, Optional

import pytest

from research_assistant.llm.base import BaseLLMClient, SearchResponse
from research_assistant.llm.schemas import GroundingChunk


class FakeLLMClient(BaseLLMClient):
    """Scripted client: returns queued replies in order, or raises queued exceptions."""

    def __init__(self, replies: Optional[List[Any]] = None, search_reply: Optional[SearchResponse] = None):
        super().__init__(model="fake-model")
        self.replies = list(replies or [])
        self.search_reply = search_reply
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def _next(self) -> Any:
        with self._lock:
            reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply

    def generate_text(self, messages, *, system=None, temperature=0.7, max_tokens=None, json_mode=False):
        with self._lock:
            self.calls.append({
                "messages": messages,
                "system": system,
                "temperature": temperature,
                "json_mode": json_mode,
            })
        return self._next()

    def search(self, prompt):
        with self._lock:
            self.calls.append({"search": prompt})
        if isinstance(self.search_reply, Exception):
            raise self.search_reply
        return self.search_reply


@pytest.fixture
def fake_client_factory():
    return FakeLLMClient


@pytest.fixture
def group_a():
    """Default Group 1 values of the t-test calculator."""
    return [2.9, 3.0, 3.1, 3.4, 3.6]


@pytest.fixture
def group_b():
    """Default Group 2 values of the t-test calculator."""
    return [3.2, 3.5, 3.8, 4.0, 4.1]


@pytest.fixture
def hypothesis_reply():
    """Model reply with commentary around the JSON object."""
    return (
        "Sure! Here is a suggestion based on your title:\n"
        '{"primary": "Early lactate predicts sepsis mortality", '
        '"secondary": "Lactate clearance correlates with ICU stay"}\n'
        "Let me know if you need anything else."
    )


@pytest.fixture
def grounded_search_reply():
    text = (
        "Procalcitonin and CRP are the most studied biomarkers for neonatal sepsis.\n\n"
        "```json\n"
        '{"keyThemes": ["Procalcitonin accuracy", "CRP kinetics"], '
        '"relatedQueries": ["procalcitonin neonatal sepsis meta-analysis", "presepsin neonates"]}\n'
        "```"
    )
    return SearchResponse(
        text=text,
        sources=[
            GroundingChunk(uri="https://example.org/pct", title="PCT in neonatal sepsis"),
            GroundingChunk(uri="https://example.org/crp", title=""),
        ],
    )
