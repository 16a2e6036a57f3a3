"""
AI-backed features of the research assistant.

Each public method validates its input synchronously, then submits the model
call to a thread pool and returns a Future. The Future resolves to a
TaskOutcome and never raises for upstream failures: those are logged and
turned into a user-facing message. Callers that lose interest (e.g. the user
navigates away) may call future.cancel().
"""

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from research_assistant.agents import prompts
from research_assistant.agents.prompts import AIPersona, Language
from research_assistant.biostats.metrics import ChiSquareResult, TTestResult, TwoByTwoTable
from research_assistant.errors import ValidationError
from research_assistant.llm.base import BaseLLMClient
from research_assistant.llm.extraction import Extraction, extract_structure
from research_assistant.llm.helpers import generate_structured, generate_text
from research_assistant.llm.schemas import (
    GroundingChunk,
    HypothesisSuggestion,
    LiteratureInsights,
    ProjectDetails,
    StudyDesignSuggestion,
    TitleAbstractSuggestion,
)

logger = logging.getLogger(__name__)

USER_ERROR_MESSAGE = "An error occurred. Please try again."

_TRAILING_FENCE = re.compile(r"```(?:json)?\s*$")
_LEADING_FENCE = re.compile(r"^\s*```")


@dataclass
class TaskOutcome:
    """Result of one AI task: a value, or a user-facing error message."""

    value: Any = None
    error: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LiteratureSearchResult:
    summary: str
    sources: List[GroundingChunk] = field(default_factory=list)
    key_themes: List[str] = field(default_factory=list)
    related_queries: List[str] = field(default_factory=list)


def _require(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def _split_summary(text: str) -> str:
    """Drop the JSON block the search prompt asks for, keeping the prose around it."""
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end < start:
        return text.strip()
    before = _TRAILING_FENCE.sub("", text[:start].rstrip()).strip()
    after = _LEADING_FENCE.sub("", text[end + 1:]).strip()
    return "\n\n".join(part for part in (before, after) if part)


class ResearchAssistant:
    """Runs AI requests for the project views in the background."""

    def __init__(self, client: BaseLLMClient, max_workers: int = 4, executor: Optional[ThreadPoolExecutor] = None):
        """
        Args:
            client: LLM client used for every call
            max_workers: Size of the thread pool (ignored when executor is given)
            executor: Optional externally managed executor
        """
        self.client = client
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="assistant")

    def __enter__(self) -> "ResearchAssistant":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Stop accepting work; pending tasks that have not started are cancelled."""
        if self._owns_executor:
            self.executor.shutdown(wait=False, cancel_futures=True)

    def _submit(self, task_name: str, fn: Callable[[], Any]) -> "Future[TaskOutcome]":
        def run() -> TaskOutcome:
            try:
                return TaskOutcome(value=fn())
            except Exception as e:
                logger.error(f"{task_name} failed: {e}")
                return TaskOutcome(error=USER_ERROR_MESSAGE, detail=str(e))

        return self.executor.submit(run)

    @staticmethod
    def _completed(value: Any) -> "Future[TaskOutcome]":
        future: Future = Future()
        future.set_result(TaskOutcome(value=value))
        return future

    def _structured(self, task_name: str, prompt: str, schema: type) -> "Future[TaskOutcome]":
        def call() -> Extraction:
            extraction = generate_structured(self.client, prompt, schema)
            if not extraction.found:
                logger.info(f"{task_name}: no {schema.__name__} in response ({extraction.error})")
            return extraction

        return self._submit(task_name, call)

    # Project overview

    def project_details_from_title(self, title: str) -> "Future[TaskOutcome]":
        """Suggest research questions and hypotheses; resolves to Extraction[ProjectDetails]."""
        title = _require(title, "Please enter a project title first.")
        return self._structured("project_details_from_title", prompts.project_details_prompt(title), ProjectDetails)

    def suggest_hypothesis(self, title: str, questions: str) -> "Future[TaskOutcome]":
        """Resolves to Extraction[HypothesisSuggestion]."""
        title = _require(title, "Please enter a project title first.")
        questions = _require(questions, "Please enter the primary research questions first.")
        return self._structured("suggest_hypothesis", prompts.hypothesis_prompt(title, questions), HypothesisSuggestion)

    def suggest_study_design(self, title: str, questions: str) -> "Future[TaskOutcome]":
        """Resolves to Extraction[StudyDesignSuggestion]."""
        title = _require(title, "Please enter a project title first.")
        questions = _require(questions, "Please enter the primary research questions first.")
        return self._structured(
            "suggest_study_design", prompts.study_design_prompt(title, questions), StudyDesignSuggestion
        )

    # Literature

    def search_literature(self, query: str) -> "Future[TaskOutcome]":
        """Grounded search; resolves to LiteratureSearchResult."""
        query = _require(query, "Please enter a search query.")

        def call() -> LiteratureSearchResult:
            response = self.client.search(prompts.literature_search_prompt(query))
            insights = extract_structure(response.text, LiteratureInsights)
            themes: List[str] = []
            related: List[str] = []
            summary = response.text.strip()
            if insights.found:
                themes = insights.value.key_themes
                related = insights.value.related_queries
                summary = _split_summary(response.text)
            return LiteratureSearchResult(
                summary=summary,
                sources=list(response.sources),
                key_themes=themes,
                related_queries=related,
            )

        return self._submit("search_literature", call)

    # Reviews and drafting

    def review_methodology(self, project_context: str, methodology: str) -> "Future[TaskOutcome]":
        methodology = _require(methodology, "Please describe the methodology first.")
        prompt = prompts.methodology_review_prompt(project_context or "", methodology)
        return self._submit("review_methodology", lambda: generate_text(self.client, prompt))

    def review_draft(self, draft: str, persona: AIPersona) -> "Future[TaskOutcome]":
        """Review a draft with one of the persona system prompts."""
        draft = _require(draft, "Please paste your draft first.")
        system = prompts.PERSONA_PROMPTS[AIPersona(persona)]
        return self._submit(
            "review_draft", lambda: generate_text(self.client, draft, system=system)
        )

    def suggest_title_and_abstract(self, draft: str) -> "Future[TaskOutcome]":
        """Resolves to Extraction[TitleAbstractSuggestion]."""
        draft = _require(draft, "Please paste your draft first.")
        return self._structured(
            "suggest_title_and_abstract", prompts.title_abstract_prompt(draft), TitleAbstractSuggestion
        )

    def translate(self, text: str, language: Language) -> "Future[TaskOutcome]":
        """Translate text; English returns the input without a model call."""
        language = Language(language)
        if language is Language.ENGLISH or not text:
            return self._completed(text)
        prompt = prompts.translation_prompt(text, language)
        return self._submit("translate", lambda: generate_text(self.client, prompt))

    # Biostatistics interpretation

    def interpret_t_test(self, group1: str, group2: str, result: TTestResult) -> "Future[TaskOutcome]":
        prompt = prompts.t_test_interpretation_prompt(group1, group2, result.statistic, result.degrees_of_freedom)
        return self._submit("interpret_t_test", lambda: generate_text(self.client, prompt))

    def interpret_chi_square(self, table: TwoByTwoTable, result: ChiSquareResult) -> "Future[TaskOutcome]":
        prompt = prompts.chi_square_interpretation_prompt(table.a, table.b, table.c, table.d, result.statistic)
        return self._submit("interpret_chi_square", lambda: generate_text(self.client, prompt))
