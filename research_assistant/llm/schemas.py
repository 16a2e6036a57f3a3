"""
Expected shapes of the structured replies each AI call site asks for.

Field metadata carries the JSON key the model is told to emit (camelCase),
so the same declaration drives strict parsing and regex scraping.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

T = TypeVar("T", bound="ResponseSchema")


def _key(name: str):
    return field(default="", metadata={"key": name})


def _list_key(name: str):
    return field(default_factory=list, metadata={"key": name, "list": True})


class ResponseSchema:
    """Mixin for dataclasses describing a JSON reply."""

    @classmethod
    def json_fields(cls) -> List[Tuple[str, str, bool]]:
        """(attribute, json key, is_list) for each declared field."""
        return [
            (f.name, f.metadata.get("key", f.name), bool(f.metadata.get("list")))
            for f in fields(cls)
        ]

    @classmethod
    def from_mapping(cls: Type[T], data: Mapping[str, Any]) -> Optional[T]:
        """
        Build an instance from a parsed JSON object.

        Returns None when none of the declared keys is present. Missing
        string fields become "" and missing list fields [].
        """
        if not isinstance(data, Mapping):
            return None
        declared = cls.json_fields()
        if not any(key in data for _, key, _ in declared):
            return None

        kwargs: Dict[str, Any] = {}
        for attr, key, is_list in declared:
            if key not in data:
                continue
            value = data[key]
            if is_list:
                if value is None:
                    value = []
                elif isinstance(value, (list, tuple)):
                    value = [str(v) for v in value if v is not None]
                else:
                    value = [str(value)]
            else:
                value = "" if value is None else str(value)
            kwargs[attr] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key, _ in self.json_fields()}


@dataclass
class ProjectDetails(ResponseSchema):
    """Questions and hypotheses suggested from a project title."""

    primary_questions: str = _key("primaryQuestions")
    secondary_questions: str = _key("secondaryQuestions")
    primary_hypothesis: str = _key("primaryHypothesis")
    secondary_hypothesis: str = _key("secondaryHypothesis")


@dataclass
class HypothesisSuggestion(ResponseSchema):
    primary: str = _key("primary")
    secondary: str = _key("secondary")


@dataclass
class StudyDesignSuggestion(ResponseSchema):
    design: str = _key("design")
    justification: str = _key("justification")
    sample_size: str = _key("sampleSize")
    duration: str = _key("duration")


@dataclass
class TitleAbstractSuggestion(ResponseSchema):
    title: str = _key("title")
    abstract: str = _key("abstract")


@dataclass
class LiteratureInsights(ResponseSchema):
    """Themes and follow-up searches for a literature summary."""

    key_themes: List[str] = _list_key("keyThemes")
    related_queries: List[str] = _list_key("relatedQueries")


@dataclass(frozen=True)
class GroundingChunk:
    """A web source returned alongside a grounded search answer. Passed through untouched."""

    uri: str
    title: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Optional["GroundingChunk"]:
        """Accept both the nested {"web": {...}} form and a flat {"uri", "title"} form."""
        if not isinstance(data, Mapping):
            return None
        web = data.get("web") if isinstance(data.get("web"), Mapping) else data
        uri = web.get("uri")
        if not uri:
            return None
        return cls(uri=str(uri), title=str(web.get("title") or ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"web": {"uri": self.uri, "title": self.title}}
