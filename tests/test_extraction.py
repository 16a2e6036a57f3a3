"""
Unit tests for the tolerant structured-response extractor and the reply schemas.
"""

import json
import logging
import sys

import pytest

from research_assistant.llm.extraction import (
    Extraction,
    extract_json,
    extract_structure,
    scrape_field,
    scrape_list,
)
from research_assistant.llm.schemas import (
    GroundingChunk,
    HypothesisSuggestion,
    LiteratureInsights,
    ProjectDetails,
    StudyDesignSuggestion,
)


# -----------------------------------------------------------------------------
# extract_json
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("prefix,suffix", [
    ("", ""),
    ("Here is the JSON you asked for:\n", ""),
    ("", "\nHope this helps!"),
    ("```json\n", "\n```"),
    ("Result -> ", " <- end. Note: values are estimates."),
])
def test_extract_object_with_surrounding_prose(prefix, suffix):
    payload = {"design": "Cross-sectional", "sampleSize": "277", "nested": {"alpha": 0.05, "tags": ["a", "b"]}}
    result = extract_json(prefix + json.dumps(payload) + suffix)
    assert result.found
    assert result.strategy == "object"
    assert result.value == payload


def test_extract_array():
    result = extract_json('Themes: ["sepsis", "lactate"] as requested')
    assert result.strategy == "array"
    assert result.value == ["sepsis", "lactate"]


def test_array_of_objects_falls_through_to_array_pass():
    # First "{" to last "}" slices '{"a": 1}, {"b": 2}', which is not valid JSON
    result = extract_json('[{"a": 1}, {"b": 2}]')
    assert result.strategy == "array"
    assert result.value == [{"a": 1}, {"b": 2}]


def test_two_separate_objects_over_capture():
    # The slice spans both objects plus the prose between them and does not parse
    result = extract_json('{"primary": "A"} and also {"secondary": "B"}')
    assert not result.found
    assert result.value is None
    assert "invalid JSON" in result.error


def test_nested_object_is_captured_whole():
    result = extract_json('Answer: {"outer": {"inner": {"deep": 1}}} done')
    assert result.value == {"outer": {"inner": {"deep": 1}}}


@pytest.mark.parametrize("text", [
    "No structure here at all.",
    "",
    None,
    "} backwards {",
    "] backwards [",
    "{not json}",
])
def test_extract_not_found_never_raises(text):
    result = extract_json(text)
    assert isinstance(result, Extraction)
    assert not result.found
    assert not result
    assert result.error


def test_oversized_integer_literal_never_raises():
    # From 3.11 json.loads refuses integer literals beyond the interpreter's digit limit
    text = 'Here: {"primary": "x", "n": ' + "1" * 5000 + "}"
    result = extract_json(text)
    if sys.version_info >= (3, 11):
        assert not result.found
        assert "invalid JSON" in result.error

    structured = extract_structure(text, HypothesisSuggestion)
    assert structured.found
    assert structured.value.primary == "x"


def test_extract_logs_parse_error_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="research_assistant.llm.extraction"):
        extract_json("{broken: json,}")
    assert "Could not parse" in caplog.text


# -----------------------------------------------------------------------------
# scrape_field / scrape_list
# -----------------------------------------------------------------------------


def test_scrape_field_quoted_key():
    text = 'Partial output: "primary": "Lactate predicts mortality", "secondary": "trunc'
    assert scrape_field(text, "primary") == "Lactate predicts mortality"
    assert scrape_field(text, "secondary") == ""


def test_scrape_field_bare_key_and_escapes():
    text = 'title: "The \\"Golden Hour\\" in sepsis"'
    assert scrape_field(text, "title") == 'The "Golden Hour" in sepsis'


def test_scrape_field_does_not_match_longer_key():
    text = '"secondaryPrimary": "x", "primaryQuestions": "y"'
    assert scrape_field(text, "primary") == ""
    assert scrape_field(text, "primaryQuestions") == "y"


def test_scrape_list():
    text = "keyThemes: ['PCT accuracy', \"CRP kinetics\" ,  presepsin ] trailing"
    assert scrape_list(text, "keyThemes") == ["PCT accuracy", "CRP kinetics", "presepsin"]


def test_scrape_list_splits_on_every_comma():
    assert scrape_list('"relatedQueries": ["sepsis, neonatal"]', "relatedQueries") == ["sepsis", "neonatal"]


@pytest.mark.parametrize("text", ["", None, "no fields", "keyThemes: none"])
def test_scrape_absent_is_empty(text):
    assert scrape_list(text, "keyThemes") == []
    assert scrape_field(text, "keyThemes") == ""


# -----------------------------------------------------------------------------
# extract_structure
# -----------------------------------------------------------------------------


def test_extract_structure_strict(hypothesis_reply):
    result = extract_structure(hypothesis_reply, HypothesisSuggestion)
    assert result.strategy == "object"
    assert result.value == HypothesisSuggestion(
        primary="Early lactate predicts sepsis mortality",
        secondary="Lactate clearance correlates with ICU stay",
    )


def test_extract_structure_falls_back_to_scrape(caplog):
    # Truncated reply: the closing brace never arrives
    text = '{"design": "Prospective cohort", "justification": "Temporal order", "sampleSize": "120'
    with caplog.at_level(logging.WARNING):
        result = extract_structure(text, StudyDesignSuggestion)
    assert result.strategy == "scrape"
    assert result.value.design == "Prospective cohort"
    assert result.value.justification == "Temporal order"
    assert result.value.sample_size == ""
    assert "Falling back to field scraping" in caplog.text


def test_extract_structure_scrapes_lists():
    text = 'Summary first. keyThemes: ["A", "B"] and relatedQueries: ["q1"] (not valid JSON)'
    result = extract_structure(text, LiteratureInsights)
    assert result.strategy == "scrape"
    assert result.value.key_themes == ["A", "B"]
    assert result.value.related_queries == ["q1"]


def test_extract_structure_wrong_shape_is_absent():
    result = extract_structure('{"unrelated": 1}', HypothesisSuggestion)
    assert not result.found


def test_extract_structure_empty_text():
    result = extract_structure("", ProjectDetails)
    assert not result.found
    assert result.value is None


# -----------------------------------------------------------------------------
# schemas
# -----------------------------------------------------------------------------


def test_project_details_from_camel_case():
    details = ProjectDetails.from_mapping({
        "primaryQuestions": "Q1",
        "secondaryQuestions": "Q2",
        "primaryHypothesis": "H1",
    })
    assert details.primary_questions == "Q1"
    assert details.secondary_hypothesis == ""
    assert details.to_dict()["primaryHypothesis"] == "H1"


def test_schema_coerces_values():
    design = StudyDesignSuggestion.from_mapping({"design": "RCT", "sampleSize": 120, "duration": None})
    assert design.sample_size == "120"
    assert design.duration == ""


def test_list_schema_coerces_scalar():
    insights = LiteratureInsights.from_mapping({"keyThemes": "single theme"})
    assert insights.key_themes == ["single theme"]
    assert insights.related_queries == []


def test_schema_rejects_non_mapping():
    assert HypothesisSuggestion.from_mapping(["primary"]) is None


def test_grounding_chunk_forms():
    nested = GroundingChunk.from_mapping({"web": {"uri": "https://a.org", "title": "A"}})
    flat = GroundingChunk.from_mapping({"uri": "https://a.org", "title": "A"})
    assert nested == flat
    assert nested.to_dict() == {"web": {"uri": "https://a.org", "title": "A"}}
    assert GroundingChunk.from_mapping({"web": {"title": "no uri"}}) is None
