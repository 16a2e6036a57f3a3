"""
Best-effort recovery of JSON from generative-model replies.

Models asked to "respond with JSON only" still wrap the payload in prose,
markdown fences or trailing commentary. Every structured call site routes
its raw reply through this module instead of calling json.loads directly.

Strategies, in the order extract_structure tries them:

1. object: slice from the first "{" to the last "}" and parse it.
2. array: slice from the first "[" to the last "]" and parse it.
3. scrape: regex-match `key: "value"` and `key: [ ... ]` for each field
   of the expected schema.

The first-brace/last-brace slice over-captures when the reply holds two
separate objects ("{...} and {...}"); that slice is not valid JSON and the
result is absent. Nothing in this module raises on bad input.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extraction:
    """Outcome of an extraction attempt: a value, or the reason there is none."""

    value: Any = None
    strategy: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.strategy is not None

    @classmethod
    def absent(cls, error: Optional[str] = None) -> "Extraction":
        return cls(value=None, strategy=None, error=error or "no structure found")

    def __bool__(self) -> bool:
        return self.found


def _slice_between(text: str, opener: str, closer: str) -> Optional[str]:
    start = text.find(opener)
    end = text.rfind(closer)
    if start > -1 and end > -1 and end > start:
        return text[start:end + 1]
    return None


def _parse_slice(text: str, opener: str, closer: str, expected: type) -> Extraction:
    candidate = _slice_between(text, opener, closer)
    if candidate is None:
        return Extraction.absent(f"no {opener}...{closer} span")
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        # ValueError also covers integer literals past the interpreter's digit limit
        logger.debug(f"Could not parse {opener}...{closer} span from response: {e}")
        return Extraction.absent(f"invalid JSON in {opener}...{closer} span: {e}")
    if not isinstance(value, expected):
        return Extraction.absent(f"{opener}...{closer} span parsed to {type(value).__name__}")
    return Extraction(value=value, strategy="object" if expected is dict else "array")


def extract_json(text: Optional[str]) -> Extraction:
    """
    Recover an embedded JSON object or array from free-form text.

    Args:
        text: Raw reply, possibly empty or None

    Returns:
        Extraction with strategy "object" or "array", or an absent result
    """
    if not text or not isinstance(text, str):
        return Extraction.absent("empty response")

    obj = _parse_slice(text, "{", "}", dict)
    if obj.found:
        return obj

    arr = _parse_slice(text, "[", "]", list)
    if arr.found:
        return arr

    return Extraction.absent(f"{obj.error}; {arr.error}")


def _field_prefix(field_name: str) -> str:
    return r'(?<![\w])["\']?' + re.escape(field_name) + r'["\']?\s*:\s*'


def scrape_field(text: Optional[str], field_name: str) -> str:
    """
    Find `field_name: "value"` in text and return the value.

    Returns "" when the pattern is absent.
    """
    if not text or not isinstance(text, str):
        return ""
    match = re.search(_field_prefix(field_name) + r'"((?:[^"\\]|\\.)*)"', text, re.DOTALL)
    if not match:
        return ""
    raw = match.group(1)
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw


def scrape_list(text: Optional[str], field_name: str) -> List[str]:
    """
    Find `field_name: [a, b, ...]` in text and return its elements.

    The bracket contents are split on commas and each element is stripped of
    whitespace and quotes, so elements that themselves contain commas are
    split too. Returns [] when the pattern is absent.
    """
    if not text or not isinstance(text, str):
        return []
    match = re.search(_field_prefix(field_name) + r'\[(.*?)\]', text, re.DOTALL)
    if not match:
        return []
    items = []
    for part in match.group(1).split(","):
        item = part.strip().strip('"\'').strip()
        if item:
            items.append(item)
    return items


def scrape_schema(text: Optional[str], schema: Type) -> dict:
    """Scrape every declared field of a ResponseSchema; keys without a match are left out."""
    scraped = {}
    for _, key, is_list in schema.json_fields():
        value = scrape_list(text, key) if is_list else scrape_field(text, key)
        if value:
            scraped[key] = value
    return scraped


def extract_structure(text: Optional[str], schema: Type) -> Extraction:
    """
    Recover a typed reply: strict JSON first, then field scraping, else absent.

    Args:
        text: Raw reply text
        schema: A ResponseSchema dataclass (e.g. HypothesisSuggestion)

    Returns:
        Extraction whose value is a schema instance when found
    """
    parsed = extract_json(text)
    if parsed.found and isinstance(parsed.value, dict):
        instance = schema.from_mapping(parsed.value)
        if instance is not None:
            return Extraction(value=instance, strategy=parsed.strategy)
        logger.debug(f"Parsed JSON has none of the {schema.__name__} keys")

    scraped = scrape_schema(text, schema)
    if scraped:
        logger.warning(
            f"Falling back to field scraping for {schema.__name__}: "
            f"recovered {sorted(scraped)} ({parsed.error or 'JSON did not match schema'})"
        )
        return Extraction(value=schema.from_mapping(scraped), strategy="scrape")

    return Extraction.absent(parsed.error or f"no {schema.__name__} fields found")
