"""
JSON Utilities for LLM Response Parsing.

LLM providers do not always honor "JSON only" instructions. These helpers
normalize a raw response into a JSON candidate string:
- Markdown code fences (```json ... ``` and ``` ... ```) anywhere in the text
- Prose before or after the object

Parsing is strict (json.loads only). Malformed JSON is reported to the
caller, never repaired.
"""

import json
import re
from typing import Any, Dict, Optional

# Labeled fence opener (```json, ```JSON) with trailing whitespace, then any bare fence
_LABELED_FENCE_RE = re.compile(r"```json\s*", re.IGNORECASE)
_BARE_FENCE_RE = re.compile(r"```\s*")
# Greedy: first "{" through last "}"
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def strip_markdown_blocks(text: str) -> str:
    """
    Remove markdown code fence markers from text.

    Unlike a prefix/suffix strip this removes fences wherever they appear,
    so "Here you go:\\n```json\\n{...}\\n```\\nThanks" loses both markers.

    Args:
        text: Text that may contain fence markers

    Returns:
        Text with fence markers removed and surrounding whitespace trimmed
    """
    result = _LABELED_FENCE_RE.sub("", text.strip())
    result = _BARE_FENCE_RE.sub("", result)
    return result.strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Extract the outermost JSON object candidate from text.

    Args:
        text: Text that may contain a JSON object among other content

    Returns:
        Substring from the first '{' to the last '}', or None if there is none
    """
    match = _JSON_OBJECT_RE.search(text)
    if match:
        return match.group(0)
    return None


def parse_llm_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of an LLM response.

    Args:
        text: Raw LLM response text

    Returns:
        Parsed dictionary

    Raises:
        ValueError: If the text is empty, holds no object, or the object is not valid JSON

    Example:
        >>> parse_llm_json('Sure!\\n```json\\n{"key": "value"}\\n```')
        {'key': 'value'}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    cleaned = strip_markdown_blocks(text)
    candidate = extract_json_object(cleaned)
    if candidate is None:
        raise ValueError(f"No JSON object found in text: {cleaned[:200]}")

    try:
        parsed = json.loads(candidate)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the int-to-str digit limit
        raise ValueError(f"Invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed
