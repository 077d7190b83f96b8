"""Parsing of free-text model replies that were asked to contain JSON."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

_BRACED_PATTERN = re.compile(r"\{[\s\S]*\}")
_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.I)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the span from the first ``{`` to the last ``}`` as a JSON object.

    Raises:
        ValueError: If no braced span exists, it is not valid JSON (including
            nesting too deep to decode) or it is not an object.
    """

    match = _BRACED_PATTERN.search(text or "")
    if not match:
        raise ValueError("No JSON found in response")
    try:
        parsed = json.loads(match.group(0))
    except RecursionError as exc:
        raise ValueError("JSON reply is nested too deeply") from exc
    if not isinstance(parsed, dict):
        raise ValueError("JSON reply is not an object")
    return parsed


def parse_strict_json(text: str) -> Optional[Dict[str, Any]]:
    """Parse a reply that must be exactly one JSON object.

    Markdown code fences are tolerated; anything else returns ``None``.
    """

    if not text:
        return None
    stripped = _CODE_FENCE_PATTERN.sub("", text.strip())
    try:
        parsed = json.loads(stripped)
    except (json.JSONDecodeError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


__all__ = ["extract_json_object", "parse_strict_json"]
