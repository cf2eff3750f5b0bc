"""Lenient JSON-object extraction for model replies."""
import json
import re
from typing import Any, Dict

_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)
_CONTROL = re.compile(r"[\x00-\x09\x0b-\x1f\x7f]")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the JSON object in a model reply. Raises ValueError otherwise.

    Tolerates a markdown code fence, stray control characters, trailing
    commas and an object double-encoded as a JSON string.
    """
    body = _CONTROL.sub("", text or "").strip()
    fenced = _FENCE.match(body)
    if fenced:
        body = fenced.group(1).strip()
    if not body:
        raise ValueError("Empty model response")

    try:
        obj = json.loads(body)
    except json.JSONDecodeError:
        obj = json.loads(_TRAILING_COMMA.sub(r"\1", body))

    if isinstance(obj, str):
        obj = json.loads(obj)
    if not isinstance(obj, dict):
        raise ValueError("Expected a JSON object")
    return obj
