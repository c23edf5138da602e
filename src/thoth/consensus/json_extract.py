"""Pull a JSON object out of free-form model output.

Models without a native JSON mode (Claude on ``rawPredict``) tend to wrap
the object in a markdown fence or surround it with prose. Schema
validation happens afterwards, in the caller.
"""

from __future__ import annotations

import json
import re
from typing import Any

from thoth.core.errors import ParseError

_FENCED_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
# One level of nesting is enough for a flat verdict object
_BARE_OBJECT_RE = re.compile(r"\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}", re.DOTALL)


def _load_object(candidate: str) -> dict[str, Any] | None:
    try:
        result = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return result if isinstance(result, dict) else None


def extract_json(text: str) -> dict[str, Any]:
    """Return the first JSON object found in *text*.

    Tries, in order: the whole text, a fenced ```json block, then the
    first bare ``{...}`` span.

    Raises:
        ParseError: If *text* is blank or holds no JSON object.
    """
    stripped = text.strip()
    if not stripped:
        msg = "Judge output is empty"
        raise ParseError(msg)

    found = _load_object(stripped)
    if found is not None:
        return found

    for pattern, group in ((_FENCED_RE, 1), (_BARE_OBJECT_RE, 0)):
        match = pattern.search(stripped)
        if match:
            found = _load_object(match.group(group))
            if found is not None:
                return found

    msg = f"No JSON object found in judge output: {stripped[:200]}"
    raise ParseError(msg)
