"""JSON extraction utilities for reasoning engine output."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from seek.logging import get_logger

logger = get_logger(__name__)


_FENCE_JSON_RE = re.compile(r"```json\s*\n?(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)
_FENCE_ANY_RE = re.compile(r"```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```", re.DOTALL)


def unwrap_fenced_block(text: str) -> str:
    """Return the body of the first markdown code fence, or the stripped text itself."""

    cleaned = (text or "").strip()
    m = _FENCE_JSON_RE.search(cleaned) or _FENCE_ANY_RE.search(cleaned)
    if m:
        return m.group(1).strip()
    return cleaned


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Extract one JSON object from free text.

    Strategies, strict to lenient:
        1. Unwrap a fenced block (```json or plain ```) and parse it.
        2. Parse the whole text.
        3. Decode from each ``{`` in turn and return the first complete object.

    Returns ``None`` instead of raising when nothing parses.
    """

    if not text:
        return None

    candidates = [unwrap_fenced_block(text), text.strip()]
    for candidate in candidates:
        if candidate.startswith("{") and candidate.endswith("}"):
            try:
                obj = json.loads(candidate)
            except json.JSONDecodeError:
                logger.debug("extract_json_object: candidate parse failed")
                continue
            if isinstance(obj, dict):
                return obj

    decoder = json.JSONDecoder()
    cleaned = text.strip()
    start = cleaned.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(cleaned, start)
        except json.JSONDecodeError:
            start = cleaned.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = cleaned.find("{", start + 1)

    return None
