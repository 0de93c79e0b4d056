"""
Best-effort extraction of a JSON object from raw provider output.
"""
import re
from typing import Optional

from app.core.exceptions import NoJsonFoundError

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_JSON_LABEL_RE = re.compile(r"^\s*JSON:\s*", re.IGNORECASE)
_THINK_BLOCK_RE = re.compile(r"<(think|thinking)>.*?</\1>", re.IGNORECASE | re.DOTALL)


def sanitize_response(raw: Optional[str]) -> str:
    """
    Strip formatting noise and slice out the JSON object candidate.

    Removes markdown code fences, a leading ``JSON:`` label and
    ``<think>`` reasoning blocks, then returns the text between the first
    ``{`` and the last ``}``. The candidate is not validated here.

    Raises:
        NoJsonFoundError: If no ``{``/``}`` pair is present
    """
    text = _CODE_FENCE_RE.sub("", raw or "")
    text = _JSON_LABEL_RE.sub("", text)
    text = _THINK_BLOCK_RE.sub("", text)

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise NoJsonFoundError("No valid JSON structure found in AI response")

    return text[start:end + 1]
