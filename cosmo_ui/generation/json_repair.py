"""
Best-effort extraction of a component JSON object from raw LLM text.
"""

import json
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cosmo_ui.exceptions import AIInvalidResponseError
from cosmo_ui.setup_logging import get_logger

logger = get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json|javascript|js)?\s*", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*(?=[}\]])")


def strip_code_fences(text: str) -> str:
    t = text.strip()
    # Remove triple backtick fences optionally with language label
    if t.startswith("```"):
        t = _FENCE_OPEN.sub("", t)
    if t.endswith("```"):
        t = t[:-3].strip()
    return t


def iter_balanced_objects(text: str) -> Iterator[str]:
    """Yield every top-level ``{...}`` block, respecting string literals.

    Single pass: a brace left open at the end of the text does not hide the
    complete blocks nested inside it, which are yielded in order at the end.
    """
    # Each open frame: (start index, completed child spans)
    stack: List[Tuple[int, List[Tuple[int, int]]]] = []
    in_string = False
    escaped = False
    for j, ch in enumerate(text):
        if not stack:
            if ch == "{":
                stack.append((j, []))
            continue
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            stack.append((j, []))
        elif ch == "}":
            start, _ = stack.pop()
            if stack:
                stack[-1][1].append((start, j + 1))
            else:
                yield text[start:j + 1]

    # Unbalanced tail: fall back to the complete blocks inside the open braces
    for _, children in stack:
        for start, end in children:
            yield text[start:end]


def _decode(block: str) -> Optional[Dict[str, Any]]:
    for candidate in (block, _TRAILING_COMMA.sub("", block)):
        try:
            data = json.loads(candidate)
        except (ValueError, RecursionError):
            # RecursionError: nesting deeper than the decoder can follow
            continue
        if isinstance(data, dict):
            return data
    return None


def extract_json_object(raw_text: Any) -> Dict[str, Any]:
    """Return the first well-formed JSON object found in ``raw_text``.

    Raises:
        AIInvalidResponseError: when no object can be decoded.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise AIInvalidResponseError("Empty AI response", raw_text=raw_text if isinstance(raw_text, str) else None)

    cleaned = strip_code_fences(raw_text)
    for block in iter_balanced_objects(cleaned):
        data = _decode(block)
        if data is not None:
            return data
        logger.debug(f"Skipping undecodable JSON block ({len(block)} chars)")

    raise AIInvalidResponseError("No JSON object found in AI response", raw_text=raw_text)
