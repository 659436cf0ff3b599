"""VS response parser: turn a multi-response model output into records.

Each non-blank line is matched against the known line formats in priority
order (category, full, simple). The first match wins; a line matching none of
them becomes plain content if it is long enough to be meaningful. Parsing
never raises on model output.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from promptlab.core.composition.models import VSParseResult, VSResponse

logger = logging.getLogger(__name__)

MIN_PLAIN_LINE_LENGTH = 10

_CATEGORY_RE = re.compile(
    r"^Category:\s*(.+?)\s*\|\s*(.+?)\s*\(Probability:\s*(0\.\d+)"
    r"(?:\s*-\s*Category fit:\s*(.+?))?\)$",
    re.IGNORECASE,
)
_FULL_RE = re.compile(
    r"^(.+?)\s*\(Probability:\s*(0\.\d+)\s*-\s*(?:Rationale|Why rare):\s*(.+?)\)$",
    re.IGNORECASE,
)
_SIMPLE_RE = re.compile(r"^(.+?)\s*\(Probability:\s*(0\.\d+)\)$", re.IGNORECASE)


def _from_category(m: re.Match[str]) -> VSResponse:
    rationale = m.group(4)
    return VSResponse(
        content=m.group(2).strip(),
        probability=float(m.group(3)),
        rationale=rationale.strip() if rationale else None,
        category=m.group(1).strip(),
    )


def _from_full(m: re.Match[str]) -> VSResponse:
    return VSResponse(
        content=m.group(1).strip(),
        probability=float(m.group(2)),
        rationale=m.group(3).strip(),
    )


def _from_simple(m: re.Match[str]) -> VSResponse:
    return VSResponse(content=m.group(1).strip(), probability=float(m.group(2)))


LINE_FORMATS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], VSResponse]]] = [
    (_CATEGORY_RE, _from_category),
    (_FULL_RE, _from_full),
    (_SIMPLE_RE, _from_simple),
]


def parse_line(line: str) -> VSResponse | None:
    """Parse one line; ``None`` for blank or too-short unstructured lines."""
    text = line.strip()
    if not text:
        return None
    for pattern, build in LINE_FORMATS:
        match = pattern.match(text)
        if match:
            return build(match)
    if len(text) > MIN_PLAIN_LINE_LENGTH:
        return VSResponse(content=text)
    return None


def parse_vs_response(raw_text: str) -> VSParseResult:
    responses: list[VSResponse] = []
    for line in raw_text.splitlines():
        parsed = parse_line(line)
        if parsed is not None:
            responses.append(parsed)

    structured = sum(1 for r in responses if r.probability is not None)
    logger.debug(
        "Parsed VS response: %d records (%d structured)", len(responses), structured
    )
    return VSParseResult(responses=responses, raw_response=raw_text)
