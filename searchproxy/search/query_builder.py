"""
Query builder: validates raw request parameters into a QueryRequest.
"""

import math
import re
from typing import Optional

from ..schema.search import QueryRequest
from .config import SearchServiceConfig
from .exceptions import InvalidRequest


def parse_top_k(raw: Optional[str], default: int, maximum: int) -> int:
    """Parse topK; absent, unparseable or non-positive values fall back to the default."""
    value = _parse_int(raw)
    if value is None or value <= 0:
        value = default
    return max(1, min(value, maximum))


def parse_days(raw: Optional[str]) -> Optional[int]:
    """Parse the recency window; anything but a strictly positive integer means no window."""
    value = _parse_int(raw)
    if value is None or value <= 0:
        return None
    return value


def parse_alpha(raw: Optional[str], default: float) -> float:
    value = default
    if raw is not None and raw.strip():
        try:
            value = float(raw.strip())
        except ValueError:
            value = default
    if not math.isfinite(value):
        value = default
    return min(max(value, 0.0), 1.0)


def parse_phrase(raw: Optional[str]) -> Optional[str]:
    phrase = (raw or "").strip()
    return phrase or None


def build_query(
    config: SearchServiceConfig,
    q: Optional[str],
    top_k: Optional[str] = None,
    content_type: Optional[str] = None,
    days: Optional[str] = None,
    alpha: Optional[str] = None,
    exact: Optional[str] = None,
) -> QueryRequest:
    """
    Validate and normalise the raw `/search` parameters.

    Args:
        config: Process-wide search configuration
        q: Free-text query (required)
        top_k: Requested result count
        content_type: Content-type selector, interpreted later per the configured mode
        days: Recency window in days
        alpha: Dense weight for hybrid queries
        exact: Exact phrase for sparse matching

    Returns:
        Normalised QueryRequest

    Raises:
        InvalidRequest: If the query text is missing or blank
    """
    text = (q or "").strip()
    if not text:
        raise InvalidRequest("Missing q")

    return QueryRequest(
        text=text,
        result_limit=parse_top_k(top_k, config.default_top_k, config.max_top_k),
        content_type_selector=(content_type or "").strip(),
        recency_window_days=parse_days(days),
        exact_phrase=parse_phrase(exact),
        hybrid_alpha=parse_alpha(alpha, config.default_alpha),
    )


_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def _parse_int(raw: Optional[str]) -> Optional[int]:
    # leading digits only: "7.5" -> 7, "30d" -> 30, "1_0" -> 1
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None
