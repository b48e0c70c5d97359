"""
Flattening of index matches into client-facing result items.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..schema.search import IndexMatch, ResultItem

# Raw metadata keys consulted, in order, for each normalised output name.
FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "title": ("title", "Title", "name"),
    "author": ("author", "Author", "authors"),
    "url": ("url", "URL", "Url", "link"),
    "publication": ("publication", "Publication", "source"),
    "type": ("final_type", "Type", "type"),
    "date": ("date_of_publication", "Date", "date", "published_at"),
    "snippet": ("snippet", "Snippet", "text"),
}

SUMMARY_KEYS: Sequence[str] = ("ai_summary", "AI Summary", "AI_Summary", "summary", "Summary", "abstract")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def first_present(metadata: Mapping[str, Any], keys: Sequence[str]) -> Optional[Any]:
    for key in keys:
        value = metadata.get(key)
        if not _is_blank(value):
            return value
    return None


def normalize_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for name, keys in FIELD_ALIASES.items():
        value = first_present(metadata, keys)
        if value is not None:
            normalized[name] = value

    abstract = first_present(metadata, SUMMARY_KEYS)
    if abstract is None:
        abstract = normalized.get("snippet")
    if abstract is not None:
        normalized["abstract"] = abstract
    return normalized


def map_match(match: IndexMatch) -> ResultItem:
    """
    Build one result item: raw metadata first, then the normalised aliases, then
    id and score, so raw keys never shadow the computed names.
    """
    metadata = dict(match.metadata or {})
    normalized = normalize_metadata(metadata)

    item: Dict[str, Any] = {**metadata, **normalized}
    item["id"] = match.id
    item["score"] = match.score
    return ResultItem.model_validate(item)


def map_matches(matches: List[IndexMatch]) -> List[ResultItem]:
    return [map_match(match) for match in matches]
