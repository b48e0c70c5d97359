"""
Translation of user-facing facets into the vector index's metadata filter dialect.

Content types are matched against the labels stored in the index, recency windows
against the stored publication date. The stored data is not normalised: multi-type
items carry one concatenated label in arbitrary order, and publication dates are
entered in several literal formats.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from itertools import combinations, permutations
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..schema.search import QueryRequest
from ..utils.logging import get_logger
from .config import ContentTypeMode, RecencyStrategy, SearchServiceConfig

logger = get_logger(__name__)


class MetadataField(str, Enum):
    """Metadata fields the proxy is allowed to filter on."""

    FINAL_TYPE = "final_type"
    TYPE = "Type"
    DATE_OF_PUBLICATION = "date_of_publication"


@dataclass(frozen=True)
class In:
    values: Tuple[str, ...]

    def to_dict(self) -> Dict[str, List[str]]:
        return {"$in": list(self.values)}


@dataclass(frozen=True)
class NotIn:
    values: Tuple[str, ...]

    def to_dict(self) -> Dict[str, List[str]]:
        return {"$nin": list(self.values)}


@dataclass(frozen=True)
class Gte:
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"$gte": self.value}


Predicate = Union[In, NotIn, Gte]


class MetadataFilter:
    """
    Conjunction of per-field predicates. A field carries at most one predicate.
    """

    def __init__(self) -> None:
        self._predicates: Dict[MetadataField, Predicate] = {}

    def add(self, field: MetadataField, predicate: Predicate) -> "MetadataFilter":
        if field in self._predicates:
            raise ValueError(f"Field {field.value!r} already has a predicate")
        self._predicates[field] = predicate
        return self

    def get(self, field: MetadataField) -> Optional[Predicate]:
        return self._predicates.get(field)

    def __len__(self) -> int:
        return len(self._predicates)

    def __contains__(self, field: object) -> bool:
        return field in self._predicates

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        return {field.value: predicate.to_dict() for field, predicate in self._predicates.items()}


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


# ---- Content type: token mode ----

ESSAY = "Essay"
PODCAST = "Podcast"
VIDEO = "Video"
PODCAST_VIDEO = "Podcast, Video"  # combo label stored on items tagged as both

TOKEN_LABELS: Dict[str, Tuple[str, ...]] = {
    "essay": (ESSAY,),
    "essays": (ESSAY,),
    "podcast": (PODCAST, PODCAST_VIDEO),
    "podcasts": (PODCAST, PODCAST_VIDEO),
    "video": (VIDEO, PODCAST_VIDEO),
    "videos": (VIDEO, PODCAST_VIDEO),
}


def parse_type_tokens(selector: str) -> List[str]:
    """Split a selector like "podcast,video" or "podcast/video" into lowercase tokens."""
    raw = selector.strip().lower().replace("/", ",")
    return [token.strip() for token in raw.split(",") if token.strip()]


def token_type_predicate(selector: str) -> Optional[In]:
    """
    Map content-type tokens to the labels stored under `final_type`.

    `all` anywhere in the selector, or no recognised token, means no predicate.
    """
    tokens = parse_type_tokens(selector)
    if "all" in tokens:
        return None

    labels: List[str] = []
    for token in tokens:
        labels.extend(TOKEN_LABELS.get(token, ()))

    return In(_unique(labels)) if labels else None


# ---- Content type: closed-label mode ----

ALL_CONTENT_TYPES = "All Content Types"
ESSAYS_ONLY = "Essays Only"
PODCASTS_VIDEOS_ONLY = "Podcasts/Videos Only"

ESSAY_ONLY_TAGS: Tuple[str, ...] = ("Essay", "Essays")


def essay_label_permutations() -> Tuple[str, ...]:
    """
    Every stored label that contains Essay: each subset of {Podcast, Video} joined with
    Essay, in every order.
    """
    others = (PODCAST, VIDEO)
    labels: List[str] = []
    for size in range(len(others) + 1):
        for extra in combinations(others, size):
            for ordering in permutations((ESSAY,) + extra):
                labels.append(", ".join(ordering))
    return _unique(labels)


def label_type_predicate(selector: str) -> Optional[Predicate]:
    """
    Map a closed-set facet label to a predicate on `Type`.

    "Podcasts/Videos Only" only excludes essay-only tags, so items tagged with Essay and
    another type still match it while also matching "Essays Only".
    """
    label = selector.strip().lower()
    if not label or label == ALL_CONTENT_TYPES.lower():
        return None
    if label == ESSAYS_ONLY.lower():
        return In(essay_label_permutations())
    if label == PODCASTS_VIDEOS_ONLY.lower():
        return NotIn(ESSAY_ONLY_TAGS)

    logger.warning("unknown_content_type_label", label=selector)
    return None


# ---- Recency ----

DateFormatter = Callable[[date], str]

# Literal date renderings observed in the index, by name.
DATE_FORMATS: Dict[str, DateFormatter] = {
    "YYYY-MM-DD": lambda d: f"{d.year:04d}-{d.month:02d}-{d.day:02d}",
    "YYYY-M-D": lambda d: f"{d.year:04d}-{d.month}-{d.day}",
    "YYYY/MM/DD": lambda d: f"{d.year:04d}/{d.month:02d}/{d.day:02d}",
    "YYYY/M/D": lambda d: f"{d.year:04d}/{d.month}/{d.day}",
    "MM/DD/YYYY": lambda d: f"{d.month:02d}/{d.day:02d}/{d.year:04d}",
    "M/D/YYYY": lambda d: f"{d.month}/{d.day}/{d.year:04d}",
}


def utc_today(now: Optional[datetime] = None) -> date:
    """Current UTC calendar day."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(timezone.utc).date()


def window_days(days: int, today: date) -> List[date]:
    """Calendar days from `today - days` through `today`, both inclusive."""
    start = today - timedelta(days=days)
    return [start + timedelta(days=offset) for offset in range(days + 1)]


def enumerate_date_literals(days: int, today: date) -> Tuple[str, ...]:
    literals: List[str] = []
    for day in window_days(days, today):
        for formatter in DATE_FORMATS.values():
            literals.append(formatter(day))
    return _unique(literals)


def recency_predicate(days: int, strategy: RecencyStrategy, today: date) -> Predicate:
    if strategy is RecencyStrategy.ENUMERATE:
        return In(enumerate_date_literals(days, today))
    cutoff = today - timedelta(days=days)
    return Gte(cutoff.isoformat())


# ---- Composition ----


def build_metadata_filter(
    query: QueryRequest,
    config: SearchServiceConfig,
    today: Optional[date] = None,
) -> MetadataFilter:
    """
    Build the metadata filter for one query.

    Args:
        query: Normalised query
        config: Search configuration selecting content-type mode and recency strategy
        today: UTC calendar day the recency window ends on (defaults to now)
    """
    metadata_filter = MetadataFilter()

    if query.content_type_selector:
        if config.content_type_mode is ContentTypeMode.LABELS:
            label_predicate = label_type_predicate(query.content_type_selector)
            if label_predicate is not None:
                metadata_filter.add(MetadataField.TYPE, label_predicate)
        else:
            token_predicate = token_type_predicate(query.content_type_selector)
            if token_predicate is not None:
                metadata_filter.add(MetadataField.FINAL_TYPE, token_predicate)

    if query.recency_window_days:
        metadata_filter.add(
            MetadataField.DATE_OF_PUBLICATION,
            recency_predicate(query.recency_window_days, config.recency_strategy, today or utc_today()),
        )

    return metadata_filter
