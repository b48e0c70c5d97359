from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    """Validated, normalised form of one inbound search request."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    result_limit: int = Field(10, ge=1)
    content_type_selector: str = ""
    recency_window_days: Optional[int] = Field(None, gt=0)
    exact_phrase: Optional[str] = None
    hybrid_alpha: float = Field(0.8, ge=0.0, le=1.0)


class SparseVector(BaseModel):
    indices: List[int] = Field(default_factory=list)
    values: List[float] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.indices or not self.values


class IndexQueryPayload(BaseModel):
    """Body of one vector index query, serialised with the index's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    vector: List[float]
    sparse_vector: Optional[SparseVector] = Field(None, alias="sparseVector")
    top_k: int = Field(..., alias="topK", ge=1)
    filter: Optional[Dict[str, Dict[str, Any]]] = None
    namespace: Optional[str] = None
    include_metadata: bool = Field(True, alias="includeMetadata")

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class IndexMatch(BaseModel):
    id: str
    score: float = 0.0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ResultItem(BaseModel):
    """One flattened match. Raw metadata fields are carried as extra keys."""

    model_config = ConfigDict(extra="allow")

    id: str
    score: float
    title: Optional[Any] = None
    author: Optional[Any] = None
    url: Optional[Any] = None
    publication: Optional[Any] = None
    type: Optional[Any] = None
    date: Optional[Any] = None
    snippet: Optional[Any] = None
    abstract: Optional[Any] = None

    def to_response(self) -> Dict[str, Any]:
        """Unset aliases are omitted; raw metadata keys are kept as they are, nulls included."""
        extra = dict(self.model_extra or {})
        body = self.model_dump(exclude_none=True, exclude=set(extra))
        body.update(extra)
        return body
