"""
Hybrid dense + sparse query payload construction.
"""

from typing import List, Optional

from ..schema.search import IndexQueryPayload, QueryRequest, SparseVector
from .config import SearchServiceConfig
from .filters import MetadataFilter


def wants_sparse(query: QueryRequest, config: SearchServiceConfig) -> bool:
    """Sparse embedding is requested only when hybrid mode is on and an exact phrase was given."""
    return config.enable_hybrid and bool(query.exact_phrase and query.exact_phrase.strip())


def scale_dense(vector: List[float], alpha: float) -> List[float]:
    return [value * alpha for value in vector]


def build_payload(
    query: QueryRequest,
    dense: List[float],
    sparse: Optional[SparseVector],
    metadata_filter: MetadataFilter,
    namespace: Optional[str] = None,
) -> IndexQueryPayload:
    """
    Assemble the index query.

    With a non-empty sparse vector the dense vector is weighted by alpha and the sparse
    vector is attached unscaled; otherwise the dense vector goes out alone, unscaled.
    """
    if sparse is not None and not sparse.is_empty():
        vector = scale_dense(dense, query.hybrid_alpha)
    else:
        vector = list(dense)
        sparse = None

    return IndexQueryPayload(
        vector=vector,
        sparse_vector=sparse,
        top_k=query.result_limit,
        filter=metadata_filter.to_dict() if len(metadata_filter) else None,
        namespace=namespace or None,
        include_metadata=True,
    )
