from .common import ErrorResponse, HealthStatus
from .search import IndexMatch, IndexQueryPayload, QueryRequest, ResultItem, SparseVector

__all__ = [
    # common
    "ErrorResponse",
    "HealthStatus",
    # search
    "QueryRequest",
    "SparseVector",
    "IndexQueryPayload",
    "IndexMatch",
    "ResultItem",
]
