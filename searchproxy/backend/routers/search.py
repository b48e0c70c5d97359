"""
Search API router.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ...schema.search import QueryRequest
from ...search.config import SearchServiceConfig
from ...search.exceptions import ConfigurationError, SearchProxyException, UnexpectedError
from ...search.query_builder import build_query
from ...search.search_service import SearchService
from ...utils.logging import get_logger
from ..auth import get_search_config, require_caller

logger = get_logger(__name__)

# Global search service instance (initialized on startup)
_search_service: Optional[SearchService] = None

router = APIRouter(tags=["search"])


def get_search_service() -> SearchService:
    """Get search service instance."""
    if _search_service is None:
        raise ConfigurationError("Search service not initialized")
    return _search_service


def parse_search_query(
    q: Optional[str] = Query(None, description="Search query"),
    topK: Optional[str] = Query(None, description="Number of results"),
    content_type: Optional[str] = Query(None, alias="type", description="Content-type selector"),
    days: Optional[str] = Query(None, description="Only items published within the last N days"),
    alpha: Optional[str] = Query(None, description="Dense weight for hybrid queries"),
    exact: Optional[str] = Query(None, description="Exact phrase for hybrid lexical matching"),
    config: SearchServiceConfig = Depends(get_search_config),
) -> QueryRequest:
    """Validate the query parameters; resolved before the service so a bad request never needs one."""
    return build_query(config, q, top_k=topK, content_type=content_type, days=days, alpha=alpha, exact=exact)


@router.get("/search", dependencies=[Depends(require_caller)])
async def search(
    query: QueryRequest = Depends(parse_search_query),
    service: SearchService = Depends(get_search_service),
) -> JSONResponse:
    """
    Search the vector index.

    Returns a JSON array of flattened matches, each carrying `id`, `score`, the
    normalised metadata names and the raw metadata fields.
    """
    try:
        items = await service.search(query)
    except SearchProxyException:
        raise
    except Exception as e:
        logger.exception("search_failed", query=query.text)
        raise UnexpectedError(str(e)) from e

    return JSONResponse([item.to_response() for item in items])


# Startup and shutdown functions
async def initialize_search_service(config: SearchServiceConfig) -> None:
    """Initialize the search service on startup."""
    global _search_service

    _search_service = SearchService(config)
    logger.info(
        "search_service_initialized",
        content_type_mode=config.content_type_mode.value,
        recency_strategy=config.recency_strategy.value,
        hybrid=config.enable_hybrid,
        namespace=config.index_config.namespace,
    )


async def shutdown_search_service() -> None:
    """Cleanup search service on shutdown."""
    global _search_service

    if _search_service:
        try:
            await _search_service.close()
            logger.info("search_service_shutdown")
        finally:
            _search_service = None
