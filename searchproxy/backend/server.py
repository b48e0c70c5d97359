from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..schema import ErrorResponse, HealthStatus
from ..search.config import SearchServiceConfig
from ..search.exceptions import (
    ConfigurationError,
    SearchProxyException,
    UnexpectedError,
    UpstreamFailure,
    UpstreamTimeout,
)
from ..utils.logging import get_logger, setup_logging
from .routers.search import initialize_search_service, shutdown_search_service
from .routers.search import router as search_router

logger = get_logger(__name__)


def error_body(exc: SearchProxyException, config: SearchServiceConfig) -> Dict[str, Any]:
    """Render an exception as `{error, detail?}`; provider detail is only echoed when enabled."""
    if isinstance(exc, UpstreamTimeout):
        response = ErrorResponse(error="Upstream timeout", detail=exc.provider)
    elif isinstance(exc, UpstreamFailure):
        detail = exc.detail if config.expose_upstream_detail else None
        response = ErrorResponse(error=exc.provider, detail=detail)
    elif isinstance(exc, ConfigurationError):
        response = ErrorResponse(error="Server misconfigured")
    elif isinstance(exc, UnexpectedError):
        detail = exc.message if config.expose_upstream_detail else None
        response = ErrorResponse(error="Unexpected error", detail=detail)
    else:
        response = ErrorResponse(error=exc.message)
    return response.model_dump(exclude_none=True)


def create_app(config: Optional[SearchServiceConfig] = None) -> FastAPI:
    """Build the FastAPI application around one immutable configuration."""
    config = config or SearchServiceConfig.from_environment()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        # Startup
        setup_logging(config.log_level, config.json_logs)
        await initialize_search_service(config)
        yield
        # Shutdown
        await shutdown_search_service()

    app = FastAPI(title="Search Proxy", lifespan=lifespan)
    app.state.config = config

    app.include_router(search_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(SearchProxyException)
    async def handle_search_proxy_exception(_: Request, exc: SearchProxyException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", error_type=type(exc).__name__, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc, config))

    @app.get("/healthz")
    async def health_check() -> HealthStatus:
        return HealthStatus(ok=True)

    return app
