"""
Inbound caller authentication.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, Request

from ..search.config import SearchServiceConfig
from ..search.exceptions import Unauthorized
from ..utils.logging import get_logger

logger = get_logger(__name__)


def get_search_config(request: Request) -> SearchServiceConfig:
    """Configuration the running app was created with."""
    return request.app.state.config


def extract_credential(x_api_key: Optional[str], authorization: Optional[str]) -> Optional[str]:
    if x_api_key and x_api_key.strip():
        return x_api_key.strip()
    if authorization:
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return None


async def require_caller(
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
    config: SearchServiceConfig = Depends(get_search_config),
) -> None:
    """Reject the request unless it carries the configured credential. No-op when none is configured."""
    if not config.api_key:
        return

    credential = extract_credential(x_api_key, authorization)
    if credential is None or not secrets.compare_digest(credential.encode(), config.api_key.encode()):
        logger.warning("unauthorized_request", credential_present=credential is not None)
        raise Unauthorized()
