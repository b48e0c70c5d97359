"""
Shared aiohttp plumbing for the outbound providers.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from ..search.exceptions import UnexpectedError, UpstreamFailure, UpstreamTimeout
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ProviderSession:
    """Lazily created aiohttp session with a bounded total timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def get(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self.session

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()


async def post_json(
    provider: ProviderSession,
    provider_name: str,
    url: str,
    headers: Dict[str, str],
    body: Dict[str, Any],
) -> Any:
    """
    POST a JSON body and return the decoded JSON response.

    Raises:
        UpstreamFailure: non-2xx answer, with the provider's body as detail
        UpstreamTimeout: no answer within the session timeout
        UnexpectedError: connection errors or a body that is not JSON
    """
    session = await provider.get()
    try:
        async with session.post(url, headers={**headers, "Content-Type": "application/json"}, json=body) as response:
            text = await response.text()
            payload = _decode(text)
            if response.status < 200 or response.status >= 300:
                logger.error("upstream_failure", provider=provider_name, status=response.status)
                raise UpstreamFailure(
                    provider_name,
                    f"{provider_name}: {response.status}",
                    status=response.status,
                    detail=payload if payload is not None else text,
                )
            if payload is None:
                raise UnexpectedError(f"{provider_name} returned a non-JSON response")
            return payload
    except asyncio.TimeoutError as e:
        logger.error("upstream_timeout", provider=provider_name, timeout=provider.timeout)
        raise UpstreamTimeout(provider_name, provider.timeout) from e
    except aiohttp.ClientError as e:
        logger.error("upstream_connection_error", provider=provider_name, error=str(e))
        raise UnexpectedError(f"{provider_name} request failed: {e}") from e


def _decode(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None
