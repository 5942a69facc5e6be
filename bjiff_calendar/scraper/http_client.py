"""
Async HTTP client for the Maoyan festival API.

Wraps a single aiohttp session for the duration of a run. Every request is a
plain GET returning JSON; transport and status failures are raised as
ApiError, undecodable bodies as ResponseShapeError. Nothing is retried.
"""

import asyncio
import logging
from typing import Any
from typing import Dict
from typing import Optional

import aiohttp

from bjiff_calendar.errors import ApiError
from bjiff_calendar.errors import ResponseShapeError
from bjiff_calendar.settings import Settings
from bjiff_calendar.settings import get_settings

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Thin JSON-over-GET client.

    Use as an async context manager so the underlying session is closed:

        async with HttpClient() as client:
            payload = await client.get_json(url, {"theatreId": "97"})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "HttpClient":
        if self._session is None:
            timeout = (
                aiohttp.ClientTimeout(total=self.settings.request_timeout)
                if self.settings.request_timeout
                else None
            )
            kwargs: Dict[str, Any] = {
                "headers": {
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                },
            }
            if timeout is not None:
                kwargs["timeout"] = timeout
            self._session = aiohttp.ClientSession(**kwargs)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Args:
            url: Absolute endpoint URL
            params: Query parameters

        Returns:
            The decoded JSON document

        Raises:
            ApiError: on connection failure or a non-2xx status
            ResponseShapeError: if the body is not JSON
        """
        if self._session is None:
            raise RuntimeError("HttpClient must be entered before use")

        try:
            async with self._session.get(url, params=params, proxy=self.settings.proxy_url) as resp:
                logger.debug(f"[FETCH] status={resp.status} url={resp.url}")
                if resp.status >= 400:
                    raise ApiError(url, resp.status, resp.reason or "")
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ResponseShapeError(url, f"invalid JSON ({e})") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ApiError(url, None, f"{type(e).__name__}: {e}") from e
