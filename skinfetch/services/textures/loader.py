import asyncio
import json
import uuid
from typing import Any, Optional

import aiohttp

from skinfetch.core.config import DEFAULT_SESSION_SERVER_URL
from skinfetch.services.base import BaseService
from skinfetch.services.textures.errors import LoaderError
from skinfetch.services.textures.types import TextureProperty
from skinfetch.utils.logger import logger

log = logger.getChild("loader")


class TextureLoader(BaseService):
    """Fetches the signed texture property of a profile from the session server.

    One GET per call and no retries; the session server allows roughly one
    request per profile per minute, so callers are expected to cache.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SESSION_SERVER_URL,
        request_timeout: float = 10.0,
    ):
        """Initialize the loader.

        Args:
            base_url: Profile endpoint, the undashed UUID is appended to it.
            request_timeout: Total timeout of one request in seconds.
        """
        super().__init__()
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Open the shared HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        self._started = True
        log.info("Texture loader started")

    async def stop(self) -> None:
        """Close the shared HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
        self._started = False

    async def is_healthy(self) -> bool:
        return self._session is not None and not self._session.closed

    def profile_url(self, key: uuid.UUID) -> str:
        return f"{self.base_url}{key.hex}"

    async def __call__(self, key: uuid.UUID) -> TextureProperty:
        return await self.fetch(key)

    async def fetch(self, key: uuid.UUID) -> TextureProperty:
        """Fetch the first profile property for ``key``.

        Raises:
            LoaderError: On network failure, a non-200 status or a body
                without a usable ``properties`` array.
        """
        if self._session is not None and not self._session.closed:
            return await self._fetch(self._session, key)

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._fetch(session, key)

    async def _fetch(
        self, session: aiohttp.ClientSession, key: uuid.UUID
    ) -> TextureProperty:
        url = self.profile_url(key)
        params = {"unsigned": "false"}
        headers = {"Content-Type": "application/json"}

        try:
            async with session.get(url, params=params, headers=headers) as resp:
                if resp.status != 200:
                    raise LoaderError(
                        key, "Session server returned an error", status=resp.status
                    )
                try:
                    body = await resp.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    raise LoaderError(
                        key, f"Malformed profile response: {e}", status=resp.status
                    ) from e
                return _first_property(key, body, resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LoaderError(key, f"Profile request failed: {e!r}") from e


def _first_property(key: uuid.UUID, body: Any, status: int) -> TextureProperty:
    if not isinstance(body, dict):
        raise LoaderError(key, "Profile response is not a JSON object", status=status)

    properties = body.get("properties")
    if not isinstance(properties, list) or not properties:
        raise LoaderError(key, "Profile has no properties", status=status)

    first = properties[0]
    if not isinstance(first, dict) or "name" not in first or "value" not in first:
        raise LoaderError(key, "Profile property is malformed", status=status)

    return TextureProperty.from_dict(first)
