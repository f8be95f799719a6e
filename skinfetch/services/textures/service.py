import uuid
from typing import Dict, Iterable, Optional

from skinfetch.core.config import AppConfig
from skinfetch.services.base import BaseService
from skinfetch.services.cache.manager import SingleFlightCache
from skinfetch.services.textures.errors import LoaderError
from skinfetch.services.textures.loader import TextureLoader
from skinfetch.services.textures.types import TextureProperty
from skinfetch.utils.logger import logger

log = logger.getChild("skins")


class SkinService(BaseService):
    """Resolves signed skin textures for player UUIDs through a shared cache.

    A fetched texture is kept for ``cache_ttl_seconds`` after its last use
    (30 minutes by default). The session server rejects repeat lookups of the
    same profile within about a minute, so the window should not go lower.
    """

    def __init__(
        self,
        settings: AppConfig,
        loader: Optional[TextureLoader] = None,
        cache: Optional[SingleFlightCache[uuid.UUID, TextureProperty]] = None,
    ):
        """Initialize the skin service.

        Args:
            settings: Application settings.
            loader: Loader to use, built from ``settings`` when omitted.
            cache: Cache to use, built around ``loader`` when omitted.
        """
        super().__init__()
        self.settings = settings
        self.loader = loader or TextureLoader(
            base_url=settings.session_server_url,
            request_timeout=settings.request_timeout,
        )
        self.cache = cache or SingleFlightCache(
            self.loader,
            max_size=settings.cache_max_size,
            ttl=float(settings.cache_ttl_seconds),
        )

    async def start(self) -> None:
        await self.loader.start()
        await self.cache.start()
        self._started = True
        log.info(
            "Skin service started (max_size=%d, ttl=%ss)",
            self.cache.max_size,
            self.cache.ttl,
        )

    async def stop(self) -> None:
        await self.cache.stop()
        await self.loader.stop()
        self._started = False
        log.info("Skin service stopped")

    async def is_healthy(self) -> bool:
        return self._started and await self.loader.is_healthy()

    async def fetch_skins(
        self, uuids: Iterable[Optional[uuid.UUID]]
    ) -> Dict[uuid.UUID, TextureProperty]:
        """Fetch textures for many players; failed or None UUIDs are left out."""
        self.ensure_started()
        return await self.cache.get_all(uuids)

    async def get_skin_of(self, player_id: uuid.UUID) -> Optional[TextureProperty]:
        """Fetch the texture of one player, or None if it could not be loaded."""
        self.ensure_started()
        try:
            return await self.cache.get(player_id)
        except LoaderError:
            return None
