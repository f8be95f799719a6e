from skinfetch.core.config import AppConfig, load_config
from skinfetch.services.cache.manager import SingleFlightCache
from skinfetch.services.textures import (
    LoaderError,
    SkinService,
    TextureLoader,
    TextureProperty,
)

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "load_config",
    "SingleFlightCache",
    "LoaderError",
    "SkinService",
    "TextureLoader",
    "TextureProperty",
]
