from skinfetch.services.textures.errors import LoaderError
from skinfetch.services.textures.loader import TextureLoader
from skinfetch.services.textures.service import SkinService
from skinfetch.services.textures.types import TextureProperty

__all__ = ["LoaderError", "TextureLoader", "SkinService", "TextureProperty"]
