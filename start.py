# start.py
import asyncio
import json
import sys
import uuid
from typing import List

from skinfetch.core.config import load_config
from skinfetch.services.manager import ServiceManager
from skinfetch.services.textures.service import SkinService
from skinfetch.utils.logger import configure_logging, logger


def parse_uuids(args: List[str]) -> List[uuid.UUID]:
    """Parse dashed or undashed UUIDs, skipping anything unparsable."""
    uuids = []
    for arg in args:
        try:
            uuids.append(uuid.UUID(arg))
        except ValueError:
            logger.warning("Ignoring invalid UUID: %s", arg)
    return uuids


async def main(args: List[str]) -> int:
    """Fetch and print the textures of the given player UUIDs."""
    config = load_config()
    configure_logging(config.log_level, config.log_file)

    services = ServiceManager()
    skins = services.add("skins", SkinService(config))

    try:
        await services.start_all()
        textures = await skins.fetch_skins(parse_uuids(args))
        print(
            json.dumps(
                {str(k): v.to_dict() for k, v in textures.items()}, indent=2
            )
        )
        return 0 if textures else 1

    except Exception as e:
        logger.error("An error occurred while fetching skins: %s", str(e))
        logger.error("Full error details:", exc_info=True)
        raise

    finally:
        await services.stop_all()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python start.py <uuid> [<uuid> ...]", file=sys.stderr)
        sys.exit(2)
    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        logger.info("Shutdown initiated by user")
