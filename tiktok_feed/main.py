import logging

from aiohttp import web
from dotenv import load_dotenv

from .api import create_app
from .config import load_settings

logger = logging.getLogger("tiktok_feed")


def run() -> None:
    load_dotenv()
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving TikTok feed on %s:%s", settings.host, settings.port)
    web.run_app(create_app(settings), host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    run()
