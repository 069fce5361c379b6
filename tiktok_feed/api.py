import logging
from typing import Optional

from aiohttp import web

from .carousel import CarouselView
from .config import Settings
from .scraper import TikTokScraper
from .utils import parse_count

logger = logging.getLogger("tiktok_feed.api")

ERROR_MESSAGE = "Failed to fetch TikTok videos"

SETTINGS_KEY = web.AppKey("settings", Settings)
SCRAPER_KEY = web.AppKey("scraper", TikTokScraper)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{carousel}
{scripts}
</body>
</html>
"""


async def tiktoks_handler(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    scraper = request.app[SCRAPER_KEY]
    username = request.query.get("user") or settings.default_user
    count = parse_count(request.query.get("count"), default=settings.default_count)
    try:
        feed = await scraper.fetch_videos(username, count)
    except Exception:
        logger.exception("Error fetching TikTok videos for @%s", username)
        return web.json_response({"error": ERROR_MESSAGE}, status=500)
    return web.json_response(feed.to_dict())


async def carousel_handler(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    max_videos = parse_count(request.query.get("count"), default=settings.carousel_max_videos)
    view = CarouselView(
        api_url=settings.carousel_api_url,
        max_videos=max_videos,
        base_url=settings.carousel_base_url or str(request.url.origin()),
    )
    await view.activate()
    try:
        body = PAGE_TEMPLATE.format(
            title="Latest TikTok videos",
            carousel=view.render(),
            scripts=view.document.render_scripts(),
        )
    finally:
        view.deactivate()
    return web.Response(text=body, content_type="text/html")


def create_app(settings: Settings, scraper: Optional[TikTokScraper] = None) -> web.Application:
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[SCRAPER_KEY] = scraper or TikTokScraper(timeout_seconds=settings.timeout_seconds)
    app.router.add_get("/api/tiktoks", tiktoks_handler)
    app.router.add_get("/", carousel_handler)
    return app
