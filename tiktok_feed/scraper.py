import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup

from .utils import dig

logger = logging.getLogger("tiktok_feed.scraper")

PROFILE_URL_TEMPLATE = "https://www.tiktok.com/@{username}"
VIDEO_URL_TEMPLATE = "https://www.tiktok.com/@{username}/video/{video_id}"
STATE_SCRIPT_ID = "SIGI_STATE"

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


class TikTokError(RuntimeError):
    pass


class StateParseError(TikTokError):
    pass


@dataclass(frozen=True)
class VideoRef:
    id: str
    url: str

    def to_dict(self) -> dict:
        return {"id": self.id, "url": self.url}


@dataclass(frozen=True)
class FeedResponse:
    videos: list[VideoRef] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"videos": [video.to_dict() for video in self.videos]}


def extract_state(html: str) -> Optional[dict]:
    """Return the parsed ``SIGI_STATE`` hydration blob, or None if the page has none."""
    soup = BeautifulSoup(html, "html.parser")
    script = soup.find("script", id=STATE_SCRIPT_ID)
    if script is None:
        return None
    raw = script.string if script.string is not None else script.get_text()
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StateParseError(f"{STATE_SCRIPT_ID} is not valid JSON: {exc}") from exc


def parse_videos(state: Optional[dict], username: str, count: int) -> FeedResponse:
    """Project the hydration state into at most ``count`` video refs.

    The id list is sliced first and unresolved ids are dropped afterwards,
    so a dangling id still uses up one slot of ``count``.
    """
    id_list = dig(state, "ItemList", "userPost", "list", default=[])
    items = dig(state, "ItemList", "userPost", "map", default={})
    if not isinstance(id_list, list):
        id_list = []
    if not isinstance(items, dict):
        items = {}

    videos: list[VideoRef] = []
    for video_id in id_list[:count]:
        item = items.get(str(video_id))
        if not isinstance(item, dict) or not item.get("id"):
            continue
        item_id = str(item["id"])
        videos.append(
            VideoRef(
                id=item_id,
                url=VIDEO_URL_TEMPLATE.format(username=username, video_id=item_id),
            )
        )
    return FeedResponse(videos=videos)


class TikTokScraper:
    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        profile_url_template: str = PROFILE_URL_TEMPLATE,
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._profile_url_template = profile_url_template

    def profile_url(self, username: str) -> str:
        return self._profile_url_template.format(username=username)

    async def fetch_profile_html(self, username: str) -> str:
        url = self.profile_url(username)
        try:
            async with aiohttp.ClientSession(timeout=self._timeout, headers=REQUEST_HEADERS) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.info("TikTok profile %s answered with status %s", url, response.status)
                    return await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TikTokError(f"GET {url} failed: {exc}") from exc

    async def fetch_videos(self, username: str, count: int) -> FeedResponse:
        html = await self.fetch_profile_html(username)
        state = extract_state(html)
        if state is None:
            logger.debug("No %s script on profile page for @%s", STATE_SCRIPT_ID, username)
            return FeedResponse()
        return parse_videos(state, username, count)
