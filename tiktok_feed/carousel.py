"""Carousel of TikTok embeds fed from the ``/api/tiktoks`` endpoint.

The view fetches the feed, keeps the resulting video list and renders one
``blockquote.tiktok-embed`` placeholder per video.  TikTok's ``embed.js``
turns those placeholders into players; the view only owns the lifetime of
that script element inside a :class:`Document`.
"""

import enum
import logging
from dataclasses import dataclass, field
from html import escape
from typing import Callable, Optional

import aiohttp
from yarl import URL

logger = logging.getLogger("tiktok_feed.carousel")

EMBED_SCRIPT_SRC = "https://www.tiktok.com/embed.js"


class CarouselState(enum.Enum):
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass
class ScriptElement:
    src: str
    is_async: bool = True

    def render(self) -> str:
        attrs = f' src="{escape(self.src)}"'
        if self.is_async:
            attrs += " async"
        return f"<script{attrs}></script>"


@dataclass
class Document:
    scripts: list[ScriptElement] = field(default_factory=list)

    def append(self, script: ScriptElement) -> None:
        self.scripts.append(script)

    def remove(self, script: ScriptElement) -> None:
        for idx, existing in enumerate(self.scripts):
            if existing is script:
                del self.scripts[idx]
                return
        raise ValueError("script is not attached to this document")

    def render_scripts(self) -> str:
        return "\n".join(script.render() for script in self.scripts)


class EmbedScript:
    """Injects ``embed.js`` on enter and removes it again on exit."""

    def __init__(self, document: Document, src: str = EMBED_SCRIPT_SRC) -> None:
        self._document = document
        self._src = src
        self._element: Optional[ScriptElement] = None

    @property
    def attached(self) -> bool:
        return self._element is not None

    def acquire(self) -> Callable[[], None]:
        self._element = ScriptElement(self._src)
        self._document.append(self._element)
        return self.release

    def release(self) -> None:
        if self._element is None:
            return
        element, self._element = self._element, None
        self._document.remove(element)

    def __enter__(self) -> "EmbedScript":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def _coerce_videos(payload: object) -> list[dict]:
    videos = payload.get("videos") if isinstance(payload, dict) else None
    if not isinstance(videos, list):
        return []
    return [video for video in videos if isinstance(video, dict)]


class CarouselView:
    def __init__(
        self,
        api_url: str = "/api/tiktoks",
        max_videos: int = 5,
        base_url: Optional[str] = None,
        document: Optional[Document] = None,
    ) -> None:
        self.api_url = api_url
        self.max_videos = max_videos
        self.document = document if document is not None else Document()
        self.state = CarouselState.LOADING
        self.videos: list[dict] = []
        self._base_url = base_url
        self._seq = 0
        self._release_embed: Optional[Callable[[], None]] = None

    def feed_url(self) -> str:
        url = URL(self.api_url)
        if not url.is_absolute():
            if not self._base_url:
                raise ValueError(f"relative api_url {self.api_url!r} needs a base_url")
            url = URL(self._base_url).join(url)
        return str(url.update_query(count=str(self.max_videos)))

    async def activate(self) -> CarouselState:
        self._seq += 1
        seq = self._seq
        self.state = CarouselState.LOADING
        try:
            videos = _coerce_videos(await self._fetch_feed())
        except Exception:
            logger.exception("Error fetching TikTok videos")
            videos = []
        if seq != self._seq:
            logger.debug("Dropping stale carousel response seq=%s latest=%s", seq, self._seq)
            return self.state
        self._set_videos(videos)
        self.state = CarouselState.POPULATED if videos else CarouselState.EMPTY
        return self.state

    async def update(self, api_url: Optional[str] = None, max_videos: Optional[int] = None) -> CarouselState:
        changed = False
        if api_url is not None and api_url != self.api_url:
            self.api_url = api_url
            changed = True
        if max_videos is not None and max_videos != self.max_videos:
            self.max_videos = max_videos
            changed = True
        if not changed:
            return self.state
        return await self.activate()

    def deactivate(self) -> None:
        # Responses still in flight belong to the previous activation.
        self._seq += 1
        self._release_current_embed()

    async def _fetch_feed(self) -> object:
        url = self.feed_url()
        async with aiohttp.ClientSession() as session:
            async with session.get(url) as response:
                return await response.json(content_type=None)

    def _set_videos(self, videos: list[dict]) -> None:
        # One embed.js element per video list.
        self.videos = videos
        self._release_current_embed()
        self._release_embed = EmbedScript(self.document).acquire()

    def _release_current_embed(self) -> None:
        if self._release_embed is not None:
            release, self._release_embed = self._release_embed, None
            release()

    def render(self) -> str:
        if self.state is CarouselState.LOADING:
            return "<div>Loading TikTok videos…</div>"
        if self.state is CarouselState.EMPTY:
            return "<div>No TikTok videos found.</div>"
        slides = "\n".join(self._render_slide(video) for video in self.videos)
        return (
            '<div class="w-full max-w-3xl mx-auto p-4">\n'
            '<div class="overflow-hidden">\n'
            '<div class="flex space-x-4 overflow-x-auto scroll-smooth snap-x snap-mandatory">\n'
            f"{slides}\n"
            "</div>\n"
            "</div>\n"
            "</div>"
        )

    @staticmethod
    def _render_slide(video: dict) -> str:
        video_id = escape(str(video.get("id", "")))
        url = escape(str(video.get("url", "")))
        return (
            f'<div class="snap-center shrink-0 w-full" style="min-width: 100%">'
            f'<blockquote class="tiktok-embed" cite="{url}" data-video-id="{video_id}" '
            f'style="width: 100%; min-height: 600px"></blockquote>'
            f"</div>"
        )
