import json
from typing import Callable, Optional

import pytest

from tiktok_feed.config import Settings


def build_profile_html(state: Optional[object] = None, raw: Optional[str] = None) -> str:
    if raw is None and state is None:
        return "<html><head><title>TikTok</title></head><body><div id='app'></div></body></html>"
    blob = raw if raw is not None else json.dumps(state)
    return (
        "<html><head><title>TikTok</title>"
        '<script id="SIGI_STATE" type="application/json">'
        f"{blob}"
        "</script></head><body><div id='app'></div></body></html>"
    )


def build_state(id_list: list, items: dict) -> dict:
    return {"ItemList": {"userPost": {"list": id_list, "map": items}}}


@pytest.fixture
def profile_html() -> Callable[..., str]:
    return build_profile_html


@pytest.fixture
def make_state() -> Callable[[list, dict], dict]:
    return build_state


@pytest.fixture
def settings() -> Settings:
    return Settings(
        host="127.0.0.1",
        port=8080,
        default_user="fringebiscuit",
        default_count=5,
        timeout_seconds=None,
        carousel_api_url="/api/tiktoks",
        carousel_base_url=None,
        carousel_max_videos=5,
        log_level="INFO",
    )
