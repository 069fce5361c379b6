import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiktok_feed.config import load_settings  # noqa: E402
from tiktok_feed.scraper import TikTokScraper  # noqa: E402


async def main() -> int:
    load_dotenv()
    settings = load_settings()
    username = sys.argv[1] if len(sys.argv) > 1 else settings.default_user
    count = int(sys.argv[2]) if len(sys.argv) > 2 else settings.default_count

    scraper = TikTokScraper(timeout_seconds=settings.timeout_seconds)
    feed = await scraper.fetch_videos(username, count)
    print(f"profile={scraper.profile_url(username)}")
    print(f"results={len(feed.videos)}")
    print(json.dumps(feed.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
