import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiktok_feed.scraper import extract_state, parse_videos  # noqa: E402


def main() -> int:
    html = sys.stdin.read()
    if not html.strip():
        print("No input on stdin", file=sys.stderr)
        return 1
    username = sys.argv[1] if len(sys.argv) > 1 else "fringebiscuit"
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 5
    state = extract_state(html)
    if state is None:
        print("no SIGI_STATE script found")
        return 0
    feed = parse_videos(state, username, count)
    print(f"parsed={len(feed.videos)}")
    print(json.dumps(feed.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
