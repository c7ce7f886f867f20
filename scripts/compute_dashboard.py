# scripts/compute_dashboard.py
import argparse
import json
import logging
from pathlib import Path

from backend.app.db_helpers import insert_snapshot, get_latest_snapshot
from backend.app.metrics_calculator import calculate_metrics_with_history
from backend.app.schemas import DashboardFeed

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("compute_dashboard")

FEED_PATH = Path("data/live/dashboard_feed.json")


def main():
    parser = argparse.ArgumentParser(description="Compute dashboard metrics from a JSON feed")
    parser.add_argument("--feed", type=Path, default=FEED_PATH)
    parser.add_argument("--persist", action="store_true", help="store the snapshot for later comparison")
    args = parser.parse_args()

    if not args.feed.exists():
        logger.error(f"Missing {args.feed}")
        return

    with open(args.feed, "r", encoding="utf-8") as f:
        feed = DashboardFeed.model_validate(json.load(f))
    logger.info(
        f"Loaded {len(feed.waterLevelPosts)} stations, {len(feed.pumpData)} pumps, {len(feed.alerts)} alerts"
    )

    result = calculate_metrics_with_history(
        feed.waterLevelPosts, feed.pumpData, feed.alerts, previous=get_latest_snapshot()
    )
    print(json.dumps(result.model_dump(), indent=2))

    if args.persist:
        insert_snapshot(result.current)

if __name__ == "__main__":
    main()
