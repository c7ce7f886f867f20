# scripts/simulate_feed.py
import argparse
import json, random, time
from datetime import datetime, timedelta, timezone
from pathlib import Path

# sample gauges: (name, lat, lon)
STATIONS = [
    ("Delaware River @ Trenton", 40.2217, -74.7781),
    ("Mississippi River @ Vicksburg", 32.3150, -90.9058),
    ("Hudson River @ Albany", 42.6526, -73.7562),
    ("Ohio River @ Cincinnati", 39.0911, -84.5120),
    ("Missouri River @ Omaha", 41.2587, -95.9230),
]
PUMPS = [
    ("pump_01", "Trenton", 40.21, -74.76),
    ("pump_02", "New Orleans", 29.95, -90.07),
    ("pump_03", "Sacramento", 38.58, -121.49),
]
PUMP_CONDITIONS = ["Operating normally", "Active", "Scheduled maintenance", "Damaged", ""]
ALERT_LEVELS = ["info", "warning", "danger", "critical"]

OUT_PATH = Path("data/live/dashboard_feed.json")


def _iso(dt):
    return dt.isoformat().replace("+00:00", "Z")


def generate_feed():
    now = datetime.now(timezone.utc)
    posts = []
    for i, (name, lat, lon) in enumerate(STATIONS):
        level = round(random.uniform(0.2, 3.2), 2)
        posts.append({
            "id": f"usgs_{i}",
            "name": name,
            "lat": lat,
            "lon": lon,
            "water_level": level,
            "unit": "m",
            # occasionally stale readings
            "timestamp": _iso(now - timedelta(days=random.choice([0, 0, 1, 10]))),
        })
    pumps = [
        {
            "id": pid,
            "location": loc,
            "latitude": lat,
            "longitude": lon,
            "condition": random.choice(PUMP_CONDITIONS),
            "updated_at": int((now - timedelta(hours=random.randint(1, 240))).timestamp() * 1000),
        }
        for pid, loc, lat, lon in PUMPS
    ]
    alerts = [
        {
            "id": f"alert_{i}",
            "level": random.choice(ALERT_LEVELS),
            "isActive": random.random() > 0.3,
            "affectedAreas": random.sample(["Trenton", "Camden", "Albany", "Vicksburg"], k=random.randint(0, 3)),
            "timestamp": _iso(now),
        }
        for i in range(3)
    ]
    return {"waterLevelPosts": posts, "pumpData": pumps, "alerts": alerts}


def main():
    parser = argparse.ArgumentParser(description="Write a synthetic dashboard feed")
    parser.add_argument("--out", type=Path, default=OUT_PATH)
    parser.add_argument("--every", type=float, default=0, help="seconds between refreshes; 0 writes once")
    args = parser.parse_args()

    args.out.parent.mkdir(parents=True, exist_ok=True)
    while True:
        with open(args.out, "w") as f:
            json.dump(generate_feed(), f, indent=2)
        print(f"[{datetime.now(timezone.utc).strftime('%H:%M:%S')}] Updated feed -> {args.out}")
        if args.every <= 0:
            break
        time.sleep(args.every)

if __name__ == "__main__":
    main()
