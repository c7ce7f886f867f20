"""
test_flood_reports.py — crowdsourced report filtering, counts and CSV export.
"""

import csv
import io

from backend.app.flood_reports import EXPORT_COLUMNS, filter_reports, report_stats, reports_to_csv
from backend.app.schemas import FloodReport


def report(id, location, level, created_at, description=None, **extra):
    return FloodReport(id=id, location=location, water_level=level, created_at=created_at,
                       description=description, **extra)


REPORTS = [
    report("r1", "Trenton, NJ", "knee-length", "2024-03-05T14:30:00Z", "Road closed", latitude=40.2, longitude=-74.7),
    report("r2", "Camden, NJ", "chest-length", "2024-03-06T09:00:00Z", 'Water "rising" fast'),
    report("r3", "Albany, NY", "ankle-length", "2024-03-04T08:00:00Z"),
    report("r4", "Trenton, NJ", "mystery", "2024-03-07T08:00:00Z"),
]


class TestFilterReports:

    def test_newest_first(self):
        assert [r.id for r in filter_reports(REPORTS)] == ["r4", "r2", "r1", "r3"]

    def test_search_location_and_description(self):
        assert [r.id for r in filter_reports(REPORTS, search="trenton")] == ["r4", "r1"]
        assert [r.id for r in filter_reports(REPORTS, search="RISING")] == ["r2"]

    def test_level_filter(self):
        assert [r.id for r in filter_reports(REPORTS, level="low")] == ["r4", "r3"]
        assert [r.id for r in filter_reports(REPORTS, level="high")] == ["r2"]

    def test_returns_every_match(self):
        matched = filter_reports(REPORTS, search="nj")
        assert [r.id for r in matched] == ["r4", "r2", "r1"]


class TestReportStats:

    def test_counts(self):
        stats = report_stats(REPORTS)
        assert stats.model_dump() == {"total": 4, "highLevel": 1, "mediumLevel": 1, "lowLevel": 2}


class TestReportsToCsv:

    def test_export(self):
        rows = list(csv.reader(io.StringIO(reports_to_csv(REPORTS[:2]))))
        assert rows[0] == EXPORT_COLUMNS
        assert rows[1][0] == "r1"
        assert rows[1][2] == "40.2"
        assert rows[1][4] == "Knee"
        assert rows[1][8] == "05 Mar 2024, 14:30"
        assert rows[2][5] == 'Water "rising" fast'
        assert rows[2][4] == "Chest"
