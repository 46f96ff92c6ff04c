from datetime import datetime, timezone

import report
from conftest import make_service_hours

# Monday Feb 2 2026, 12:00 PM CST
MONDAY_NOON = datetime(2026, 2, 2, 18, 0, tzinfo=timezone.utc)

MEALS = [{"name": "Lunch", "start_time": 1100, "end_time": 1400}]


def test_build_and_print_report(capsys):
    locations = [
        {"id": "1", "name": "J2", "regular_service_hours": make_service_hours(), "meal_times": MEALS, "force_close": False},
        {"id": "2", "name": "Kins", "regular_service_hours": make_service_hours([{"open": 1700, "close": 2000}]),
         "meal_times": MEALS, "force_close": False},
        {"id": "3", "name": "Littlefield", "regular_service_hours": make_service_hours(), "meal_times": MEALS, "force_close": True},
        {"id": "4", "name": "Broken", "regular_service_hours": {}, "meal_times": [], "force_close": False},
    ]

    rows = report.build_location_report(locations, {"1": True, "2": True, "3": True, "4": True}, MONDAY_NOON)

    assert [row["status"] for row in rows] == ['open', 'closed', 'closed', 'error']
    assert rows[0]["current_meal"] == 'Lunch'
    assert rows[1]["next_opening"].startswith('Today at 5:00 PM')

    totals = report.print_location_report(rows)
    out = capsys.readouterr().out

    assert totals == {"open": 1, "closed": 2, "error": 1}
    assert "🟢 J2 - now serving Lunch" in out
    assert "🔴 Littlefield (force closed)" in out
    assert "❌ Broken" in out
