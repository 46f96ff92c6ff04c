#!/usr/bin/env python3
"""
Location Status Report
Prints every location with its live status, current meal and next opening
"""

import database
from location_utils import InvalidScheduleError, get_location_availability


def build_location_report(locations, menu_status, now=None):
    """
    Evaluate each location for the report

    Args:
        locations: Location dicts from the database
        menu_status: Dict mapping location id to has-menus flag
        now: Instant to evaluate

    Returns:
        List of dicts with name, status, current_meal, next_opening, error
    """
    rows = []
    for location in locations:
        row = {
            "name": location['name'],
            "status": None,
            "current_meal": None,
            "next_opening": None,
            "force_close": location.get('force_close', False),
            "error": None,
        }
        try:
            availability = get_location_availability(location, menu_status.get(location.get('id')), now)
            row["status"] = availability["status"]
            row["current_meal"] = availability["current_meal"]
            row["next_opening"] = availability["next_opening_description"]
        except InvalidScheduleError as e:
            row["status"] = "error"
            row["error"] = str(e)
        rows.append(row)
    return rows


def print_location_report(rows):
    print("\n" + "=" * 60)
    print("🍽️  Dining Location Status")
    print("=" * 60)

    totals = {"open": 0, "closed": 0, "error": 0}

    for row in rows:
        totals[row["status"]] += 1

        if row["status"] == "open":
            meal = f" - now serving {row['current_meal']}" if row["current_meal"] else ""
            print(f"  🟢 {row['name']}{meal}")
        elif row["status"] == "closed":
            reason = " (force closed)" if row["force_close"] else ""
            opens = f" - opens {row['next_opening']}" if row["next_opening"] else ""
            print(f"  🔴 {row['name']}{reason}{opens}")
        else:
            print(f"  ❌ {row['name']}: {row['error']}")

    print("\n📊 SUMMARY")
    print(f"  Open: {totals['open']}")
    print(f"  Closed: {totals['closed']}")
    if totals["error"]:
        print(f"  Errors: {totals['error']}")
    print("=" * 60 + "\n")

    return totals


if __name__ == "__main__":
    database.init_db()
    locations = database.get_locations()
    menu_status = database.get_location_menu_status([loc['id'] for loc in locations])
    print_location_report(build_location_report(locations, menu_status))
