#!/usr/bin/env python3
"""
Scheduler that keeps each location's stored status in sync with its hours
Recomputes open/closed every few minutes so the app can read `status` directly
"""

import schedule
import time
from datetime import datetime

import config
import database
from location_utils import InvalidScheduleError, get_location_status


def refresh_location_statuses(now=None):
    """
    Recompute and store the open/closed status of every location

    Args:
        now: Instant to evaluate (defaults to the current time)

    Returns:
        dict: {"open": n, "closed": n, "changed": n, "errors": n}
    """
    locations = database.get_locations()
    menu_status = database.get_location_menu_status([loc['id'] for loc in locations])

    summary = {"open": 0, "closed": 0, "changed": 0, "errors": 0}

    for location in locations:
        try:
            status = get_location_status(
                location['regular_service_hours'],
                location['force_close'],
                menu_status.get(location['id']),
                now,
            )
        except InvalidScheduleError as e:
            print(f"❌ Bad service hours for {location['name']}: {e}")
            summary["errors"] += 1
            continue

        summary[status] += 1
        if status != location['status']:
            database.update_location_status(location['id'], status)
            summary["changed"] += 1
            print(f"🔄 {location['name']} is now {status}")

    return summary


def update_statuses():
    """Scheduled job: refresh statuses and print a one-line summary"""
    try:
        summary = refresh_location_statuses()
        print(
            f"🕐 Status refresh at {datetime.now().strftime('%I:%M %p')}: "
            f"{summary['open']} open, {summary['closed']} closed, "
            f"{summary['changed']} changed"
        )
    except Exception as e:
        print(f"❌ Error: {e}")


def run_scheduler():
    """Run the status refresh loop (blocks; start it in a thread from the server)"""
    print("🚀 Scheduler starting...")

    # Run immediately on startup
    update_statuses()

    schedule.every(config.STATUS_REFRESH_MINUTES).minutes.do(update_statuses)

    print(f"⏰ Status refresh scheduled every {config.STATUS_REFRESH_MINUTES} minutes\n")

    while True:
        schedule.run_pending()
        time.sleep(30)


if __name__ == "__main__":
    database.init_db()
    try:
        run_scheduler()
    except KeyboardInterrupt:
        print("\n\n👋 Scheduler stopped. Goodbye!")
