import pytest

import database

DAYS = ('sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday')


def make_service_hours(time_ranges=None, closed_days=()):
    """Same ranges every day except the closed ones"""
    time_ranges = time_ranges if time_ranges is not None else [{"open": 700, "close": 2200}]
    return {
        day: {
            "timeRanges": [] if day in closed_days else [dict(r) for r in time_ranges],
            "isClosed": day in closed_days,
        }
        for day in DAYS
    }


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(database, 'DATABASE_PATH', str(tmp_path / 'dining.db'))
    database.init_db()
    return database


@pytest.fixture
def location_type(db):
    return db.add_location_type('Dining Hall')


@pytest.fixture
def location_data(location_type):
    def build(**overrides):
        location = {
            "name": "J2 Dining",
            "colloquial_name": "J2",
            "description": "All-you-care-to-eat dining hall",
            "address": "2400 San Jacinto Blvd",
            "image": None,
            "apple_maps_link": "https://maps.apple.com/?q=J2",
            "google_maps_link": "https://maps.google.com/?q=J2",
            "regular_service_hours": make_service_hours(),
            "meal_times": [
                {"name": "Breakfast", "start_time": 700, "end_time": 1030},
                {"name": "Lunch", "start_time": 1100, "end_time": 1400},
                {"name": "Dinner", "start_time": 1630, "end_time": 2100},
            ],
            "methods_of_payment": ["Bevo Pay", "Credit/Debit"],
            "type_id": location_type['id'],
            "force_close": False,
            "has_menus": True,
        }
        location.update(overrides)
        return location
    return build
