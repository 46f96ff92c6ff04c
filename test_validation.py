from conftest import make_service_hours
from validation import (
    copy_times_to_next_day,
    is_military_time,
    next_time_range,
    validate_location,
    validate_meal_times,
    validate_payment_methods_required,
    validate_service_hours,
    validate_service_hours_required,
)


def valid_location(**overrides):
    location = {
        "name": "Jester City Limits",
        "address": "201 E 21st St",
        "type_id": "dining-hall",
        "regular_service_hours": make_service_hours([{"open": 700, "close": 1000}]),
        "methods_of_payment": ["Bevo Pay"],
        "meal_times": [{"name": "Breakfast", "start_time": 700, "end_time": 1000}],
    }
    location.update(overrides)
    return location


def test_closed_day_skips_range_checks():
    assert validate_service_hours({"timeRanges": [{"open": 1000, "close": 700}], "isClosed": True}) is None


def test_open_day_needs_a_range():
    assert validate_service_hours({"timeRanges": [], "isClosed": False}) == \
        "At least one time range is required when day is open"


def test_range_needs_both_times():
    error = validate_service_hours({"timeRanges": [{"open": 700}], "isClosed": False})
    assert error == "Time range 1: Both open and close times are required"


def test_range_close_after_open():
    error = validate_service_hours({"timeRanges": [{"open": 700, "close": 1000}, {"open": 1300, "close": 1300}], "isClosed": False})
    assert error == "Time range 2: Close time must be after open time"


def test_range_times_must_be_military():
    error = validate_service_hours({"timeRanges": [{"open": 760, "close": 1000}], "isClosed": False})
    assert error == "Time range 1: Times must be between 0000 and 2359"


def test_ranges_cannot_overlap():
    day = {"timeRanges": [{"open": 1100, "close": 1400}, {"open": 700, "close": 1200}], "isClosed": False}
    assert validate_service_hours(day) == "Time ranges cannot overlap"


def test_ranges_cannot_touch():
    day = {"timeRanges": [{"open": 700, "close": 1000}, {"open": 1000, "close": 1200}], "isClosed": False}
    assert validate_service_hours(day) == "Time ranges must have at least a 15-minute gap between them"


def test_at_least_one_open_day():
    all_closed = make_service_hours(closed_days=('sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday'))
    assert validate_service_hours_required(all_closed) == "At least one day must have service hours"
    assert validate_service_hours_required(make_service_hours()) is None


def test_payment_methods():
    assert validate_payment_methods_required([]) == "At least one payment method is required"
    assert validate_payment_methods_required(["Venmo"]) == "Unknown payment method: Venmo"
    assert validate_payment_methods_required(["Cash", "Dine In Dollars"]) is None


def test_meal_times():
    assert validate_meal_times([]) is None
    assert validate_meal_times([{"name": " ", "start_time": 700, "end_time": 900}]) == \
        "Meal time 1: Meal name is required"
    assert validate_meal_times([{"name": "Lunch", "start_time": 1400, "end_time": 1100}]) == \
        "Meal time 1: End time must be after start time"


def test_meal_times_cannot_overlap():
    meals = [
        {"name": "Lunch", "start_time": 1100, "end_time": 1400},
        {"name": "Breakfast", "start_time": 700, "end_time": 1130},
    ]
    assert validate_meal_times(meals) == \
        "Meal times cannot overlap: Breakfast and Lunch have overlapping times"


def test_meal_names_unique():
    meals = [
        {"name": "Lunch", "start_time": 1100, "end_time": 1400},
        {"name": "Lunch", "start_time": 1700, "end_time": 1900},
    ]
    assert validate_meal_times(meals) == "Meal time 2: Lunch is already listed"


def test_validate_location():
    assert validate_location(valid_location()) is None
    assert validate_location(valid_location(name="")) == "Missing required field: name"
    assert validate_location(None) == "Location must be an object"


def test_validate_location_reports_day():
    hours = make_service_hours([{"open": 700, "close": 1000}])
    hours['wednesday']['timeRanges'] = []
    assert validate_location(valid_location(regular_service_hours=hours)) == \
        "Wednesday: At least one time range is required when day is open"


def test_validate_location_missing_day():
    hours = make_service_hours()
    del hours['sunday']
    assert validate_location(valid_location(regular_service_hours=hours)) == "Service hours are missing Sunday"


def test_is_military_time():
    assert is_military_time(0)
    assert is_military_time(2359)
    assert not is_military_time(2400)
    assert not is_military_time(1275)
    assert not is_military_time(True)
    assert not is_military_time("0700")


def test_next_time_range():
    assert next_time_range([]) == {"open": 700, "close": 1000}
    assert next_time_range([{"open": 700, "close": 1000}]) == {"open": 1100, "close": 1200}
    assert next_time_range([{"open": 1800, "close": 2230}]) == {"open": 2330, "close": 2359}


def test_copy_times_to_next_day():
    hours = make_service_hours([{"open": 700, "close": 1000}])
    hours['monday'] = {"timeRanges": [{"open": 1100, "close": 1500}], "isClosed": False}

    updated = copy_times_to_next_day(hours, 'monday')

    assert updated['tuesday'] == {"timeRanges": [{"open": 1100, "close": 1500}], "isClosed": False}
    assert hours['tuesday']['timeRanges'] == [{"open": 700, "close": 1000}]
    updated['tuesday']['timeRanges'][0]['open'] = 1200
    assert hours['monday']['timeRanges'][0]['open'] == 1100


def test_copy_times_from_sunday_does_nothing():
    hours = make_service_hours()
    assert copy_times_to_next_day(hours, 'sunday') == hours


def test_time_range_that_is_not_a_mapping():
    day = {"timeRanges": [700], "isClosed": False}
    assert validate_service_hours(day) == "Time range 1: Must have open and close times"
    assert validate_service_hours({"timeRanges": "700-1000", "isClosed": False}) == "Time ranges must be a list"

    hours = make_service_hours([{"open": 700, "close": 1000}])
    hours['monday']['timeRanges'] = [700]
    assert validate_location(valid_location(regular_service_hours=hours)) == \
        "Monday: Time range 1: Must have open and close times"


def test_meal_time_that_is_not_a_mapping():
    assert validate_meal_times(["Breakfast"]) == "Meal time 1: Must have a name, start time and end time"
    assert validate_meal_times([{"name": 5, "start_time": 700, "end_time": 900}]) == \
        "Meal time 1: Meal name is required"
    assert validate_meal_times("Breakfast") == "Meal times must be a list"
    assert validate_location(valid_location(meal_times=["Breakfast"])) == \
        "Meal time 1: Must have a name, start time and end time"


def test_payment_methods_must_be_a_list():
    assert validate_payment_methods_required(5) == "Payment methods must be a list"
