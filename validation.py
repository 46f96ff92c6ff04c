"""
validation.py - Checks for location records before they reach the database

Each validator returns an error message string, or None when the value is fine.
"""

from payment_methods import is_valid_payment_method

# Editor order (Monday first); copying times moves down this list
EDITOR_DAYS = (
    'monday',
    'tuesday',
    'wednesday',
    'thursday',
    'friday',
    'saturday',
    'sunday',
)

REQUIRED_LOCATION_FIELDS = ('name', 'address', 'type_id')


def is_military_time(value):
    """True for integers 0-2359 whose last two digits are a valid minute"""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= 2359 and value % 100 < 60


def validate_service_hours(day_schedule):
    """
    Validate one day of service hours

    Args:
        day_schedule: {"timeRanges": [{"open": 700, "close": 1000}], "isClosed": False}

    Returns:
        str: Error message, or None if valid
    """
    if day_schedule.get('isClosed'):
        return None

    time_ranges = day_schedule.get('timeRanges') or []
    if not isinstance(time_ranges, list):
        return "Time ranges must be a list"

    if not time_ranges:
        return "At least one time range is required when day is open"

    for i, time_range in enumerate(time_ranges):
        if not isinstance(time_range, dict):
            return f"Time range {i + 1}: Must have open and close times"

        if time_range.get('open') is None or time_range.get('close') is None:
            return f"Time range {i + 1}: Both open and close times are required"

        if not (is_military_time(time_range['open']) and is_military_time(time_range['close'])):
            return f"Time range {i + 1}: Times must be between 0000 and 2359"

        if time_range['close'] <= time_range['open']:
            return f"Time range {i + 1}: Close time must be after open time"

    sorted_ranges = sorted(time_ranges, key=lambda r: r['open'])
    for current, following in zip(sorted_ranges, sorted_ranges[1:]):
        if current['close'] > following['open']:
            return "Time ranges cannot overlap"

        if current['close'] == following['open']:
            return "Time ranges must have at least a 15-minute gap between them"

    return None


def validate_service_hours_required(service_hours):
    """At least one day must be open"""
    if all(service_hours[day].get('isClosed') for day in EDITOR_DAYS):
        return "At least one day must have service hours"
    return None


def validate_payment_methods_required(payment_methods):
    if not isinstance(payment_methods, list):
        return "Payment methods must be a list"

    if not payment_methods:
        return "At least one payment method is required"

    for method in payment_methods:
        if not is_valid_payment_method(method):
            return f"Unknown payment method: {method}"

    return None


def validate_meal_times(meal_times):
    """
    Validate meal time windows

    Names are required and unique, each window must end after it starts,
    and windows may not overlap.
    """
    if not isinstance(meal_times, list):
        return "Meal times must be a list"

    seen_names = set()

    for i, meal_time in enumerate(meal_times):
        if not isinstance(meal_time, dict):
            return f"Meal time {i + 1}: Must have a name, start time and end time"

        name = meal_time.get('name')
        if not isinstance(name, str) or not name.strip():
            return f"Meal time {i + 1}: Meal name is required"

        if meal_time.get('start_time') is None or meal_time.get('end_time') is None:
            return f"Meal time {i + 1}: Both start and end times are required"

        if not (is_military_time(meal_time['start_time']) and is_military_time(meal_time['end_time'])):
            return f"Meal time {i + 1}: Times must be between 0000 and 2359"

        if meal_time['end_time'] <= meal_time['start_time']:
            return f"Meal time {i + 1}: End time must be after start time"

        name = name.strip()
        if name in seen_names:
            return f"Meal time {i + 1}: {name} is already listed"
        seen_names.add(name)

    sorted_meal_times = sorted(meal_times, key=lambda m: m['start_time'])
    for current, following in zip(sorted_meal_times, sorted_meal_times[1:]):
        if current['end_time'] > following['start_time']:
            return (
                f"Meal times cannot overlap: {current['name']} and "
                f"{following['name']} have overlapping times"
            )

    return None


def validate_location(location):
    """
    Validate a full location record

    Returns:
        str: First error found, or None if the location can be saved
    """
    if not isinstance(location, dict):
        return "Location must be an object"

    for field in REQUIRED_LOCATION_FIELDS:
        if not str(location.get(field) or '').strip():
            return f"Missing required field: {field}"

    service_hours = location.get('regular_service_hours')
    if not isinstance(service_hours, dict):
        return "Missing required field: regular_service_hours"

    for day in EDITOR_DAYS:
        if not isinstance(service_hours.get(day), dict):
            return f"Service hours are missing {day.capitalize()}"

        error = validate_service_hours(service_hours[day])
        if error:
            return f"{day.capitalize()}: {error}"

    error = validate_service_hours_required(service_hours)
    if error:
        return error

    error = validate_payment_methods_required(location.get('methods_of_payment') or [])
    if error:
        return error

    return validate_meal_times(location.get('meal_times') or [])


def next_time_range(time_ranges):
    """
    Default range for a new slot on a day

    Starts an hour after the last range closes and lasts one hour,
    or 7:00-10:00 AM when the day has no ranges yet.
    """
    if not time_ranges:
        return {"open": 700, "close": 1000}

    start = time_ranges[-1]['close'] + 100
    return {"open": start, "close": min(start + 100, 2359)}


def copy_times_to_next_day(service_hours, day):
    """
    Copy a day's time ranges and closed flag to the following day

    Returns:
        dict: New service hours (the input is not modified). Copying from
              Sunday, the last day in the editor, changes nothing.
    """
    updated = {key: value for key, value in service_hours.items()}
    if day not in EDITOR_DAYS or day == EDITOR_DAYS[-1]:
        return updated

    next_day = EDITOR_DAYS[EDITOR_DAYS.index(day) + 1]
    current = service_hours[day]
    updated[next_day] = {
        "timeRanges": [dict(time_range) for time_range in current.get('timeRanges', [])],
        "isClosed": bool(current.get('isClosed')),
    }
    return updated
