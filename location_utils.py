"""
location_utils.py - Location availability utilities

Works out, from a location's weekly service hours and meal times, whether it
is open right now, which meal is being served, and when it opens next.

Times are military-time integers (hour * 100 + minute, so 1430 is 2:30 PM)
evaluated in the campus timezone. Every function takes an optional `now`
so callers and tests can pin the instant.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import config

# Campus timezone for all schedule calculations
CAMPUS_TZ = ZoneInfo(config.TIMEZONE)

# Sunday-first, matching the service_hours keys
DAYS_OF_WEEK = (
    'sunday',
    'monday',
    'tuesday',
    'wednesday',
    'thursday',
    'friday',
    'saturday',
)


class InvalidScheduleError(ValueError):
    """Raised when service hours are missing a day or hold non-numeric times"""


def _campus_now(now=None):
    if now is None:
        return datetime.now(CAMPUS_TZ)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(CAMPUS_TZ)


def get_civil_time(now=None):
    """
    Get the current day key and military time in the campus timezone

    Args:
        now: Instant to evaluate (defaults to the current time). Naive
             datetimes are treated as UTC.

    Returns:
        tuple: (day key such as 'monday', military time such as 1430)
    """
    local = _campus_now(now)
    day = DAYS_OF_WEEK[local.isoweekday() % 7]
    return day, local.hour * 100 + local.minute


def get_current_military_time(now=None):
    """Get the current time in military format (HHMM)"""
    return get_civil_time(now)[1]


def _check_time(value, field):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScheduleError(f"{field} must be a number, got {value!r}")
    return value


def validate_schedule_shape(service_hours):
    """
    Make sure service hours have all seven days with numeric time ranges

    Raises:
        InvalidScheduleError: if a day is missing or a range is malformed
    """
    if not isinstance(service_hours, dict):
        raise InvalidScheduleError("Service hours must be a mapping of day names")

    for day in DAYS_OF_WEEK:
        day_schedule = service_hours.get(day)
        if not isinstance(day_schedule, dict):
            raise InvalidScheduleError(f"Service hours are missing '{day}'")

        ranges = day_schedule.get('timeRanges', [])
        if not isinstance(ranges, list):
            raise InvalidScheduleError(f"{day}: timeRanges must be a list")

        for i, time_range in enumerate(ranges):
            if not isinstance(time_range, dict):
                raise InvalidScheduleError(f"{day}: time range {i + 1} is not a mapping")
            _check_time(time_range.get('open'), f"{day} range {i + 1} open")
            _check_time(time_range.get('close'), f"{day} range {i + 1} close")


def _validate_meal_times(meal_times):
    for i, meal in enumerate(meal_times):
        if not isinstance(meal, dict):
            raise InvalidScheduleError(f"meal time {i + 1} is not a mapping")
        _check_time(meal.get('start_time'), f"meal time {i + 1} start_time")
        _check_time(meal.get('end_time'), f"meal time {i + 1} end_time")


def is_location_open(service_hours, force_close=False, has_menus=None, now=None):
    """
    Check if a location is open based on its service hours

    force_close wins over everything, then has_menus=False (no menu data for
    the location). Otherwise the location is open when the current time falls
    inside any of today's ranges, both ends included.
    """
    if force_close:
        return False

    if has_menus is False:
        return False

    validate_schedule_shape(service_hours)
    current_day, current_time = get_civil_time(now)
    day_schedule = service_hours[current_day]

    if day_schedule.get('isClosed'):
        return False

    # Inverted ranges (close <= open) can never satisfy both bounds
    return any(
        time_range['open'] <= current_time <= time_range['close']
        for time_range in day_schedule.get('timeRanges', [])
    )


def get_location_status(service_hours, force_close=False, has_menus=None, now=None):
    """Get location status as 'open' or 'closed'"""
    return 'open' if is_location_open(service_hours, force_close, has_menus, now) else 'closed'


def get_current_meal_time(location, has_menus=None, now=None):
    """
    Get the name of the meal being served at a location

    Args:
        location: Location record with regular_service_hours, meal_times
                  and force_close
        has_menus: False when the location has no menu data
        now: Instant to evaluate

    Returns:
        str: Meal name, or None when closed or no meal times are defined.
             When open between meals, the meal with the nearest start or end
             time is returned (earliest listed meal on a tie).
    """
    now = _campus_now(now)

    if location.get('force_close'):
        return None

    if not is_location_open(location.get('regular_service_hours'), location.get('force_close'), has_menus, now):
        return None

    meal_times = location.get('meal_times') or []
    if not meal_times:
        return None

    _validate_meal_times(meal_times)
    current_time = get_current_military_time(now)

    for meal in meal_times:
        if meal['start_time'] <= current_time <= meal['end_time']:
            return meal['name']

    closest_meal = None
    smallest_diff = float('inf')

    for meal in meal_times:
        diff = min(abs(current_time - meal['start_time']), abs(current_time - meal['end_time']))
        if diff < smallest_diff:
            smallest_diff = diff
            closest_meal = meal

    return closest_meal['name'] if closest_meal else None


def to_military_time(hour, minute):
    """Encode an hour and minute as a military time integer"""
    return hour * 100 + minute


def split_military_time(military_time):
    """Split a military time integer into (hour, minute)"""
    military_time = int(military_time)
    return military_time // 100, military_time % 100


def format_military_time(military_time):
    """
    Format military time for display

    Args:
        military_time: e.g. 1430

    Returns:
        str: e.g. '2:30 PM'
    """
    hours, minutes = split_military_time(military_time)

    period = 'PM' if hours >= 12 else 'AM'
    if hours == 0:
        display_hours = 12
    elif hours > 12:
        display_hours = hours - 12
    else:
        display_hours = hours

    return f"{display_hours}:{minutes:02d} {period}"


def military_to_time_input(military_time):
    """Convert military time to an 'HH:MM' time input value"""
    hours, minutes = split_military_time(military_time)
    return f"{hours:02d}:{minutes:02d}"


def time_input_to_military(time_input):
    """Convert an 'HH:MM' time input value to military time"""
    hours, minutes = time_input.split(':')
    return to_military_time(int(hours), int(minutes))


def get_next_opening_time(service_hours, now=None):
    """
    Describe when a location next opens, ignoring force_close and menu data

    Returns:
        str: 'Today at 6:00 PM CST' or 'Monday at 7:00 AM CST', or None if
             every day of the week is closed
    """
    validate_schedule_shape(service_hours)
    current_day, current_time = get_civil_time(now)
    current_index = DAYS_OF_WEEK.index(current_day)

    today_schedule = service_hours[current_day]
    if not today_schedule.get('isClosed'):
        for time_range in today_schedule.get('timeRanges', []):
            if time_range['open'] > current_time:
                return f"Today at {format_military_time(time_range['open'])} {config.TIMEZONE_LABEL}"

    for offset in range(1, 7):
        next_day = DAYS_OF_WEEK[(current_index + offset) % 7]
        next_schedule = service_hours[next_day]
        ranges = next_schedule.get('timeRanges', [])

        if not next_schedule.get('isClosed') and ranges:
            open_time = format_military_time(ranges[0]['open'])
            return f"{next_day.capitalize()} at {open_time} {config.TIMEZONE_LABEL}"

    return None


def get_location_availability(location, has_menus=None, now=None):
    """
    Evaluate a location record at one instant

    Returns:
        dict: {
            "is_open": bool,
            "status": "open" | "closed",
            "current_meal": str | None,
            "next_opening_description": str | None  # only when closed
        }
    """
    if now is None:
        now = _campus_now()

    service_hours = location.get('regular_service_hours')
    force_close = location.get('force_close', False)

    is_open = is_location_open(service_hours, force_close, has_menus, now)

    return {
        "is_open": is_open,
        "status": 'open' if is_open else 'closed',
        "current_meal": get_current_meal_time(location, has_menus, now) if is_open else None,
        "next_opening_description": None if is_open else get_next_opening_time(service_hours, now),
    }


def get_location_type_name(type_id, location_types):
    """Look up a location type name by id, 'Unknown' if not found"""
    for location_type in location_types:
        if location_type['id'] == type_id:
            return location_type['name']
    return 'Unknown'
