METER_TO_MILE = 0.000621371
SECONDS_PER_MINUTE = 60


def meters_to_miles(meters):
    """
    Convert meters to miles
    """
    return meters * METER_TO_MILE


def seconds_to_minutes(seconds):
    """
    Convert seconds to minutes
    """
    return seconds / SECONDS_PER_MINUTE


def format_miles(miles):
    return f"{miles:.1f} miles"


def format_duration(seconds):
    """
    Human readable duration, e.g. ``1 h 25 min`` or ``12 min``.
    """
    minutes = round(seconds_to_minutes(seconds))
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours} h {minutes} min"
    return f"{minutes} min"
