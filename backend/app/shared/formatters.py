"""
Formatting utilities for display.

Used by the CLI and log messages.
"""


def format_pace(pace_min_km: float | None) -> str:
    """
    Format pace as 'M:SS/km'.

    Args:
        pace_min_km: Pace in minutes per km

    Returns:
        Formatted string (e.g., '6:30/km')
    """
    if pace_min_km is None or pace_min_km <= 0:
        return "N/A"

    minutes = int(pace_min_km)
    seconds = round((pace_min_km - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0

    return f"{minutes}:{seconds:02d}/km"


def format_distance_km(km: float | None) -> str:
    """
    Format distance.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., '12.5 km' or '850 m')
    """
    if km is None:
        return "N/A"
    if km < 1:
        return f"{int(km * 1000)} m"
    return f"{km:.1f} km"


def format_duration_minutes(minutes: float | None) -> str:
    """
    Format minutes as 'Xh Ymin'.

    Args:
        minutes: Duration in minutes (e.g., 95)

    Returns:
        Formatted string (e.g., '1h 35min')
    """
    if minutes is None or minutes < 0:
        return "N/A"

    total = int(round(minutes))
    h, m = divmod(total, 60)

    if h == 0:
        return f"{m}min"
    elif m == 0:
        return f"{h}h"
    else:
        return f"{h}h {m}min"
