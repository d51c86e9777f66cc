import re
from datetime import date


def normalize_time(time_str):
    """
    Normalize time strings to HH:MM:SS 24-hour format.
    Handles: "20:00", "20:00:00", "8:30pm", "12:00am", "20h", "20h30", "20H30"
    Returns None when the string is not a time of day.
    """
    if not time_str:
        return None

    time_str = str(time_str).strip().lower()

    is_pm = "pm" in time_str
    is_am = "am" in time_str
    time_str = time_str.replace("pm", "").replace("am", "").strip()

    match = re.fullmatch(r"(\d{1,2})\s*[:h]\s*(\d{2})?(?::(\d{2}))?", time_str)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)

    if is_pm and hours < 12:
        hours += 12
    elif is_am and hours == 12:
        hours = 0

    if hours > 23 or minutes > 59 or seconds > 59:
        return None

    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def is_iso_date(value):
    """True for a real calendar date written as YYYY-MM-DD."""
    if not value or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", str(value)):
        return False
    try:
        date.fromisoformat(str(value))
    except ValueError:
        return False
    return True
