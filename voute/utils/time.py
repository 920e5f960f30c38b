import calendar
from datetime import date, datetime, timezone

_DAY_NAMES = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
_MONTH_NAMES = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


def parse_iso(s: str) -> datetime:
    """Parses an ISO 8601 string, handling 'Z' for UTC."""
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def parse_day(s: str) -> date:
    """Parses a calendar day from 'YYYY-MM-DD' or a full ISO 8601 timestamp."""
    s = s.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        return parse_iso(s).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today() -> date:
    return date.today()


def js_weekday(day: date) -> int:
    """Weekday numbered 0=Sunday..6=Saturday, as stored in closedDays."""
    return (day.weekday() + 1) % 7


def add_months(day: date, months: int) -> date:
    """Adds calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def long_date(day: date) -> str:
    """Formats a day the way it appears in customer emails, e.g. 'samedi 17 octobre 2026'."""
    return f"{_DAY_NAMES[day.weekday()]} {day.day} {_MONTH_NAMES[day.month - 1]} {day.year}"
