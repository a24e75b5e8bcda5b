"""UTC datetime and duration utilities."""

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_clock(seconds: int) -> str:
    """Seconds as a wall-clock style duration: 3725 -> '01:02:05'.

    Wraps past 24 hours, like a time-of-day rendering.
    """
    seconds = max(seconds, 0) % 86400
    return f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    """Compact duration: 45 -> '45s', 125 -> '2m 5s', 7260 -> '2h 1m'."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {seconds % 3600 // 60}m"


def last_business_day(today: date) -> date:
    """The closest weekday strictly before ``today``."""
    day = today - timedelta(days=1)
    while day.weekday() >= 5:
        day -= timedelta(days=1)
    return day
