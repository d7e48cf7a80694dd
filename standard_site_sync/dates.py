"""
Parsing and formatting of frontmatter dates.
"""

from datetime import date, datetime, time, timezone

from .errors import InvalidDateError


def parse_published_at(value: str) -> datetime:
    """
    Parse a frontmatter date into an aware UTC datetime.
    
    Date-only values become midnight UTC; naive date-times are taken as UTC.
    
    Raises:
        InvalidDateError: If the value is not an ISO-8601 date.
    """
    text = value.strip()
    try:
        day = date.fromisoformat(text)
    except ValueError:
        pass
    else:
        return datetime.combine(day, time.min, tzinfo=timezone.utc)
    
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidDateError(f"Unparsable publish date: {value!r}") from None
    
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_iso(moment: datetime) -> str:
    """Format like JavaScript's toISOString(): 2024-03-15T00:00:00.000Z"""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
