"""
Record keys derived from publish dates.

Keys are AT Protocol TIDs: a 64-bit integer (top bit zero) holding 53 bits
of microseconds since the Unix epoch and 10 bits of clock id, written as
13 base32-sortable characters. Using a fixed clock id makes the key a pure
function of the publish date, so re-publishing a post overwrites its
record instead of creating a new one.

Two posts published on the same day get the same key; the later write wins.
"""

from datetime import date, datetime, time, timezone

from .dates import parse_published_at
from .errors import InvalidDateError, KeyDerivationError

S32_CHARS = "234567abcdefghijklmnopqrstuvwxyz"

TID_LENGTH = 13
TIMESTAMP_CHARS = 11
CLOCK_ID_CHARS = 2

MAX_TIMESTAMP = 2**53
MAX_CLOCK_ID = 2**10

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def s32encode(value: int) -> str:
    """Encode a non-negative integer as base32-sortable."""
    chars = []
    while value:
        value, digit = divmod(value, 32)
        chars.append(S32_CHARS[digit])
    return "".join(reversed(chars))


def s32decode(text: str) -> int:
    value = 0
    for char in text:
        digit = S32_CHARS.find(char)
        if digit < 0:
            raise KeyDerivationError(f"Invalid base32-sortable character {char!r}")
        value = value * 32 + digit
    return value


def tid_from_time(timestamp_us: int, clock_id: int) -> str:
    """
    Build a TID from a microsecond timestamp and a clock id.
    
    Raises:
        KeyDerivationError: If either part is out of range.
    """
    if not 0 <= timestamp_us < MAX_TIMESTAMP:
        raise KeyDerivationError(f"Timestamp out of range for a TID: {timestamp_us}")
    if not 0 <= clock_id < MAX_CLOCK_ID:
        raise KeyDerivationError(f"Clock id must be between 0 and 1023, got {clock_id}")
    
    return (
        s32encode(timestamp_us).rjust(TIMESTAMP_CHARS, S32_CHARS[0])
        + s32encode(clock_id).rjust(CLOCK_ID_CHARS, S32_CHARS[0])
    )


def tid_to_time(tid: str) -> tuple[int, int]:
    """Split a TID back into (timestamp in microseconds, clock id)."""
    tid = tid.replace("-", "")
    if len(tid) != TID_LENGTH:
        raise KeyDerivationError(f"TID must be {TID_LENGTH} characters, got {tid!r}")
    return s32decode(tid[:TIMESTAMP_CHARS]), s32decode(tid[TIMESTAMP_CHARS:])


def parse_publish_date(value: str) -> date:
    """
    Parse a frontmatter date down to a calendar day.
    
    Accepts `YYYY-MM-DD` or a full ISO-8601 date-time. Date-times are
    converted to UTC before the time of day is dropped; naive ones are
    taken as UTC.
    
    Raises:
        KeyDerivationError: If the value is not an ISO-8601 date.
    """
    try:
        return parse_published_at(value).date()
    except InvalidDateError as e:
        raise KeyDerivationError(str(e)) from e


def date_to_micros(day: date) -> int:
    """Microseconds from the epoch to midnight UTC of `day`."""
    midnight = datetime.combine(day, time.min, tzinfo=timezone.utc)
    delta = midnight - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000


def derive_record_key(publish_date: str, clock_id: int) -> str:
    """
    Record key for a post published on `publish_date`.
    
    Pure function: the same date and clock id always give the same key.
    
    Raises:
        KeyDerivationError: If the date is unparsable or before 1970.
    """
    day = parse_publish_date(publish_date)
    micros = date_to_micros(day)
    if micros < 0:
        raise KeyDerivationError(f"Publish date before 1970: {publish_date!r}")
    return tid_from_time(micros, clock_id)
