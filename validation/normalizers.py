"""Field normalizers shared by the event and booking validators."""
import re
from datetime import date, datetime, timezone
from typing import Any

from validation.errors import InvalidEmailError, InvalidFormatError, InvalidRangeError

MAX_SLUG_LENGTH = 120

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

_QUOTES = re.compile('["\'‘’“”]')
_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')
_TIME_PATTERN = re.compile(
    r'^([0-9]{1,2}):([0-9]{2})(?::([0-9]{2}))?\s*(AM|PM)?$',
    re.IGNORECASE
)

# Tried in order after ISO 8601; month-first wins for ambiguous numerics.
DATE_FORMATS = [
    '%m/%d/%Y',      # US format
    '%m-%d-%Y',      # US format with dashes
    '%B %d, %Y',     # Full month name
    '%b %d, %Y',     # Abbreviated month name
    '%B %d %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
    '%A, %B %d, %Y',
    '%a, %d %b %Y %H:%M:%S',
    '%d/%m/%Y',      # European format
    '%Y/%m/%d',      # Alternative ISO format
]


def slugify(title: str) -> str:
    """
    Build a URL-safe slug from an event title.

    Args:
        title: Event title

    Returns:
        Lower-case hyphenated slug of at most 120 characters
    """
    slug = title.lower().strip()
    slug = _QUOTES.sub('', slug)
    slug = _NON_SLUG_CHARS.sub('-', slug).strip('-')
    # Truncation can expose a hyphen at the cut point.
    return slug[:MAX_SLUG_LENGTH].rstrip('-')


def _parse_date(value: str) -> datetime:
    iso_value = value[:-1] + '+00:00' if value.endswith(('Z', 'z')) else value
    try:
        return datetime.fromisoformat(iso_value)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    raise InvalidFormatError(f"Invalid date format: {value!r}", field='date')


def normalize_date(value: Any) -> str:
    """
    Normalize a date to ISO 8601 format (YYYY-MM-DD).

    Offset-aware inputs are converted to UTC before the calendar date is
    taken; naive inputs are read as UTC.

    Args:
        value: Date string in various formats, or a date/datetime

    Returns:
        ISO 8601 formatted date string

    Raises:
        InvalidFormatError: if the value cannot be parsed as a date
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    else:
        parsed = _parse_date(str(value if value is not None else '').strip())

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime('%Y-%m-%d')


def normalize_time(value: Any) -> str:
    """
    Normalize a time of day to 24-hour format (HH:MM).

    Accepts ``H:mm`` and ``HH:mm`` with optional seconds, which are
    dropped, and an optional AM/PM suffix.

    Args:
        value: Time string

    Returns:
        Zero-padded 24-hour time string

    Raises:
        InvalidFormatError: if the value does not look like a time
        InvalidRangeError: if the hour or minute is out of bounds
    """
    text = str(value or '').strip()
    match = _TIME_PATTERN.match(text)
    if not match:
        raise InvalidFormatError(f"Invalid time format: {text!r}", field='time')

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = (match.group(4) or '').upper()

    if minute > 59:
        raise InvalidRangeError(f"Invalid time minutes: {minute}", field='time')

    if meridiem:
        if hour < 1 or hour > 12:
            raise InvalidRangeError(f"Invalid time hours: {hour}", field='time')
        if meridiem == 'PM' and hour < 12:
            hour += 12
        elif meridiem == 'AM' and hour == 12:
            hour = 0
    elif hour > 23:
        raise InvalidRangeError(f"Invalid time hours: {hour}", field='time')

    return f"{hour:02d}:{minute:02d}"


def normalize_email(value: Any) -> str:
    """
    Trim and lower-case an email address, then check its shape.

    Raises:
        InvalidEmailError: if the result is not shaped like local@domain.tld
    """
    email = value.strip().lower() if isinstance(value, str) else ''
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError()
    return email
