"""Date and time token parsing for hand-written listings.

Listings never carry a year ("aug 15 fri"), so the year is inferred from
the run clock: the current year, unless that puts the date more than
``rollover_days`` in the past, in which case the date belongs to next
year.  This is a heuristic over year-less data, not a calendar law; a
listing published in early January for a show in late December of the
previous year will be placed a year in the future.

Times follow the listing convention ``<door>/<show>`` where the last
segment is the show time.  Without am/pm, hours 1-11 are evening hours.
"""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict

from showlist.models.entities import ShowTime
from showlist.utils.errors import DateFormatError, TimeFormatError

DEFAULT_TIMEZONE = "America/Los_Angeles"

MONTHS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

WEEKDAYS = frozenset(
    {
        "sun", "sunday",
        "mon", "monday",
        "tue", "tues", "tuesday",
        "wed", "weds", "wednesday",
        "thu", "thur", "thurs", "thursday",
        "fri", "friday",
        "sat", "saturday",
    }
)

_DAY_PATTERN = re.compile(r"\d{1,2}")
_CLOCK_PATTERN = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?", re.IGNORECASE)


class ParsedDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str        # ISO "YYYY-MM-DD"
    epoch_ms: int    # local midnight in the listing timezone


def resolve_timezone(tz: str | ZoneInfo) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


def month_number(token: str) -> int | None:
    """Return 1-12 for a month name or abbreviation ("Sept." -> 9), else None."""
    return MONTHS.get(token.lower().rstrip("."))


def parse_date(
    text: str,
    now: datetime | None = None,
    tz: str | ZoneInfo = DEFAULT_TIMEZONE,
    rollover_days: int = 30,
) -> ParsedDate:
    """Parse ``"<month> <day> [<weekday>]"`` into an absolute date.

    Parameters
    ----------
    text:
        Date token such as ``"aug 15 fri"`` or ``"Sept. 3"``.
    now:
        Run clock.  Naive datetimes are taken to be in *tz*; defaults to
        the current time.
    tz:
        Timezone the listings are written in.
    rollover_days:
        Dates further than this in the past roll forward one year.

    Returns
    -------
    ParsedDate
        ISO date plus epoch milliseconds of local midnight.

    Raises
    ------
    DateFormatError
        Unknown month, non-numeric or out-of-range day.
    """
    zone = resolve_timezone(tz)
    parts = text.strip().split()
    if len(parts) < 2:
        raise DateFormatError(f"Could not parse date: {text!r}")

    month = month_number(parts[0])
    day_token = parts[1].rstrip(",")
    if month is None or not _DAY_PATTERN.fullmatch(day_token):
        raise DateFormatError(f"Could not parse date: {text!r}")
    day = int(day_token)
    if not 1 <= day <= 31:
        raise DateFormatError(f"Day out of range: {text!r}")

    if now is None:
        now = datetime.now(tz=zone)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=zone)

    year = now.astimezone(zone).year
    try:
        event_day = _local_midnight(year, month, day, zone, text)
    except DateFormatError:
        # "feb 29" listed in a non-leap year can only mean next year.
        event_day = _local_midnight(year + 1, month, day, zone, text)
    else:
        if event_day < now - timedelta(days=rollover_days):
            event_day = _local_midnight(year + 1, month, day, zone, text)

    return ParsedDate(
        date=event_day.date().isoformat(),
        epoch_ms=int(event_day.timestamp()) * 1000,
    )


def _local_midnight(year: int, month: int, day: int, zone: ZoneInfo, text: str) -> datetime:
    try:
        return datetime(year, month, day, tzinfo=zone)
    except ValueError as exc:
        # e.g. "feb 30", or "feb 29" outside a leap year
        raise DateFormatError(f"Invalid date {text!r}: {exc}") from exc


def parse_time(text: str) -> ShowTime:
    """Parse ``"7pm/8pm"``, ``"7:30pm"`` or ``"9"`` into 24-hour times.

    The last slash segment is the show time, an earlier one the door time.

    Raises
    ------
    TimeFormatError
        When a segment is not a clock time or is out of range.
    """
    segments = [segment.strip() for segment in text.split("/")]
    if not segments or not segments[-1]:
        raise TimeFormatError(f"Could not parse time: {text!r}")

    start_time = _to_24_hour(segments[-1])
    door_time = _to_24_hour(segments[0]) if len(segments) > 1 else None
    return ShowTime(start_time=start_time, door_time=door_time)


def _to_24_hour(segment: str) -> str:
    match = _CLOCK_PATTERN.fullmatch(segment)
    if not match:
        raise TimeFormatError(f"Could not parse time: {segment!r}")

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").lower()

    if minute > 59:
        raise TimeFormatError(f"Minutes out of range: {segment!r}")
    if meridiem and not 1 <= hour <= 12:
        raise TimeFormatError(f"Hour out of range for {meridiem}: {segment!r}")

    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    elif not meridiem and 1 <= hour <= 11:
        # Listings default to evening shows.
        hour += 12

    if hour > 23:
        raise TimeFormatError(f"Hour out of range: {segment!r}")
    return f"{hour:02d}:{minute:02d}"


def combine_epoch_ms(date_iso: str, clock: str, tz: str | ZoneInfo = DEFAULT_TIMEZONE) -> int:
    """Epoch milliseconds of ``date_iso`` at ``HH:MM`` local time."""
    zone = resolve_timezone(tz)
    hours, minutes = (int(part) for part in clock.split(":"))
    day = datetime.fromisoformat(date_iso).date()
    moment = datetime.combine(day, time(hours, minutes), tzinfo=zone)
    return int(moment.timestamp()) * 1000


def year_month(epoch_ms: int, tz: str | ZoneInfo = DEFAULT_TIMEZONE) -> str:
    """``"YYYY-MM"`` of an epoch timestamp in the listing timezone."""
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=resolve_timezone(tz))
    return f"{moment.year:04d}-{moment.month:02d}"


def iso_date(epoch_ms: int, tz: str | ZoneInfo = DEFAULT_TIMEZONE) -> str:
    """ISO date of an epoch timestamp in the listing timezone."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=resolve_timezone(tz)).date().isoformat()
