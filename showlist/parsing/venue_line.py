"""Parser for the venue line of an event block.

A venue line looks like::

    at the Fox Theater, Oakland a/a $50.60 7pm/8pm # (benefit show)

Parsing consumes the line step by step, each step seeing only what the
previous ones left behind:

1. ``(...)`` groups become semicolon-joined notes.
2. A trailing ``#``/``@``/``^`` cluster becomes the venue symbols.
3. The first comma field is the venue, the second starts with the city.
4. Age restriction, price, time and tags are read from the fields after
   the venue.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from showlist.models.entities import AgeRestriction, EventTag, PriceInfo, ShowTime, VenueType
from showlist.parsing.temporal import parse_time
from showlist.utils.errors import TimeFormatError, VenueLineError
from showlist.utils.text_normalizer import CITY_ALIASES, normalize_city

# "at " prefix plus a lower-case article; a capitalised "The" is part of
# the venue's name.
_AT_PREFIX = re.compile(r"^\s*at\s+(?:the\s+)?")
_NOTES_PATTERN = re.compile(r"\(([^)]*)\)")
_SYMBOLS_PATTERN = re.compile(r"([#@^]+)\s*$")

# Checked in order; the first hit wins.
_AGE_PATTERNS: list[tuple[re.Pattern[str], AgeRestriction]] = [
    (re.compile(r"\ba/a\b|\ball[\s-]ages\b", re.IGNORECASE), AgeRestriction.ALL_AGES),
    (re.compile(r"\b21\+"), AgeRestriction.OVER_21),
    (re.compile(r"\b18\+"), AgeRestriction.OVER_18),
    (re.compile(r"\b16\+"), AgeRestriction.OVER_16),
    (re.compile(r"\b8\+"), AgeRestriction.OVER_8),
    (re.compile(r"\b6\+"), AgeRestriction.OVER_6),
    (re.compile(r"\b5\+"), AgeRestriction.OVER_5),
]

_FREE_PATTERN = re.compile(r"\bfree\b", re.IGNORECASE)
_PRICE_PATTERN = re.compile(r"\$(\d+(?:\.\d{2})?)")

# A clock time or door/show range that is not part of a price ("$50.60"),
# an age flag ("21+") or a longer number.
_TIME_PATTERN = re.compile(
    r"(?<![\d$.:/])"
    r"(\d{1,2}(?::\d{2})?\s*(?:am|pm)?(?:\s*/\s*\d{1,2}(?::\d{2})?\s*(?:am|pm)?)?)"
    r"(?![\d+.:])",
    re.IGNORECASE,
)

_MAJOR_NAME_PATTERN = re.compile(r"theat(?:er|re)|auditorium|hall", re.IGNORECASE)
_DIY_NAME_PATTERN = re.compile(r"warehouse|deli|gallery", re.IGNORECASE)

_SOLD_OUT_PATTERN = re.compile(r"\bsold[\s-]?out\b", re.IGNORECASE)
# Tags read from the notes only.
_NOTE_TAGS: list[tuple[re.Pattern[str], EventTag]] = [
    (re.compile(r"tribute", re.IGNORECASE), EventTag.TRIBUTE),
    (re.compile(r"hip[\s-]?hop", re.IGNORECASE), EventTag.HIP_HOP),
    (re.compile(r"reggae", re.IGNORECASE), EventTag.REGGAE),
    (re.compile(r"festival", re.IGNORECASE), EventTag.FESTIVAL),
]
_OUTDOOR_PATTERN = re.compile(r"\b(?:outdoors?|park|amphitheat(?:er|re))\b", re.IGNORECASE)
_MATINEE_PATTERN = re.compile(
    r"\b(?:matinee|afternoon)\b|\b(?:12|1|2|3|4)(?::\d{2})?\s*pm\b", re.IGNORECASE
)
_LATE_PATTERN = re.compile(r"\blate\b|\b(?:10|11)(?::\d{2})?\s*pm\b|\bmidnight\b", re.IGNORECASE)


class VenueLineInfo(BaseModel):
    """Everything extracted from one venue line."""

    model_config = ConfigDict(frozen=True)

    venue: str
    city: str
    age_restriction: AgeRestriction = AgeRestriction.ALL_AGES
    price: PriceInfo = Field(default_factory=PriceInfo)
    time: ShowTime = Field(default_factory=ShowTime)
    venue_type: VenueType = VenueType.CLUB
    tags: list[EventTag] = Field(default_factory=list)
    notes: str | None = None
    symbols: str = ""
    # Set when a time-looking token was found but could not be parsed;
    # the line itself is still usable.
    time_error: str | None = None


def parse_venue_line(line: str, city_aliases: dict[str, str] | None = None) -> VenueLineInfo:
    """Parse a venue line into its structured parts.

    Args:
        line: Venue line, with or without its leading ``"at "``.
        city_aliases: Extra lower-case city alias mappings from config.

    Returns:
        The extracted :class:`VenueLineInfo`.

    Raises:
        VenueLineError: Fewer than two comma-separated fields, or an empty
            venue name.
    """
    working = _AT_PREFIX.sub("", line, count=1).strip()

    note_parts = [note.strip() for note in _NOTES_PATTERN.findall(working) if note.strip()]
    notes = "; ".join(note_parts) or None
    working = _NOTES_PATTERN.sub("", working).strip()

    symbols = ""
    symbol_match = _SYMBOLS_PATTERN.search(working)
    if symbol_match:
        symbols = symbol_match.group(1)
        working = working[: symbol_match.start()].strip()

    fields = working.split(",")
    if len(fields) < 2:
        raise VenueLineError(f"Could not parse venue line: {line.strip()!r}")

    venue = re.sub(r"\s+", " ", fields[0]).strip()
    if not venue:
        raise VenueLineError(f"Missing venue name: {line.strip()!r}")

    city = resolve_city(fields[1].strip(), city_aliases)
    remaining = " ".join(field.strip() for field in fields[1:])

    price = parse_price(remaining)

    show_time = ShowTime()
    time_error = None
    time_match = _TIME_PATTERN.search(remaining)
    if time_match:
        try:
            show_time = parse_time(time_match.group(1).strip())
        except TimeFormatError as exc:
            time_error = exc.message

    return VenueLineInfo(
        venue=venue,
        city=city,
        age_restriction=parse_age_restriction(remaining),
        price=price,
        time=show_time,
        venue_type=determine_venue_type(symbols, venue),
        tags=extract_tags(notes, remaining, price.is_free),
        notes=notes,
        symbols=symbols,
        time_error=time_error,
    )


def resolve_city(location: str, city_aliases: dict[str, str] | None = None) -> str:
    """Resolve the city at the start of the location field.

    The longest multi-word alias prefix wins ("san francisco a/a" ->
    "San Francisco"); otherwise the first token is normalized on its own.
    """
    tokens = location.split()
    if not tokens:
        return ""

    aliases = {**CITY_ALIASES, **{k.lower(): v for k, v in (city_aliases or {}).items()}}
    for width in range(min(3, len(tokens)), 1, -1):
        candidate = " ".join(tokens[:width]).lower().rstrip(".")
        if candidate in aliases:
            return aliases[candidate]
    return normalize_city(tokens[0], city_aliases)


def parse_age_restriction(text: str) -> AgeRestriction:
    """First-match age restriction in *text*, defaulting to all ages."""
    for pattern, restriction in _AGE_PATTERNS:
        if pattern.search(text):
            return restriction
    return AgeRestriction.ALL_AGES


def parse_price(text: str) -> PriceInfo:
    """``free`` wins; otherwise min/max over every ``$<amount>``.

    No amount at all means the price is unknown, which is not the same as
    free.
    """
    if _FREE_PATTERN.search(text):
        return PriceInfo(is_free=True)

    amounts = [float(value) for value in _PRICE_PATTERN.findall(text)]
    if not amounts:
        return PriceInfo()
    return PriceInfo(min=min(amounts), max=max(amounts), is_free=False)


def determine_venue_type(symbols: str, venue: str) -> VenueType:
    if "#" in symbols:
        return VenueType.MAJOR
    if "@" in symbols:
        return VenueType.DIY
    if _MAJOR_NAME_PATTERN.search(venue):
        return VenueType.MAJOR
    if _DIY_NAME_PATTERN.search(venue):
        return VenueType.DIY
    return VenueType.CLUB


def extract_tags(notes: str | None, text: str, is_free: bool = False) -> list[EventTag]:
    """Scan notes and the post-venue text for the fixed tag vocabulary."""
    notes = notes or ""
    tags: list[EventTag] = []

    if is_free:
        tags.append(EventTag.FREE)
    if _SOLD_OUT_PATTERN.search(text) or _SOLD_OUT_PATTERN.search(notes):
        tags.append(EventTag.SOLD_OUT)
    for pattern, tag in _NOTE_TAGS:
        if pattern.search(notes):
            tags.append(tag)
    if _OUTDOOR_PATTERN.search(text):
        tags.append(EventTag.OUTDOOR)
    if _MATINEE_PATTERN.search(text):
        tags.append(EventTag.MATINEE)
    if _LATE_PATTERN.search(text):
        tags.append(EventTag.LATE_SHOW)
    return tags
