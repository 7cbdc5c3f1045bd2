"""Parser for the venues listing file.

One venue per line::

    Fox Theater, 1807 Telegraph Ave, Oakland, a/a, 510-302-2250

Name and address are always the first two fields (the address may be
empty).  Age restriction and phone number are recognised by pattern
anywhere after that; the first remaining trailing field is the city.
"""

from __future__ import annotations

import re

from pydantic import Field

from showlist.models.diagnostics import Diagnostic, DiagnosticType, ParseOutcome
from showlist.models.raw import RawVenueData
from showlist.utils.logging import get_logger

logger = get_logger(__name__)

_AGE_FIELD_PATTERN = re.compile(r"\ba/a\b|\ball[\s-]ages\b|\b\d{1,2}\+", re.IGNORECASE)
_PHONE_PATTERN = re.compile(r"\d{3}-\d{3}-\d{4}|\(\d{3}\)\s*\d{3}-\d{4}")

INCOMPLETE_VENUE = "Incomplete venue data"


class VenueParseResult(ParseOutcome):
    raw_venues: list[RawVenueData] = Field(default_factory=list)


def parse_venue_record(line: str, line_number: int) -> RawVenueData | None:
    """Parse a single venue line; None when it lacks a name or address field."""
    parts = [part.strip() for part in line.split(",")]
    if len(parts) < 2 or not parts[0]:
        return None

    age_restriction = "a/a"
    phone: str | None = None
    city: str | None = None
    for part in parts[2:]:
        if not part:
            continue
        phone_match = _PHONE_PATTERN.search(part)
        if _AGE_FIELD_PATTERN.search(part):
            age_restriction = part
        elif phone_match:
            phone = phone_match.group(0)
        elif city is None:
            city = part

    return RawVenueData(
        name=parts[0],
        address=parts[1],
        city=city,
        age_restriction=age_restriction,
        phone=phone,
        line_number=line_number,
        raw_text=line,
    )


def parse_venues_file(content: str, source_file: str | None = None) -> VenueParseResult:
    """Parse every non-blank line of the venues file.

    Lines with fewer than two fields, or with an empty name, produce an
    ``incomplete`` warning and no record.
    """
    result = VenueParseResult()

    for line_number, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        record = parse_venue_record(line, line_number)
        if record is None:
            result.add(
                Diagnostic(
                    type=DiagnosticType.INCOMPLETE,
                    message=INCOMPLETE_VENUE,
                    source_file=source_file,
                    line_number=line_number,
                    raw_data=line,
                )
            )
            continue
        result.raw_venues.append(record)

    logger.info(
        "venues_file_parsed",
        source_file=source_file,
        venues=len(result.raw_venues),
        warnings=len(result.warnings),
    )
    return result
