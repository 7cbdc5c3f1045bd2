"""Raw record models produced by the line parsers.

These are unvalidated text fragments plus their source position.  They
live only between the raw parsers and the entity normalizer and are never
written to an output artifact.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RawEventData(BaseModel):
    """One segmented block from the events file."""

    model_config = ConfigDict(frozen=True)

    date_string: str       # "aug 15 fri"
    artist_line: str       # continuation lines joined with ", "
    venue_line: str        # always starts with "at "
    raw_text: str          # every physical line of the block, newline-joined
    line_number: int       # physical line where the block starts


class RawVenueData(BaseModel):
    """One line from the venues file."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    city: str | None = None
    age_restriction: str = "a/a"
    phone: str | None = None
    line_number: int
    raw_text: str = ""
