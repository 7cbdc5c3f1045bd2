"""Segmentation of the events listing file into raw event blocks.

An events file is a sequence of blocks::

    aug 15 fri The Strokes, Arctic Monkeys
    Franz Ferdinand
    at the Fox Theater, Oakland a/a $50.60 7pm/8pm #

A block opens with a date line (``<month> <day> [<weekday>]``, the rest of
the line being the first artist line), continues with zero or more artist
continuation lines, and closes with a venue line beginning ``"at "``.  The
venue may also trail the artists on the same physical line.  Blank lines
are pure separators.

This module only segments; nothing here interprets dates, names or venue
fields (see :mod:`showlist.services.normalizer`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pydantic import Field

from showlist.models.diagnostics import Diagnostic, DiagnosticType, ParseOutcome
from showlist.models.raw import RawEventData
from showlist.parsing.temporal import WEEKDAYS, month_number
from showlist.utils.logging import get_logger

logger = get_logger(__name__)

_DATE_LINE_PATTERN = re.compile(
    r"^(?P<month>[A-Za-z]+\.?)\s+(?P<day>\d{1,2})(?=\s|,|$),?(?P<rest>.*)$"
)
# Artists followed by a venue on the same line: the last " at " whose
# remainder looks like "<venue>, <city> ..." ("Panic! at the Disco" stays
# an artist name).
_INLINE_VENUE_PATTERN = re.compile(r"^(?P<artists>.*\S)\s+at\s+(?P<venue>[^,]+,.*)$")

INCOMPLETE_BLOCK = "Incomplete event data"
INCOMPLETE_AT_EOF = "Incomplete event at end of file"
UNEXPECTED_LINE = "Unexpected line format, skipping"


class EventParseResult(ParseOutcome):
    raw_events: list[RawEventData] = Field(default_factory=list)


@dataclass
class _Block:
    """Mutable builder for the block currently being read.

    An inline venue split off an artist line is provisional until the next
    non-blank line: a following ``at`` line means the split text was part
    of the bill ("Panic! at the Disco, Weezer") and is restored.
    """

    date_string: str
    line_number: int
    artist_parts: list[str] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)
    venue_line: str = ""
    inline_venue: str = ""
    _inline_source: str | None = None

    def add_artist_text(self, text: str) -> None:
        self.restore_inline()
        match = _INLINE_VENUE_PATTERN.match(text)
        if match:
            self.artist_parts.append(match.group("artists").strip())
            self.inline_venue = f"at {match.group('venue').strip()}"
            self._inline_source = text
        else:
            self.artist_parts.append(text)

    def restore_inline(self) -> None:
        """Undo a provisional inline venue split."""
        if self._inline_source is None:
            return
        self.artist_parts[-1] = self._inline_source
        self.inline_venue = ""
        self._inline_source = None

    def build(self) -> RawEventData:
        return RawEventData(
            date_string=self.date_string,
            artist_line=", ".join(part for part in self.artist_parts if part),
            venue_line=self.venue_line or self.inline_venue,
            raw_text="\n".join(self.raw_lines),
            line_number=self.line_number,
        )


def match_date_line(line: str) -> tuple[str, str] | None:
    """Split a date line into ``(date_string, rest)``, or None.

    The month must be a known month name so artist lines such as
    "Sonic Youth 2" are never mistaken for dates.
    """
    match = _DATE_LINE_PATTERN.match(line)
    if not match or month_number(match.group("month")) is None:
        return None

    date_tokens = [match.group("month"), match.group("day")]
    rest = match.group("rest").strip()
    first, _, remainder = rest.partition(" ")
    if first and first.lower().rstrip(".,") in WEEKDAYS:
        date_tokens.append(first.rstrip(","))
        rest = remainder.strip()
    return " ".join(date_tokens), rest


def is_venue_line(line: str) -> bool:
    # Case-sensitive: "At the Drive-In" is an artist, not a venue line.
    return line.startswith("at ")


def parse_events_file(content: str, source_file: str | None = None) -> EventParseResult:
    """Segment events file text into :class:`RawEventData` blocks.

    Parameters
    ----------
    content:
        Full text of the events file.
    source_file:
        Name recorded on every diagnostic.

    Returns
    -------
    EventParseResult
        Raw blocks in file order plus ``incomplete`` / ``format`` warnings.
        Line numbers are physical, 1-based.
    """
    result = EventParseResult()
    current: _Block | None = None

    def warn(diagnostic_type: DiagnosticType, message: str, line_number: int, raw: str) -> None:
        result.add(
            Diagnostic(
                type=diagnostic_type,
                message=message,
                source_file=source_file,
                line_number=line_number,
                raw_data=raw,
            )
        )

    for line_number, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        date_line = match_date_line(line)
        if date_line is not None:
            if current is not None and current.inline_venue:
                result.raw_events.append(current.build())
            elif current is not None:
                warn(
                    DiagnosticType.INCOMPLETE,
                    INCOMPLETE_BLOCK,
                    current.line_number,
                    "\n".join(current.raw_lines),
                )
            date_string, rest = date_line
            current = _Block(date_string=date_string, line_number=line_number, raw_lines=[line])
            if rest:
                current.add_artist_text(rest)
        elif current is None:
            warn(DiagnosticType.FORMAT, UNEXPECTED_LINE, line_number, line)
            continue
        elif is_venue_line(line):
            current.raw_lines.append(line)
            current.restore_inline()
            current.venue_line = line
        else:
            current.raw_lines.append(line)
            current.add_artist_text(line)

        if current.venue_line:
            result.raw_events.append(current.build())
            current = None

    if current is not None and current.inline_venue:
        result.raw_events.append(current.build())
    elif current is not None:
        warn(
            DiagnosticType.INCOMPLETE,
            INCOMPLETE_AT_EOF,
            current.line_number,
            "\n".join(current.raw_lines),
        )

    logger.info(
        "events_file_segmented",
        source_file=source_file,
        blocks=len(result.raw_events),
        warnings=len(result.warnings),
    )
    return result
