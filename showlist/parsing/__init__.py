"""Line-level parsers for the two listing files.

- **temporal** -- year-less date tokens and door/show time tokens
- **venue_line** -- the ``at <venue>, <city> <flags>`` line of an event
- **event_parser** -- segmentation of the events file into raw blocks
- **venue_parser** -- one venue record per line of the venues file
"""

from showlist.parsing.event_parser import EventParseResult, parse_events_file
from showlist.parsing.temporal import ParsedDate, parse_date, parse_time
from showlist.parsing.venue_line import VenueLineInfo, parse_age_restriction, parse_venue_line
from showlist.parsing.venue_parser import VenueParseResult, parse_venues_file

__all__ = [
    "EventParseResult",
    "ParsedDate",
    "VenueLineInfo",
    "VenueParseResult",
    "parse_age_restriction",
    "parse_date",
    "parse_events_file",
    "parse_time",
    "parse_venue_line",
    "parse_venues_file",
]
