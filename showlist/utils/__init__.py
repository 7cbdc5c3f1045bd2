"""Utility modules for showlist.

Available utility modules (re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at ShowlistError;
  parsers raise granular subclasses so the normalizer can turn each one
  into the right diagnostic without broad ``except Exception`` blocks.
- **hashing** -- FNV-1a identity hashing for artist/venue/event IDs and
  SHA-256 checksums for output artifacts.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output locally, structured JSON in production.
- **text_normalizer** -- Identity-key normalization, slugs, city aliases,
  artist-line splitting and fuzzy name matching.
"""

# -- Domain exception hierarchy --------------------------------------------
from showlist.utils.errors import (
    ConfigurationError,
    DateFormatError,
    FormatError,
    PipelineError,
    RecordValidationError,
    ShowlistError,
    SourceFileError,
    TimeFormatError,
    VenueLineError,
)

# -- Identity hashing and checksums -----------------------------------------
from showlist.utils.hashing import artist_id, checksum, event_id, stable_hash, venue_id

# -- Structured logging setup ----------------------------------------------
from showlist.utils.logging import configure_logging, get_logger

# -- Text normalization ------------------------------------------------------
from showlist.utils.text_normalizer import (
    create_slug,
    fuzzy_match,
    normalize_city,
    normalize_name,
    split_artist_names,
)

__all__ = [
    "ConfigurationError",
    "DateFormatError",
    "FormatError",
    "PipelineError",
    "RecordValidationError",
    "ShowlistError",
    "SourceFileError",
    "TimeFormatError",
    "VenueLineError",
    "artist_id",
    "checksum",
    "configure_logging",
    "create_slug",
    "event_id",
    "fuzzy_match",
    "get_logger",
    "normalize_city",
    "normalize_name",
    "split_artist_names",
    "stable_hash",
    "venue_id",
]
