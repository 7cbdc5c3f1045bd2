"""Pydantic v2 data models for the showlist ETL.

- **raw** -- unvalidated parser output (RawEventData, RawVenueData)
- **entities** -- canonical Artist / Venue / Event plus their enums
- **diagnostics** -- per-record errors and warnings
- **dataset** -- manifest, chunks, indexes, search documents, run result
- **pipeline** -- stage enum and run options
"""

from showlist.models.dataset import (
    ChunkInfo,
    ChunkStats,
    CityInfo,
    DataIndexes,
    DataManifest,
    DateRange,
    EventChunk,
    FileInfo,
    ManifestChunks,
    ManifestDateRange,
    PriceBuckets,
    PriceRangeInfo,
    ProcessingResult,
    ProcessingStats,
    SearchDocument,
    SearchIndexInfo,
    SourceFileInfo,
    SourceFiles,
)
from showlist.models.diagnostics import (
    ERROR_TYPES,
    WARNING_TYPES,
    Diagnostic,
    DiagnosticType,
    ParseOutcome,
)
from showlist.models.entities import (
    AgeRestriction,
    Artist,
    Event,
    EventStatus,
    EventTag,
    PriceInfo,
    ShowTime,
    Venue,
    VenueType,
)
from showlist.models.pipeline import PipelineOptions, PipelineStage
from showlist.models.raw import RawEventData, RawVenueData

__all__ = [
    "ERROR_TYPES",
    "WARNING_TYPES",
    "AgeRestriction",
    "Artist",
    "ChunkInfo",
    "ChunkStats",
    "CityInfo",
    "DataIndexes",
    "DataManifest",
    "DateRange",
    "Diagnostic",
    "DiagnosticType",
    "Event",
    "EventChunk",
    "EventStatus",
    "EventTag",
    "FileInfo",
    "ManifestChunks",
    "ManifestDateRange",
    "ParseOutcome",
    "PipelineOptions",
    "PipelineStage",
    "PriceBuckets",
    "PriceInfo",
    "PriceRangeInfo",
    "ProcessingResult",
    "ProcessingStats",
    "RawEventData",
    "RawVenueData",
    "SearchDocument",
    "SearchIndexInfo",
    "ShowTime",
    "SourceFileInfo",
    "SourceFiles",
    "Venue",
    "VenueType",
]
