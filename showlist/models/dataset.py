"""Output artifact and run-result models.

Everything in this module is a read-only view derived once at the end of a
run: the manifest, the monthly event chunks, the secondary indexes, the
search index and the processing statistics.  All models serialize with
camelCase keys (see ``OUTPUT_MODEL_CONFIG``).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from showlist.models.diagnostics import Diagnostic
from showlist.models.entities import OUTPUT_MODEL_CONFIG, Event, EventTag


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class DateRange(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    start_epoch_ms: int
    end_epoch_ms: int


class ManifestDateRange(DateRange):
    start_date: str
    end_date: str


class FileInfo(BaseModel):
    """Size and checksum of one written artifact, computed from its bytes."""

    model_config = OUTPUT_MODEL_CONFIG

    filename: str
    size: int
    checksum: str
    record_count: int | None = None


class ChunkInfo(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    filename: str          # "events-2024-08.json"
    chunk_id: str          # "2024-08"
    size: int
    checksum: str
    event_count: int
    date_range: DateRange


class SourceFileInfo(BaseModel):
    """Provenance of one input listing file."""

    model_config = OUTPUT_MODEL_CONFIG

    filename: str
    size: int
    last_modified: int
    line_count: int
    checksum: str


class SourceFiles(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    events: SourceFileInfo
    venues: SourceFileInfo


class ManifestChunks(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    events: list[ChunkInfo]
    artists: FileInfo
    venues: FileInfo
    indexes: FileInfo


class DataManifest(BaseModel):
    """Top-level description of a produced dataset."""

    model_config = OUTPUT_MODEL_CONFIG

    version: str
    dataset_version: str
    last_updated: int
    total_events: int
    total_artists: int
    total_venues: int
    date_range: ManifestDateRange
    chunks: ManifestChunks
    processed_at: int
    source_files: SourceFiles
    schema_version: str


class EventChunk(BaseModel):
    """All events of one calendar month, ascending by date."""

    model_config = OUTPUT_MODEL_CONFIG

    chunk_id: str
    date_range: DateRange
    events: list[Event]


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

class CityInfo(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    name: str
    slug: str
    event_count: int = 0
    venue_count: int = 0
    upcoming_event_count: int = 0


class PriceBuckets(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    free: int = 0
    under20: int = 0
    under50: int = 0
    under100: int = 0
    over100: int = 0


class PriceRangeInfo(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    min: float = 0
    max: float = 0
    buckets: PriceBuckets = Field(default_factory=PriceBuckets)


class SearchIndexInfo(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    indexed_at: int
    total_documents: int
    fields: list[str]
    size: int


class DataIndexes(BaseModel):
    """Secondary lookup structures.  JSON object keys are always strings."""

    model_config = OUTPUT_MODEL_CONFIG

    events_by_date: dict[str, list[int]]
    events_by_venue: dict[str, list[int]]
    events_by_artist: dict[str, list[int]]
    events_by_city: dict[str, list[int]]
    artists_by_name: dict[str, int]
    venues_by_name: dict[str, int]
    venues_by_city: dict[str, list[int]]
    cities: list[CityInfo]
    age_restrictions: list[str]
    price_ranges: PriceRangeInfo
    search_index: SearchIndexInfo


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class SearchDocument(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    id: int
    type: Literal["event", "artist", "venue"]
    entity_id: str
    title: str
    content: str
    city: str = ""
    date: str = ""
    tags: list[EventTag] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

class ChunkStats(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    total: int = 0
    average_size: float = 0
    largest_size: int = 0


class ProcessingStats(BaseModel):
    model_config = OUTPUT_MODEL_CONFIG

    source_events: int
    source_venues: int
    parsed_events: int
    parsed_venues: int
    parsed_artists: int
    duplicate_events_removed: int
    duplicate_artists_removed: int
    duplicate_venues_removed: int
    validation_errors: int
    validation_warnings: int
    processing_time_ms: int
    chunks: ChunkStats


class ProcessingResult(BaseModel):
    """Outcome of one pipeline run.

    ``manifest`` and ``stats`` are ``None`` when a critical error aborted
    the run.
    """

    model_config = OUTPUT_MODEL_CONFIG

    success: bool
    manifest: DataManifest | None = None
    stats: ProcessingStats | None = None
    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)
