"""Pipeline stage and option models.

``PipelineStage`` is the state machine the orchestrator walks through in
order; the progress tracker broadcasts each transition.  ``PipelineOptions``
holds the tunable knobs from the ``pipeline`` section of
config/config.yaml and is frozen so a run cannot change them midway.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PipelineStage(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Stages of the listings ETL, in execution order.

        READ → PARSE → NORMALIZE → RECOUNT → SEARCH → INDEX → CHUNK → WRITE → DONE
    """

    READ = "READ"              # Source files loaded and fingerprinted
    PARSE = "PARSE"            # Raw blocks / venue lines segmented
    NORMALIZE = "NORMALIZE"    # Identity resolution + dedup
    RECOUNT = "RECOUNT"        # Upcoming/total counts recomputed
    SEARCH = "SEARCH"          # Inverted search index built
    INDEX = "INDEX"            # Secondary lookup structures built
    CHUNK = "CHUNK"            # Events partitioned by month
    WRITE = "WRITE"            # Artifacts written to disk
    DONE = "DONE"


class PipelineOptions(BaseModel):
    """Tunable behaviour for one pipeline run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    timezone: str = "America/Los_Angeles"
    rollover_days: int = Field(default=30, ge=0)
    max_artists_per_event: int = Field(default=8, ge=1)
    artist_similarity_threshold: float = Field(default=0.92, gt=0.0, le=1.0)
    # Extra lower-case city token -> canonical city name mappings.
    city_aliases: dict[str, str] = Field(default_factory=dict)
    # Alternate venue spelling -> canonical venue name.
    venue_aliases: dict[str, str] = Field(default_factory=dict)
    # Fixed datasetVersion string; the run timestamp is used when unset.
    dataset_version_label: str | None = None
    schema_version: str = "1.0.0"
