"""Parse and processing diagnostics.

Every per-record problem becomes a :class:`Diagnostic` rather than an
exception escaping the pipeline.  The ``type`` decides the severity:

    errors   -- the record was rejected: critical, validation, data
    warnings -- the record was dropped for a recoverable reason or was
                accepted but flagged: format, incomplete, data-quality

Only ``critical`` aborts a run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from showlist.models.entities import OUTPUT_MODEL_CONFIG


class DiagnosticType(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    CRITICAL = "critical"
    VALIDATION = "validation"
    DATA = "data"
    FORMAT = "format"
    INCOMPLETE = "incomplete"
    DATA_QUALITY = "data-quality"


ERROR_TYPES = frozenset({DiagnosticType.CRITICAL, DiagnosticType.VALIDATION, DiagnosticType.DATA})
WARNING_TYPES = frozenset(
    {DiagnosticType.FORMAT, DiagnosticType.INCOMPLETE, DiagnosticType.DATA_QUALITY}
)


class Diagnostic(BaseModel):
    """A single error or warning tied to a source line."""

    model_config = OUTPUT_MODEL_CONFIG

    type: DiagnosticType
    message: str
    source_file: str | None = None
    line_number: int | None = None
    raw_data: str | None = None

    @property
    def is_error(self) -> bool:
        return self.type in ERROR_TYPES


class ParseOutcome(BaseModel):
    """Errors and warnings collected by one parsing or normalization step."""

    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        if diagnostic.is_error:
            self.errors.append(diagnostic)
        else:
            self.warnings.append(diagnostic)
