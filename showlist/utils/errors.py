"""Custom exception hierarchy for showlist.

All application exceptions inherit from :class:`ShowlistError`, which
carries an optional ``line_number`` so diagnostics can point back at the
source line that caused the failure.

The hierarchy is organized by pipeline stage:

    ShowlistError  (base -- catch-all for any showlist error)
    +-- FormatError              (a field could not be parsed)
    |   +-- DateFormatError      (date token, e.g. "aug 32 fri")
    |   +-- TimeFormatError      (time token, e.g. "25pm")
    |   +-- VenueLineError       (venue line with too few fields)
    +-- RecordValidationError    (record is structurally invalid)
    +-- SourceFileError          (source file missing or unreadable)
    +-- PipelineError            (orchestration failure)
    +-- ConfigurationError       (startup / invalid config)

Parsers raise these; the normalizer and orchestrator catch them per
record and turn them into diagnostics.  Only :class:`SourceFileError`
and :class:`PipelineError` end a run.
"""


class ShowlistError(Exception):
    """Base exception for all showlist errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``line_number`` identifying the source line.  ``__str__`` prefixes the
    line number in brackets, e.g. ``[line 12] Could not parse date``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        line_number: int | None = None,
    ) -> None:
        self._message = message
        self._line_number = line_number
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def line_number(self) -> int | None:
        return self._line_number

    def __str__(self) -> str:
        if self._line_number is not None:
            return f"[line {self._line_number}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Field-level parse failures
# ---------------------------------------------------------------------------

class FormatError(ShowlistError):
    """Raised when a field of a record cannot be parsed."""

    def __init__(
        self,
        message: str = "Unrecognised format",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


class DateFormatError(FormatError):
    """Raised when a date token is not ``<month> <day> [<weekday>]``."""

    def __init__(
        self,
        message: str = "Could not parse date",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


class TimeFormatError(FormatError):
    """Raised when a show/door time token is not a valid clock time."""

    def __init__(
        self,
        message: str = "Could not parse time",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


class VenueLineError(FormatError):
    """Raised when a venue line lacks the ``<venue>, <city>`` structure."""

    def __init__(
        self,
        message: str = "Could not parse venue line",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


# ---------------------------------------------------------------------------
# Record-level failures
# ---------------------------------------------------------------------------

class RecordValidationError(ShowlistError):
    """Raised when a record is structurally invalid (e.g. no artists)."""

    def __init__(
        self,
        message: str = "Record failed validation",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


# ---------------------------------------------------------------------------
# Run-level failures
# ---------------------------------------------------------------------------

class SourceFileError(ShowlistError):
    """Raised when a source listing file is missing or cannot be read."""

    def __init__(
        self,
        message: str = "Source file could not be read",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


class PipelineError(ShowlistError):
    """Raised when pipeline orchestration fails."""

    def __init__(
        self,
        message: str = "Pipeline orchestration failed",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)


class ConfigurationError(ShowlistError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        line_number: int | None = None,
    ) -> None:
        super().__init__(message=message, line_number=line_number)
