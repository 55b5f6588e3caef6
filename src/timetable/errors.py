"""
Timetable Errors

Exception taxonomy shared by the ingestion pipeline and the read path.
"""


class TimetableError(Exception):
    """Base class for all timetable catalog errors."""


class UpstreamError(TimetableError):
    """The timetable provider could not be reached or answered badly."""


class MalformedRecordError(TimetableError):
    """A payload record is missing a required field or cannot be typed."""


class InvalidQueryError(TimetableError):
    """Caller-supplied filter input could not be parsed."""

    def __init__(self, parameter: str, message: str):
        super().__init__(f"Failed to parse {parameter} parameter: {message}")
        self.parameter = parameter


class StoreError(TimetableError):
    """The catalog storage layer failed."""
