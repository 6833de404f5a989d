# src/trackannot/errors.py
from __future__ import annotations
from typing import Optional


class AnnotationError(Exception):
    """Base class for every error raised by trackannot."""


class ParseError(AnnotationError, ValueError):
    """A region string (or chr/start/end triple) could not be parsed."""


class NoCoordinateColumnsError(AnnotationError):
    """The table has neither a location/region column nor chr/start/end columns."""

    def __init__(self, columns=None):
        self.columns = list(columns) if columns is not None else []
        super().__init__(
            "The table does not appear to contain genomic coordinates "
            "(expected a location/region column or chr, start and end columns)."
        )


class TrackLoadError(AnnotationError):
    """The feature collection of a track could not be loaded."""

    def __init__(self, track: str, cause: Optional[BaseException] = None):
        self.track = track
        self.cause = cause
        msg = f"Failed to load track '{track}'"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class UnknownTrackError(AnnotationError):
    """A request names a track the registry does not know."""

    def __init__(self, track: str):
        self.track = track
        super().__init__(f"Unknown track: '{track}'")


class AnnotationCancelled(AnnotationError):
    """The run was cancelled between rows; no output is produced."""
