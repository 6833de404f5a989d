# src/trackannot/__init__.py

from .errors import (
    AnnotationError,
    ParseError,
    NoCoordinateColumnsError,
    TrackLoadError,
    UnknownTrackError,
    AnnotationCancelled,
)
from .region import Region, parse_region, is_region_like, overlaps
from .track import FeatureElement, Track, FeatureIndex, QueryMode, TrackRegistry
from .annotation import (
    AnnotationRequest,
    parse_request_spec,
    annotate_table,
    add_segment_size,
)

__version__ = "0.1.0"
