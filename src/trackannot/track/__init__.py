# src/trackannot/track/__init__.py

from .bed import (
    FeatureElement,
    Track,
    read_track_info,
    read_bed_elements,
    read_track_attributes,
    read_track_name,
    discover_bed_files,
)
from .index import FeatureIndex, QueryMode
from .registry import TrackRegistry
