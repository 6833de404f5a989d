# src/trackannot/annotation/__init__.py

from .request import AnnotationRequest, parse_request_spec
from .columns import CoordinateColumns, resolve_coordinate_columns, derive_regions
from .engine import (
    feature_ids,
    condense,
    aggregate,
    annotate_table,
    annotate_regions,
)
from .segment_size import add_segment_size, segment_size_kb, SEGMENT_SIZE_COLUMN
