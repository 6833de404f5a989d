# src/trackannot/region/__init__.py

from .region import (
    Region,
    normalize_chrom,
    parse_region,
    is_region_like,
    overlaps,
)
