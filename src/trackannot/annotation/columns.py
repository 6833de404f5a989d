# src/trackannot/annotation/columns.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import pandas as pd

from ..errors import NoCoordinateColumnsError, ParseError
from ..logutil import get_logger
from ..region import Region, is_region_like, parse_region

log = get_logger()

LOCATION_CANDIDATES = ("location", "region")
CHR_CANDIDATES = ("chr", "chrom", "chromosome")
START_CANDIDATES = ("start",)
END_CANDIDATES = ("end",)


@dataclass(frozen=True)
class CoordinateColumns:
    """Positional indexes of the coordinate column(s) of a table."""
    location: Optional[int] = None
    chrom: Optional[int] = None
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def uses_location(self) -> bool:
        return self.location is not None


def find_col_index(header: Iterable[Any], candidates: Iterable[str]) -> Optional[int]:
    """
    Find the index of a header column among a set of candidate names (case-insensitive).
    Returns None if not found.
    """
    cand = [c.strip().lower() for c in candidates]
    for i, h in enumerate(header):
        if str(h).strip().lower() in cand:
            return i
    return None


def _is_missing(v: Any) -> bool:
    if v is None or v is pd.NA:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    return isinstance(v, str) and v.strip() in ("", ".")


def resolve_coordinate_columns(df: pd.DataFrame, location_candidates=LOCATION_CANDIDATES) -> CoordinateColumns:
    """
    Prefer a location/region column whose first (or second) row holds a region
    string; otherwise use separate chr, start and end columns.
    """
    loc = find_col_index(df.columns, location_candidates)
    if loc is not None:
        head = df.iloc[:2, loc].tolist()
        if not any(is_region_like(v) for v in head):
            loc = None
    if loc is not None:
        return CoordinateColumns(location=loc)

    chrom = find_col_index(df.columns, CHR_CANDIDATES)
    start = find_col_index(df.columns, START_CANDIDATES)
    end = find_col_index(df.columns, END_CANDIDATES)
    if chrom is None or start is None or end is None:
        raise NoCoordinateColumnsError(df.columns)
    return CoordinateColumns(chrom=chrom, start=start, end=end)


def row_region(row: List[Any], cols: CoordinateColumns) -> Optional[Region]:
    """Region of one row, or None when the row has no usable coordinates."""
    if cols.uses_location:
        v = row[cols.location]
        if _is_missing(v):
            return None
        return parse_region(str(v))
    c, s, e = row[cols.chrom], row[cols.start], row[cols.end]
    if _is_missing(c) or _is_missing(s) or _is_missing(e):
        return None
    return Region.from_fields(c, s, e)


def derive_regions(df: pd.DataFrame, cols: CoordinateColumns) -> List[Optional[Region]]:
    """One Region (or None for skipped rows) per table row, in row order."""
    regions: List[Optional[Region]] = []
    skipped = 0
    for i, row in enumerate(df.itertuples(index=False, name=None)):
        try:
            region = row_region(list(row), cols)
        except ParseError as e:
            log.debug("Row %d skipped: %s", i, e)
            region = None
        if region is None:
            skipped += 1
        regions.append(region)
    if skipped:
        log.info("%d of %d row(s) have no usable coordinates and were skipped", skipped, len(regions))
    return regions
