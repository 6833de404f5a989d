# src/trackannot/annotation/segment_size.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP

import pandas as pd

from ..region import Region
from .columns import derive_regions, resolve_coordinate_columns

SEGMENT_SIZE_COLUMN = "segment.size.kb"


def segment_size_kb(region: Region) -> float:
    """Region length in kb, rounded half-up to 2 decimals."""
    kb = Decimal(region.length) / Decimal(1000)
    return float(kb.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def add_segment_size(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with a segment.size.kb column appended."""
    cols = resolve_coordinate_columns(df)
    sizes = [None if r is None else segment_size_kb(r) for r in derive_regions(df, cols)]
    ret = df.copy()
    ret.insert(len(ret.columns), SEGMENT_SIZE_COLUMN,
               pd.Series(sizes, index=df.index, dtype="Float64"), allow_duplicates=True)
    return ret
