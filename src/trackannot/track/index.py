# src/trackannot/track/index.py
from __future__ import annotations
from collections import defaultdict
from enum import Enum
from typing import Dict, Iterable, List, Tuple

import numpy as np

from ..region import Region, overlaps
from .bed import FeatureElement


class QueryMode(Enum):
    OVERLAP = "overlap"
    CLOSEST = "closest"


class _ChromBucket:
    """Elements of one chromosome sorted by (start, end) plus the search arrays."""

    __slots__ = ("elements", "starts", "max_ends")

    def __init__(self, elements: List[FeatureElement]):
        self.elements = sorted(elements, key=lambda e: (e.location.start, e.location.end))
        self.starts = np.fromiter((e.location.start for e in self.elements), dtype=np.int64, count=len(self.elements))
        ends = np.fromiter((e.location.end for e in self.elements), dtype=np.int64, count=len(self.elements))
        # running max of ends is non-decreasing, so it can be binary searched
        self.max_ends = np.maximum.accumulate(ends) if len(ends) else ends

    def bounds(self, region: Region) -> Tuple[int, int]:
        hi = int(np.searchsorted(self.starts, region.end, side="left"))
        lo = int(np.searchsorted(self.max_ends, region.start, side="right"))
        return lo, hi


class FeatureIndex:
    """
    Per-chromosome binary-search index over the features of one track.

    OVERLAP returns the features intersecting the query region.
    CLOSEST returns the search neighbourhood of the region: every candidate
    between the flanking features on either side, without an overlap test or a
    distance cutoff.
    """

    def __init__(self, elements: Iterable[FeatureElement]):
        groups: Dict[str, List[FeatureElement]] = defaultdict(list)
        for e in elements:
            groups[e.location.chrom].append(e)
        self._buckets: Dict[str, _ChromBucket] = {c: _ChromBucket(v) for c, v in groups.items()}
        self._size = sum(len(b.elements) for b in self._buckets.values())

    def __len__(self) -> int:
        return self._size

    def chromosomes(self) -> List[str]:
        return sorted(self._buckets)

    def query(self, region: Region, mode: QueryMode = QueryMode.OVERLAP) -> List[FeatureElement]:
        bucket = self._buckets.get(region.chrom)
        if bucket is None:
            return []
        lo, hi = bucket.bounds(region)
        if mode is QueryMode.CLOSEST:
            return bucket.elements[max(lo - 1, 0):min(hi + 1, len(bucket.elements))]
        return [e for e in bucket.elements[lo:hi] if overlaps(e.location, region)]
