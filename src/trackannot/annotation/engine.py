# src/trackannot/annotation/engine.py
from __future__ import annotations
import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from ..errors import AnnotationCancelled, TrackLoadError, UnknownTrackError
from ..logutil import get_logger
from ..region import Region, parse_region
from ..track import FeatureElement, FeatureIndex, QueryMode, TrackRegistry
from .columns import derive_regions, resolve_coordinate_columns
from .request import AnnotationRequest, check_requests

log = get_logger()

# joins first-N and full-list values
LIST_SEPARATOR = ";"
CONDENSED_SEPARATOR = "--"


# ----------------------------
# Per-row aggregation
# ----------------------------

def _dedup_order_preserving(items: Iterable[str]) -> List[str]:
    """
    Deduplicate while preserving order.
    """
    seen: Set[str] = set()
    out: List[str] = []
    for x in items:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def feature_ids(hits: Iterable[FeatureElement], req: AnnotationRequest) -> List[str]:
    """Deduplicated identifiers of the hits, optionally sorted alphabetically."""
    if req.report_locations:
        ids = _dedup_order_preserving(str(e.location) for e in hits)
    else:
        ids = _dedup_order_preserving(e.symbol for e in hits)
    if req.report_alphabetical:
        ids.sort()
    return ids


def condense(ids: List[str], locations: bool) -> Optional[str]:
    """
    Summarize a list by its first and last entries ("A--Z", or "A" if they match).
    For location ids the smallest start and largest end of the two are reported.
    The first/last choice follows the list order, which for unsorted symbols is
    the index order of the hits.
    """
    if not ids:
        return None
    v1, v2 = ids[0], ids[-1]
    if locations:
        r1, r2 = parse_region(v1), parse_region(v2)
        v1 = str(min(r1.start, r2.start))
        v2 = str(max(r1.end, r2.end))
    if v1 == v2:
        return v1
    return f"{v1}{CONDENSED_SEPARATOR}{v2}"


def aggregate(ids: List[str], req: AnnotationRequest) -> List[object]:
    """Cell values for the request's columns, in the order of req.column_names()."""
    values: List[object] = []
    if req.report_count:
        values.append(len(ids))
    if req.report_first_n:
        values.append(LIST_SEPARATOR.join(ids[:req.first_n_limit]) if ids else None)
    if req.report_condensed:
        values.append(condense(ids, req.report_locations))
    if req.report_all:
        values.append(LIST_SEPARATOR.join(ids) if ids else None)
    return values


# ----------------------------
# Track preparation
# ----------------------------

def _prepare_indexes(
    requests: Tuple[AnnotationRequest, ...],
    registry: TrackRegistry,
) -> Tuple[Dict[str, FeatureIndex], Dict[str, str]]:
    """
    Fetch the index of every enabled track once. Unknown tracks abort the run;
    tracks that fail to load are excluded and reported.
    """
    for r in requests:
        if r.enabled and r.track not in registry:
            raise UnknownTrackError(r.track)

    indexes: Dict[str, FeatureIndex] = {}
    failures: Dict[str, str] = {}
    for r in requests:
        if not r.enabled:
            continue
        try:
            indexes[r.track] = registry.get_index(r.track)
        except TrackLoadError as e:
            log.error("%s; its columns are left empty.", e)
            failures[r.track] = str(e)
    return indexes, failures


# ----------------------------
# Core annotation
# ----------------------------

def annotate_table(
    df: pd.DataFrame,
    requests: List[AnnotationRequest],
    registry: TrackRegistry,
    mode: QueryMode = QueryMode.OVERLAP,
    cancel: Optional[threading.Event] = None,
) -> Tuple[pd.DataFrame, Dict[str, str]]:
    """
    Annotate each row of df with features of the requested tracks.

    Original columns are kept as they are; for each enabled request the columns
    num.<track>, first.<N>.<track>, condensed.<track> and <track> are appended
    as selected. Rows without usable coordinates keep missing values.

    Args:
        df:       Input table with a location/region column or chr/start/end columns.
        requests: Per-track options, in output order.
        registry: Track cache used to look up feature indexes.
        mode:     OVERLAP or CLOSEST.
        cancel:   Optional event checked between rows.

    Returns:
        (annotated table, {track: error message} for tracks that failed to load)

    Raises:
        NoCoordinateColumnsError: the table has no coordinate columns.
        UnknownTrackError:        a request names an unregistered track.
    """
    cols = resolve_coordinate_columns(df)
    reqs = check_requests(requests)
    active = [r for r in reqs if r.enabled]

    indexes, failures = _prepare_indexes(reqs, registry)
    regions = derive_regions(df, cols)

    out_cols: List[Tuple[str, str, List[object]]] = []
    for r in active:
        for k, name in enumerate(r.column_names()):
            dtype = "Int64" if r.report_count and k == 0 else "object"
            out_cols.append((name, dtype, [None] * len(df)))

    log.info("Annotating %d row(s) against %d track(s) (%s mode)...", len(df), len(active), mode.value)
    for i, region in enumerate(regions):
        if cancel is not None and cancel.is_set():
            raise AnnotationCancelled(f"Annotation cancelled at row {i}.")
        if region is None:
            continue
        c = 0
        for r in active:
            width = len(r.column_names())
            index = indexes.get(r.track)
            if index is not None:
                ids = feature_ids(index.query(region, mode), r)
                for k, v in enumerate(aggregate(ids, r)):
                    out_cols[c + k][2][i] = v
            c += width

    return _assemble(df, out_cols), failures


def _assemble(df: pd.DataFrame, out_cols) -> pd.DataFrame:
    ret = df.copy()
    for name, dtype, values in out_cols:
        ret.insert(len(ret.columns), name, pd.Series(values, index=df.index, dtype=dtype), allow_duplicates=True)
    return ret


def annotate_regions(
    regions: List[Region],
    requests: List[AnnotationRequest],
    registry: TrackRegistry,
    mode: QueryMode = QueryMode.OVERLAP,
) -> Tuple[pd.DataFrame, Dict[str, str]]:
    """Convenience wrapper: annotate a plain list of regions (one "location" column)."""
    df = pd.DataFrame({"location": [str(r) for r in regions]})
    return annotate_table(df, requests, registry, mode)
