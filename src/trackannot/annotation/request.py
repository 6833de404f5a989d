# src/trackannot/annotation/request.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_FIRST_N = 10


@dataclass(frozen=True)
class AnnotationRequest:
    """Which summary columns to produce for one track."""
    track: str
    enabled: bool = True
    report_all: bool = False
    report_alphabetical: bool = False
    report_count: bool = False
    report_first_n: bool = False
    first_n_limit: int = DEFAULT_FIRST_N
    report_locations: bool = False
    report_condensed: bool = False

    def __post_init__(self):
        if not self.track:
            raise ValueError("AnnotationRequest needs a track name.")
        if self.report_first_n and self.first_n_limit < 1:
            raise ValueError(f"first_n_limit must be >= 1 (got {self.first_n_limit}).")

    def column_names(self) -> List[str]:
        """Output columns in emission order: count, first-N, condensed, full list."""
        if not self.enabled:
            return []
        cols: List[str] = []
        if self.report_count:
            cols.append(f"num.{self.track}")
        if self.report_first_n:
            cols.append(f"first.{self.first_n_limit}.{self.track}")
        if self.report_condensed:
            cols.append(f"condensed.{self.track}")
        if self.report_all:
            cols.append(self.track)
        return cols


_FLAG_OPTS = {
    "count": "report_count",
    "all": "report_all",
    "alpha": "report_alphabetical",
    "alphabetical": "report_alphabetical",
    "condensed": "report_condensed",
    "condense": "report_condensed",
    "locations": "report_locations",
}


def parse_request_spec(spec: str) -> AnnotationRequest:
    """
    Parse a command-line track spec "NAME[:OPT[,OPT...]]".

    OPT is one of count, all, alpha(betical), condense(d), locations,
    first or first=N, off. Without options the full list ("all") is reported.
      "refseq:count,first=5" -> count and first.5.refseq columns
    """
    name, sep, opts = spec.rpartition(":")
    if not sep:
        name, opts = spec, ""
    name = name.strip()
    if not name:
        raise ValueError(f"Track spec has no track name: {spec!r}")

    kwargs = {}
    tokens = [t.strip().lower() for t in opts.split(",") if t.strip()]
    for tok in tokens:
        if tok in _FLAG_OPTS:
            kwargs[_FLAG_OPTS[tok]] = True
        elif tok == "off":
            kwargs["enabled"] = False
        elif tok == "first":
            kwargs["report_first_n"] = True
        elif tok.startswith("first="):
            try:
                kwargs["first_n_limit"] = int(tok.split("=", 1)[1])
            except ValueError:
                raise ValueError(f"Invalid first=N option in track spec: {spec!r}")
            kwargs["report_first_n"] = True
        else:
            raise ValueError(f"Unknown option '{tok}' in track spec: {spec!r}")

    if not any(kwargs.get(k) for k in ("report_count", "report_all", "report_first_n", "report_condensed")):
        kwargs["report_all"] = True
    return AnnotationRequest(name, **kwargs)


def check_requests(requests: List[AnnotationRequest]) -> Tuple[AnnotationRequest, ...]:
    """Reject a request list in which two entries share a track."""
    seen = set()
    for r in requests:
        if r.track in seen:
            raise ValueError(f"Track '{r.track}' is requested more than once.")
        seen.add(r.track)
    return tuple(requests)
