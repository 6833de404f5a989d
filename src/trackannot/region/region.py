# src/trackannot/region/region.py
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any

from ..errors import ParseError

# <chrom>:<start>-<end>, optionally qualified by a leading "<genome>:"
_REGION_RE = re.compile(
    r"^\s*(?:(?P<genome>[^:\s]+):)?(?P<chrom>[^:\s]+):(?P<start>\d[\d,]*)-(?P<end>\d[\d,]*)\s*$"
)
_BARE_CHROM_RE = re.compile(r"^(?:\d+|X|Y|M|MT)$", re.IGNORECASE)


def normalize_chrom(token: Any) -> str:
    """
    Canonicalize a chromosome token so that table and track names compare equal.
      "CHR1" / "Chr1" -> "chr1"
      "1", "X", "MT"  -> "chr1", "chrX", "chrMT"
    Other contig names (e.g. "GL000192.1") are returned unchanged.
    """
    t = str(token).strip()
    if not t:
        raise ParseError("Empty chromosome name")
    if t[:3].lower() == "chr":
        rest = t[3:]
        if _BARE_CHROM_RE.match(rest):
            rest = rest.upper()
        return "chr" + rest
    if _BARE_CHROM_RE.match(t):
        return "chr" + t.upper()
    return t


def _to_coord(s: str) -> int:
    return int(s.replace(",", ""))


@dataclass(frozen=True)
class Region:
    """A chromosome-scoped, half-open interval [start, end)."""
    chrom: str
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0:
            raise ParseError(f"Negative start coordinate: {self.start}")
        if self.start > self.end:
            raise ParseError(f"Start {self.start} is greater than end {self.end}")

    def __str__(self) -> str:
        return f"{self.chrom}:{self.start}-{self.end}"

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: Region) -> bool:
        return overlaps(self, other)

    @classmethod
    def from_fields(cls, chrom: Any, start: Any, end: Any) -> Region:
        """Build a Region from separate chr/start/end values (numbers or numeric strings)."""
        try:
            s = int(float(str(start).replace(",", "")))
            e = int(float(str(end).replace(",", "")))
        except (TypeError, ValueError, OverflowError) as exc:
            raise ParseError(f"Non-numeric coordinates: {start!r}, {end!r}") from exc
        return cls(normalize_chrom(chrom), s, e)


def parse_region(text: Any) -> Region:
    """
    Parse a "chr:start-end" string into a Region.
    A genome qualifier ("hg19:chr1:100-200") and thousands separators are tolerated.

    str() of the result gives the canonical form, so only canonical input
    ("chr1:100-200") round-trips exactly; "1:1,000-2,000" comes back as
    "chr1:1000-2000".
    """
    if not isinstance(text, str):
        raise ParseError(f"Not a region string: {text!r}")
    m = _REGION_RE.match(text)
    if m is None:
        raise ParseError(f"Not a region string: {text!r}")
    return Region(normalize_chrom(m.group("chrom")), _to_coord(m.group("start")), _to_coord(m.group("end")))


def is_region_like(text: Any) -> bool:
    """Cheap check used to decide whether a column holds coordinates. Never raises."""
    if not isinstance(text, str):
        return False
    m = _REGION_RE.match(text)
    if m is None:
        return False
    return _to_coord(m.group("start")) <= _to_coord(m.group("end"))


def overlaps(a: Region, b: Region) -> bool:
    """True if a and b share at least one position on the same chromosome."""
    return a.chrom == b.chrom and a.start < b.end and b.start < a.end
