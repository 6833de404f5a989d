# src/trackannot/track/bed.py
from __future__ import annotations
import os
import gzip
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import pysam

from ..errors import ParseError
from ..logutil import get_logger
from ..region import Region, normalize_chrom

log = get_logger()

# Feature names may carry an accessory id: "<symbol>;<accession>"
NAME_SEPARATOR = ";"


@dataclass(frozen=True)
class FeatureElement:
    name: str
    location: Region

    @property
    def symbol(self) -> str:
        """Leading component of the name, e.g. "BCL6;NM_001706" -> "BCL6"."""
        return self.name.split(NAME_SEPARATOR, 1)[0]


@dataclass(frozen=True)
class Track:
    name: str
    elements: Tuple[FeatureElement, ...] = ()
    metadata: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.elements)


# -------- utilities --------

def open_maybe_gzip(path: str | Path):
    path = str(path)
    return gzip.open(path, "rt", encoding="utf-8") if path.endswith(".gz") else open(path, "r", encoding="utf-8")


def track_stem(path: str | Path) -> str:
    """File name without the .bed / .bed.gz suffix."""
    name = Path(path).name
    for suffix in (".gz", ".bed"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def is_tabix_indexed(path: str | Path) -> bool:
    return str(path).endswith(".gz") and os.path.exists(str(path) + ".tbi")


def parse_track_line(line: str) -> Dict[str, str]:
    """
    Parse a UCSC track definition line into its attributes, e.g.
      track name="RefSeq" description="RefSeq genes" -> {"name": "RefSeq", "description": "RefSeq genes"}
    """
    attrs: Dict[str, str] = {}
    for tok in shlex.split(line.strip())[1:]:
        if "=" not in tok:
            continue
        k, v = tok.split("=", 1)
        attrs[k.strip()] = v.strip()
    return attrs


# -------- header & elements --------

def read_track_attributes(path: str | Path) -> Dict[str, str]:
    """Return the attributes of the track line, scanning only the header of the file."""
    if is_tabix_indexed(path):
        return {}
    with open_maybe_gzip(path) as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("browser"):
                continue
            if s.startswith("track"):
                return parse_track_line(s)
            break
    return {}


def read_track_name(path: str | Path) -> str:
    return read_track_info(path)[0]


def _element_from_fields(parts: List[str]) -> FeatureElement:
    loc = Region(normalize_chrom(parts[0]), int(parts[1]), int(parts[2]))
    name = parts[3].strip() if len(parts) > 3 and parts[3].strip() else str(loc)
    return FeatureElement(name, loc)


def _read_tabix(path: str | Path) -> List[FeatureElement]:
    elements: List[FeatureElement] = []
    with pysam.TabixFile(str(path)) as tbx:
        for rec in tbx.fetch(parser=pysam.asTuple()):
            parts = [rec[i] for i in range(len(rec))]
            elements.append(_element_from_fields(parts))
    return elements


def read_bed_elements(path: str | Path) -> List[FeatureElement]:
    """
    Read the features of a BED(+gz) file in file order.
    Columns: chrom, start (0-based), end (exclusive), optional name.
    Header lines (track/browser/#) are ignored; malformed rows are skipped.
    """
    if is_tabix_indexed(path):
        return _read_tabix(path)

    elements: List[FeatureElement] = []
    skipped = 0
    with open_maybe_gzip(path) as f:
        for line in f:
            s = line.rstrip("\r\n")
            if not s.strip() or s.startswith(("#", "track", "browser")):
                continue
            parts = s.split("\t")
            if len(parts) == 1:
                parts = s.split()
            if len(parts) < 3:
                skipped += 1
                continue
            try:
                elements.append(_element_from_fields(parts))
            except (ValueError, ParseError):
                skipped += 1
    if skipped:
        log.warning("Skipped %d malformed line(s) in %s", skipped, path)
    return elements


def read_track_info(path: str | Path) -> Tuple[str, Dict[str, str]]:
    """
    Name and metadata of a BED track file.
    The name comes from the track line, else the file stem. "source" is always
    the file path, replacing any source= attribute of the track line.
    """
    attrs = read_track_attributes(path)
    name = attrs.get("name") or track_stem(path)
    meta = dict(attrs)
    meta["name"] = name
    meta["source"] = str(path)
    return name, meta


def discover_bed_files(directory: str | Path) -> List[Path]:
    """All .bed and .bed.gz files directly inside directory, sorted by name."""
    d = Path(directory)
    files = [p for p in d.iterdir() if p.is_file() and (p.name.endswith(".bed") or p.name.endswith(".bed.gz"))]
    return sorted(files, key=lambda p: p.name)
