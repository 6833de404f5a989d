import pandas as pd
import pytest

from trackannot.region import Region
from trackannot.track import FeatureElement, Track, TrackRegistry


def feat(name, chrom, start, end):
    return FeatureElement(name, Region(chrom, start, end))


def make_track(name, data):
    """Track from a list of (feature name, chrom, start, end) tuples."""
    return Track(name, tuple(feat(*d) for d in data), {"name": name})


def make_registry(*tracks):
    reg = TrackRegistry()
    for t in tracks:
        reg.add_track(t)
    return reg


@pytest.fixture
def genes():
    return make_track("genes", [
        ("A;NM_1", "chr1", 150, 160),
        ("B;NM_2", "chr1", 500, 600),
        ("C", "chr2", 10, 20),
    ])


@pytest.fixture
def registry(genes):
    return make_registry(genes)


@pytest.fixture
def location_table():
    return pd.DataFrame({
        "id": ["r1", "r2", "r3"],
        "location": ["chr1:100-200", "chr1:300-400", "chr2:0-15"],
    })
