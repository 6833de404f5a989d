import gzip

import pysam
import pytest

from trackannot.track import TrackRegistry, discover_bed_files, read_bed_elements, read_track_info, read_track_name
from trackannot.region import Region

BED = (
    'browser position chr1:1-1000\n'
    'track name="RefSeq" description="RefSeq genes"\n'
    '# comment\n'
    'chr1\t100\t200\tBCL6;NM_001706\t0\t+\n'
    'chr1\t50\t80\tMYC;NM_002467\n'
    'chr2\t10\t20\n'
    'chr2\tbad\t20\tBROKEN\n'
    '\n'
)


@pytest.fixture
def bed_path(tmp_path):
    p = tmp_path / "refseq.bed"
    p.write_text(BED)
    return p


def test_read_elements(bed_path):
    elements = read_bed_elements(bed_path)
    assert [e.name for e in elements] == ["BCL6;NM_001706", "MYC;NM_002467", "chr2:10-20"]
    assert elements[0].location == Region("chr1", 100, 200)
    assert elements[0].symbol == "BCL6"


def test_gzip(tmp_path):
    p = tmp_path / "genes.bed.gz"
    with gzip.open(p, "wt") as f:
        f.write(BED)
    assert len(read_bed_elements(p)) == 3
    assert read_track_name(p) == "RefSeq"


def test_track_info(bed_path):
    name, meta = read_track_info(bed_path)
    assert name == "RefSeq"
    assert meta == {"name": "RefSeq", "description": "RefSeq genes", "source": str(bed_path)}


def test_registry_source_is_file_path(tmp_path):
    p = tmp_path / "genes.bed"
    p.write_text('track name="genes" source="UCSC"\nchr1\t1\t2\tA\n')
    reg = TrackRegistry()
    assert reg.add_bed(p) == "genes"
    assert reg.metadata("genes") == read_track_info(p)[1]
    assert reg.metadata("genes")["source"] == str(p)
    assert len(reg.get_track("genes")) == 1


def test_name_falls_back_to_stem(tmp_path):
    p = tmp_path / "cpg_islands.bed"
    p.write_text("chr1\t1\t2\tcpg\n")
    assert read_track_name(p) == "cpg_islands"


def test_space_separated(tmp_path):
    p = tmp_path / "spaces.bed"
    p.write_text("chr1 5 9 X\n")
    assert [e.name for e in read_bed_elements(p)] == ["X"]


def test_tabix(tmp_path):
    p = tmp_path / "indexed.bed"
    p.write_text("chr1\t50\t80\tMYC\nchr1\t100\t200\tBCL6\n")
    gz = pysam.tabix_index(str(p), preset="bed", force=True)
    assert [e.symbol for e in read_bed_elements(gz)] == ["MYC", "BCL6"]


def test_registry_from_directory(tmp_path, bed_path):
    (tmp_path / "notes.txt").write_text("ignored")
    other = tmp_path / "enh.bed"
    other.write_text("chr1\t120\t130\tE1\n")
    assert [p.name for p in discover_bed_files(tmp_path)] == ["enh.bed", "refseq.bed"]

    reg = TrackRegistry.from_directory(tmp_path)
    assert reg.names() == ["enh", "RefSeq"]
    assert reg.metadata("RefSeq")["source"] == str(bed_path)
    hits = reg.get_index("RefSeq").query(Region("chr1", 150, 160))
    assert [e.symbol for e in hits] == ["BCL6"]
