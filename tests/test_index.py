from conftest import feat

from trackannot.region import Region, overlaps
from trackannot.track import FeatureIndex, QueryMode


def names(hits):
    return [e.name for e in hits]


class TestOverlapQuery:

    def test_single_hit(self, genes):
        idx = FeatureIndex(genes.elements)
        assert names(idx.query(Region("chr1", 100, 200), QueryMode.OVERLAP)) == ["A;NM_1"]

    def test_default_mode_is_overlap(self, genes):
        idx = FeatureIndex(genes.elements)
        assert names(idx.query(Region("chr1", 100, 200))) == ["A;NM_1"]

    def test_no_hit_is_empty(self, genes):
        idx = FeatureIndex(genes.elements)
        assert idx.query(Region("chr1", 300, 400)) == []

    def test_unknown_chromosome(self, genes):
        idx = FeatureIndex(genes.elements)
        assert idx.query(Region("chr9", 0, 1000)) == []

    def test_empty_index(self):
        idx = FeatureIndex([])
        assert len(idx) == 0
        assert idx.query(Region("chr1", 0, 10), QueryMode.CLOSEST) == []

    def test_long_feature_starting_far_left(self):
        elements = [
            feat("LONG", "chr1", 0, 10000),
            feat("S1", "chr1", 100, 200),
            feat("S2", "chr1", 300, 400),
            feat("S3", "chr1", 6000, 6100),
        ]
        idx = FeatureIndex(elements)
        assert names(idx.query(Region("chr1", 5000, 5500))) == ["LONG"]

    def test_sorted_by_start(self):
        elements = [feat("B", "chr1", 50, 60), feat("A", "chr1", 10, 20), feat("C", "chr1", 15, 55)]
        idx = FeatureIndex(elements)
        assert names(idx.query(Region("chr1", 0, 100))) == ["A", "C", "B"]

    def test_half_open_boundaries(self):
        idx = FeatureIndex([feat("A", "chr1", 100, 200)])
        assert idx.query(Region("chr1", 200, 300)) == []
        assert idx.query(Region("chr1", 0, 100)) == []
        assert names(idx.query(Region("chr1", 199, 200))) == ["A"]

    def test_matches_brute_force(self):
        elements = [feat(f"F{i}", "chr1", s, s + w)
                    for i, (s, w) in enumerate([(0, 5), (3, 50), (10, 2), (12, 1), (40, 30), (41, 0), (90, 10)])]
        idx = FeatureIndex(elements)
        for qs in range(0, 110, 3):
            for qw in (0, 1, 7, 30):
                q = Region("chr1", qs, qs + qw)
                expected = sorted(e.name for e in elements if overlaps(e.location, q))
                assert sorted(names(idx.query(q))) == expected


class TestClosestQuery:

    def test_includes_non_overlapping_neighbour(self, genes):
        idx = FeatureIndex(genes.elements)
        assert names(idx.query(Region("chr1", 100, 200), QueryMode.CLOSEST)) == ["A;NM_1", "B;NM_2"]

    def test_gap_between_features(self, genes):
        idx = FeatureIndex(genes.elements)
        assert names(idx.query(Region("chr1", 300, 400), QueryMode.CLOSEST)) == ["A;NM_1", "B;NM_2"]

    def test_before_first_and_after_last(self, genes):
        idx = FeatureIndex(genes.elements)
        assert names(idx.query(Region("chr1", 0, 10), QueryMode.CLOSEST)) == ["A;NM_1"]
        assert names(idx.query(Region("chr1", 700, 800), QueryMode.CLOSEST)) == ["B;NM_2"]

    def test_superset_of_overlap(self, genes):
        idx = FeatureIndex(genes.elements)
        q = Region("chr1", 155, 550)
        assert set(names(idx.query(q))) <= set(names(idx.query(q, QueryMode.CLOSEST)))


class TestIndexInfo:

    def test_len_and_chromosomes(self, genes):
        idx = FeatureIndex(genes.elements)
        assert len(idx) == 3
        assert idx.chromosomes() == ["chr1", "chr2"]
