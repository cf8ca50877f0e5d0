"""Unit tests for axis mappings and the transform solver."""

import numpy as np
import pytest

from src.registration.correspondence import Correspondence, find_correspondences
from src.registration.errors import AmbiguousAxisMappingError, InsufficientCorrespondencesError
from src.registration.fingerprint import build_fingerprint
from src.registration.transform import (
    AxisMapping,
    PairTransform,
    all_orientations,
    apply_mapping,
    derive_axis_mappings,
    solve_transform,
)
from src.registration.vector import Point3D


class TestAxisMapping:
    """Test suite for AxisMapping."""

    def test_apply_mapping_examples(self):
        """x -> -z, y -> x, z -> -y and its reciprocal."""
        v1_to_v2 = Point3D(3, -1, 2)
        v2_to_v1 = Point3D(1, 2, 3)
        m_12 = AxisMapping(((2, -1), (0, 1), (1, -1)))
        m_21 = AxisMapping(((1, 1), (2, -1), (0, -1)))

        assert apply_mapping(v1_to_v2, m_12) == -v2_to_v1
        assert apply_mapping(v2_to_v1, m_21) == -v1_to_v2
        assert m_12.inverse() == m_21

    def test_walk_between_scanners(self):
        """A beacon seen from two scanners related by a swap of x and y."""
        beacon = Point3D(3, 4, 5)
        scanner1 = Point3D(1, 1, 1)
        scanner2 = Point3D(5, 5, 5)
        m = AxisMapping(((1, -1), (0, -1), (2, -1)))

        scanner2_from_1 = scanner2 - scanner1
        beacon_from_1 = beacon - scanner1
        beacon_from_2 = Point3D(1, 2, 0)

        assert apply_mapping(beacon_from_1 - scanner2_from_1, m) == beacon_from_2
        assert scanner2_from_1 + apply_mapping(beacon_from_2, m.inverse()) == beacon_from_1

    def test_twenty_four_rotations(self):
        orientations = all_orientations()

        assert len(orientations) == 24
        assert len(set(orientations)) == 24
        assert all(m.determinant == 1 for m in orientations)
        assert AxisMapping.identity() in orientations

    def test_round_trip_through_inverse(self):
        vectors = [Point3D(1, 2, 3), Point3D(-7, 0, 11), Point3D(404, -588, -901)]
        for m in all_orientations():
            for v in vectors:
                assert apply_mapping(apply_mapping(v, m), m.inverse()) == v

    def test_matrix_matches_apply(self):
        v = Point3D(2, -3, 5)
        for m in all_orientations():
            expected = np.array(m.apply(v).to_tuple())
            assert np.array_equal(m.to_matrix() @ np.array(v.to_tuple()), expected)

    def test_reflection_is_not_rotation(self):
        assert not AxisMapping(((0, -1), (1, 1), (2, 1))).is_rotation

    def test_rejects_non_bijection(self):
        with pytest.raises(AmbiguousAxisMappingError):
            AxisMapping(((0, 1), (0, -1), (2, 1)))

    def test_rejects_zero_sign(self):
        with pytest.raises(AmbiguousAxisMappingError):
            AxisMapping(((0, 1), (1, 0), (2, 1)))


class TestDeriveAxisMappings:
    """Test suite for derive_axis_mappings."""

    def test_derives_both_directions(self):
        m = AxisMapping(((2, -1), (0, 1), (1, -1)))
        delta_a = Point3D(10, -20, 35)
        forward, backward = derive_axis_mappings(delta_a, m.apply(delta_a))

        assert forward == m
        assert backward == m.inverse()

    def test_zero_component_is_ambiguous(self):
        with pytest.raises(AmbiguousAxisMappingError):
            derive_axis_mappings(Point3D(0, 5, 7), Point3D(5, 0, 7))

    def test_repeated_magnitude_is_ambiguous(self):
        with pytest.raises(AmbiguousAxisMappingError):
            derive_axis_mappings(Point3D(5, 5, 7), Point3D(5, -5, 7))

    def test_unmatched_axis_is_ambiguous(self):
        with pytest.raises(AmbiguousAxisMappingError):
            derive_axis_mappings(Point3D(1, 2, 3), Point3D(1, 2, 4))


class TestSolveTransform:
    """Test suite for solve_transform."""

    def test_example_scanners_0_and_1(self, example_clouds):
        common = find_correspondences(
            build_fingerprint(example_clouds[0]), build_fingerprint(example_clouds[1])
        )
        to_0, to_1 = solve_transform(common, 0, 1)

        assert isinstance(to_0, PairTransform)
        assert (to_0.source, to_0.target) == (1, 0)
        assert (to_1.source, to_1.target) == (0, 1)
        assert to_0.offset == Point3D(68, -1246, -43)
        assert to_0.mapping == AxisMapping(((0, -1), (1, 1), (2, -1)))
        assert to_1.mapping == to_0.mapping.inverse()
        for c in common:
            assert to_0.apply(c.target) == c.source
            assert to_1.apply(c.source) == c.target

    def test_round_trip_beacon(self, example_clouds):
        common = find_correspondences(
            build_fingerprint(example_clouds[0]), build_fingerprint(example_clouds[1])
        )
        to_0, to_1 = solve_transform(common, 0, 1)

        for beacon in example_clouds[1]:
            assert to_1.apply(to_0.apply(beacon)) == beacon

    def test_skips_degenerate_first_pair(self):
        """The first two correspondences share a coordinate; later ones resolve it."""
        m = AxisMapping(((1, 1), (2, -1), (0, -1)))
        offset = Point3D(100, -50, 25)
        sources = [Point3D(0, 0, 0), Point3D(10, 0, 5), Point3D(3, 17, 29), Point3D(-8, 40, 2)]
        to_local = m.inverse()
        common = [Correspondence(s, to_local.apply(s - offset)) for s in sources]

        to_source, _ = solve_transform(common, 0, 1, min_support=4)

        assert to_source.offset == offset
        assert to_source.mapping == m

    def test_insufficient_correspondences(self):
        with pytest.raises(InsufficientCorrespondencesError):
            solve_transform([Correspondence(Point3D(1, 2, 3), Point3D(3, 2, 1))])

    def test_all_pairs_degenerate(self):
        common = [
            Correspondence(Point3D(0, 0, 0), Point3D(0, 0, 0)),
            Correspondence(Point3D(5, 5, 5), Point3D(5, 5, 5)),
        ]
        with pytest.raises(AmbiguousAxisMappingError):
            solve_transform(common, 0, 1, min_support=2)

    def test_reflection_is_rejected(self):
        mirror = AxisMapping(((0, -1), (1, 1), (2, 1)))
        sources = [Point3D(0, 0, 0), Point3D(1, 2, 3), Point3D(7, -11, 13)]
        common = [Correspondence(s, mirror.apply(s)) for s in sources]

        with pytest.raises(AmbiguousAxisMappingError):
            solve_transform(common, 0, 1, min_support=3)

    def test_fewer_than_min_support_is_insufficient(self):
        """A consistent but small set is still refused below min_support."""
        m = AxisMapping(((1, 1), (2, -1), (0, -1)))
        offset = Point3D(100, -50, 25)
        sources = [Point3D(0, 0, 0), Point3D(3, 17, 29), Point3D(-8, 40, 2)]
        to_local = m.inverse()
        common = [Correspondence(s, to_local.apply(s - offset)) for s in sources]

        with pytest.raises(InsufficientCorrespondencesError):
            solve_transform(common, 0, 1)
        to_source, _ = solve_transform(common, 0, 1, min_support=3)
        assert to_source.offset == offset
