"""Unit tests for the correspondence finder."""

import random

import numpy as np
import pytest

from src.registration.correspondence import (
    Correspondence,
    count_common_distances,
    find_correspondences,
)
from src.registration.fingerprint import build_fingerprint
from src.registration.vector import Point3D

EXPECTED_IN_0 = {
    Point3D(-618, -824, -621), Point3D(-537, -823, -458), Point3D(-447, -329, 318),
    Point3D(404, -588, -901), Point3D(544, -627, -890), Point3D(528, -643, 409),
    Point3D(-661, -816, -575), Point3D(390, -675, -793), Point3D(423, -701, 434),
    Point3D(-345, -311, 381), Point3D(459, -707, 401), Point3D(-485, -357, 347),
}

EXPECTED_IN_1 = {
    Point3D(686, 422, 578), Point3D(605, 423, 415), Point3D(515, 917, -361),
    Point3D(-336, 658, 858), Point3D(-476, 619, 847), Point3D(-460, 603, -452),
    Point3D(729, 430, 532), Point3D(-322, 571, 750), Point3D(-355, 545, -477),
    Point3D(413, 935, -424), Point3D(-391, 539, -444), Point3D(553, 889, -390),
}


class TestFindCorrespondences:
    """Test suite for find_correspondences."""

    def test_example_scanners_0_and_1(self, example_clouds):
        """Scanners 0 and 1 of the example share exactly 12 beacons."""
        fp0 = build_fingerprint(example_clouds[0])
        fp1 = build_fingerprint(example_clouds[1])

        common = find_correspondences(fp0, fp1)

        assert len(common) == 12
        assert {c.source for c in common} == EXPECTED_IN_0
        assert {c.target for c in common} == EXPECTED_IN_1
        assert Correspondence(Point3D(-618, -824, -621), Point3D(686, 422, 578)) in common

    def test_fewer_than_twelve_shared_gives_nothing(self, example_clouds):
        """Scanners 0 and 4 share only 6 beacons."""
        fp0 = build_fingerprint(example_clouds[0])
        fp4 = build_fingerprint(example_clouds[4])

        assert find_correspondences(fp0, fp4) == []

    def test_order_independent(self, example_clouds):
        shuffled_0 = list(example_clouds[0])
        shuffled_1 = list(example_clouds[1])
        random.Random(42).shuffle(shuffled_0)
        random.Random(7).shuffle(shuffled_1)

        reference = find_correspondences(
            build_fingerprint(example_clouds[0]), build_fingerprint(example_clouds[1])
        )
        shuffled = find_correspondences(build_fingerprint(shuffled_0), build_fingerprint(shuffled_1))

        assert shuffled == reference

    def test_lower_threshold_on_partial_overlap(self, example_clouds):
        """With a threshold of 6 the 6 beacons shared by scanners 0 and 4 match."""
        common = find_correspondences(
            build_fingerprint(example_clouds[0]), build_fingerprint(example_clouds[4]), min_support=6
        )
        assert len({c.source for c in common}) >= 6

    def test_invalid_threshold(self):
        fp = build_fingerprint([Point3D(0, 0, 0)])
        with pytest.raises(ValueError):
            find_correspondences(fp, fp, min_support=0)


class TestCountCommonDistances:
    """Lenient and strict counting of shared distance values."""

    def test_lenient_multiplies_repeats(self):
        profile_a = (np.array([0, 5, 9]), np.array([1, 2, 1]))
        profile_b = (np.array([0, 5, 7]), np.array([1, 3, 1]))

        assert count_common_distances(profile_a, profile_b) == 1 + 2 * 3

    def test_strict_counts_each_beacon_once(self):
        profile_a = (np.array([0, 5, 9]), np.array([1, 2, 1]))
        profile_b = (np.array([0, 5, 7]), np.array([1, 3, 1]))

        assert count_common_distances(profile_a, profile_b, strict=True) == 1 + 2

    def test_no_shared_values(self):
        profile_a = (np.array([1, 2]), np.array([1, 1]))
        profile_b = (np.array([3, 4]), np.array([1, 1]))

        assert count_common_distances(profile_a, profile_b) == 0

    def test_strict_mode_on_example(self, example_clouds):
        fp0 = build_fingerprint(example_clouds[0])
        fp1 = build_fingerprint(example_clouds[1])

        assert find_correspondences(fp0, fp1, strict=True) == find_correspondences(fp0, fp1)
