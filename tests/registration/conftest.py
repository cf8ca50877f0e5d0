"""Shared fixtures for the registration tests."""

from pathlib import Path

import numpy as np
import pytest

from src.common.scan_io import read_scanner_reports
from src.registration.transform import AxisMapping, all_orientations
from src.registration.vector import Point3D

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
EXAMPLE_REPORT = DATA_DIR / "scanner_reports_example.txt"


@pytest.fixture
def example_report_path():
    return EXAMPLE_REPORT


@pytest.fixture
def example_clouds():
    """The five-scanner example report."""
    return read_scanner_reports(EXAMPLE_REPORT)


def create_synthetic_scene(n_scanners=5, beacons_per_scanner=25, overlap=12, seed=0):
    """Create scanners arranged in a chain of overlaps.

    Scanner ``k`` sees ``beacons_per_scanner`` consecutive beacons of a
    random global set and shares exactly ``overlap`` of them with
    scanners ``k - 1`` and ``k + 1``; scanners further apart share none.
    Scanner 0 sits at the origin with identity orientation, the others
    get a random position and one of the 24 orientations.

    Returns
    -------
    dict
        ``clouds`` (beacons per scanner in local frames), ``beacons``
        (global set), ``positions`` (origins in scanner 0's frame) and
        ``orientations`` (local-to-global mapping per scanner).
    """
    rng = np.random.default_rng(seed)
    stride = beacons_per_scanner - overlap
    n_total = beacons_per_scanner + (n_scanners - 1) * stride

    beacons = []
    seen = set()
    while len(beacons) < n_total:
        p = Point3D.from_iterable(rng.integers(-1500, 1501, size=3))
        if p not in seen:
            seen.add(p)
            beacons.append(p)

    orientations = all_orientations()
    clouds, positions, mappings = [], {}, {}
    for k in range(n_scanners):
        if k == 0:
            position = Point3D(0, 0, 0)
            mapping = AxisMapping.identity()
        else:
            position = Point3D.from_iterable(rng.integers(-2000, 2001, size=3))
            mapping = orientations[int(rng.integers(len(orientations)))]
        to_local = mapping.inverse()
        visible = beacons[k * stride:k * stride + beacons_per_scanner]
        clouds.append([to_local.apply(b - position) for b in visible])
        positions[k] = position
        mappings[k] = mapping

    return {
        "clouds": clouds,
        "beacons": set(beacons),
        "positions": positions,
        "orientations": mappings,
    }


@pytest.fixture
def make_scene():
    """Factory fixture for :func:`create_synthetic_scene`."""
    return create_synthetic_scene
