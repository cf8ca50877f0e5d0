"""Distance fingerprints of beacon clouds.

The distances between beacons seen by one scanner do not depend on the
scanner's position or orientation, which makes them a fingerprint that
can be compared across scanners.  This module computes, for every
beacon in a cloud, the squared Euclidean distance to every beacon of
the same cloud.

Squared distances of integer coordinates are exact integers, so two
fingerprints can be compared with plain equality.  The distance from a
beacon to itself (zero) is kept in its row; the correspondence finder
relies on it when counting towards the overlap threshold.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .vector import Point3D


@dataclass(frozen=True, eq=False)
class DistanceFingerprint:
    """Pairwise squared distances between the distinct points of a cloud."""

    points: Tuple[Point3D, ...]
    """Distinct points of the cloud in sorted order."""

    sq_distances: np.ndarray
    """Matrix of shape (N, N); entry (i, j) is |points[i] - points[j]|²."""

    _index: Dict[Point3D, int] = field(init=False, repr=False, compare=False)
    _profiles: List[Tuple[np.ndarray, np.ndarray]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        object.__setattr__(self, "_index", {p: i for i, p in enumerate(self.points)})
        # Row profiles: sorted distinct distances and their multiplicities
        profiles = [np.unique(row, return_counts=True) for row in self.sq_distances]
        object.__setattr__(self, "_profiles", profiles)

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, point: Point3D) -> bool:
        return point in self._index

    def row(self, point: Point3D) -> np.ndarray:
        """Squared distances from ``point`` to every point of the cloud."""
        return self.sq_distances[self._index[point]]

    def profile(self, index: int) -> Tuple[np.ndarray, np.ndarray]:
        """Sorted distinct squared distances of row ``index`` and their counts."""
        return self._profiles[index]

    def distances(self, point: Point3D) -> List[Tuple[Point3D, float]]:
        """(other point, Euclidean distance) pairs for ``point``, self included."""
        row = self.row(point)
        return [(other, float(np.sqrt(d))) for other, d in zip(self.points, row)]

    def items(self) -> Iterable[Tuple[Point3D, List[Tuple[Point3D, float]]]]:
        for point in self.points:
            yield point, self.distances(point)


def build_fingerprint(cloud: Iterable[Point3D]) -> DistanceFingerprint:
    """Compute the distance fingerprint of a beacon cloud.

    Duplicate points collapse into one entry and the points are sorted,
    so the fingerprint only depends on the set of points in ``cloud``.

    Parameters
    ----------
    cloud : iterable of Point3D
        Beacon positions in one scanner's frame.

    Returns
    -------
    DistanceFingerprint
        Fingerprint with one row per distinct point.
    """
    points = tuple(sorted(set(cloud)))
    if not points:
        return DistanceFingerprint(points, np.zeros((0, 0), dtype=np.int64))
    coords = np.array([p.to_tuple() for p in points], dtype=np.int64)
    diff = coords[:, None, :] - coords[None, :, :]
    sq = np.einsum("ijk,ijk->ij", diff, diff)
    sq.setflags(write=False)
    return DistanceFingerprint(points, sq)
