"""Find beacons seen by two scanners.

Two beacons, one from each scanner, are taken to be the same physical
beacon when their distance rows share at least ``min_support`` equal
entries.  With the self distance included in each row, a beacon that
lies in an overlap of 12 beacons matches exactly 12 entries.

Counting modes
--------------
lenient (default)
    Every equal pair of entries counts, so a distance value occurring
    twice in one row and once in the other contributes two matches.
strict
    A shared distance value contributes ``min(count_a, count_b)``
    matches, i.e. each beacon is matched at most once.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .fingerprint import DistanceFingerprint
from .vector import Point3D
from ..utils.logging import get_logger

logger = get_logger(__name__)

MIN_OVERLAP = 12


@dataclass(frozen=True, order=True)
class Correspondence:
    """A beacon as seen by scanner I (``source``) and scanner J (``target``)."""
    source: Point3D
    target: Point3D


def count_common_distances(
    profile_a, profile_b, strict: bool = False
) -> int:
    """Count matching entries between two row profiles.

    Parameters
    ----------
    profile_a, profile_b : tuple of numpy.ndarray
        ``(values, counts)`` as returned by
        :meth:`DistanceFingerprint.profile`.
    strict : bool, optional
        Use distinct-point counting instead of pairwise counting.

    Returns
    -------
    int
        Number of matching distance entries.
    """
    values_a, counts_a = profile_a
    values_b, counts_b = profile_b
    _, idx_a, idx_b = np.intersect1d(
        values_a, values_b, assume_unique=True, return_indices=True
    )
    if len(idx_a) == 0:
        return 0
    if strict:
        return int(np.minimum(counts_a[idx_a], counts_b[idx_b]).sum())
    return int((counts_a[idx_a] * counts_b[idx_b]).sum())


def find_correspondences(
    fingerprint_a: DistanceFingerprint,
    fingerprint_b: DistanceFingerprint,
    min_support: int = MIN_OVERLAP,
    strict: bool = False,
) -> List[Correspondence]:
    """Match the beacons of two scanners by their distance rows.

    Parameters
    ----------
    fingerprint_a, fingerprint_b : DistanceFingerprint
        Fingerprints of the two scanners' clouds.
    min_support : int, optional
        Number of matching distances required to accept a pair.
    strict : bool, optional
        Count each shared distance at most once per beacon.

    Returns
    -------
    list of Correspondence
        Accepted pairs, sorted.  Empty when the scanners do not overlap.
    """
    if min_support < 1:
        raise ValueError("min_support must be a positive integer")

    result: List[Correspondence] = []
    for i, point_a in enumerate(fingerprint_a.points):
        profile_a = fingerprint_a.profile(i)
        for j, point_b in enumerate(fingerprint_b.points):
            common = count_common_distances(profile_a, fingerprint_b.profile(j), strict)
            if common >= min_support:
                result.append(Correspondence(point_a, point_b))

    result.sort()
    logger.debug(
        "%d correspondences between clouds of %d and %d beacons",
        len(result), len(fingerprint_a), len(fingerprint_b),
    )
    return result

