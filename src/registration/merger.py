"""Merge all beacons into the reference frame and compute metrics."""

from typing import Dict, Iterable, Mapping, Sequence, Set, Tuple

import numpy as np

from .graph import TransformGraph
from .transform import apply_mapping
from .vector import ORIGIN, Point3D


def to_reference_frame(
    point: Point3D,
    path: Sequence[int],
    graph: TransformGraph,
    offsets: Mapping[Tuple[int, int], Point3D],
) -> Point3D:
    """Carry ``point`` from the frame of ``path[0]`` along ``path``.

    At each hop ``(a, b)`` the point is rotated into ``b``'s frame and
    shifted by the origin of ``a`` as seen from ``b``.
    """
    current = point
    for a, b in zip(path, path[1:]):
        current = apply_mapping(current, graph.mapping(a, b)) + offsets[(b, a)]
    return current


def merge_beacons(
    clouds: Sequence[Iterable[Point3D]],
    graph: TransformGraph,
    offsets: Mapping[Tuple[int, int], Point3D],
    paths: Mapping[int, Sequence[int]],
    reference: int = 0,
) -> Set[Point3D]:
    """Express every beacon in the reference frame and deduplicate.

    Parameters
    ----------
    clouds : sequence of iterables of Point3D
        Beacons per scanner in the scanner's own frame.
    graph : TransformGraph
        Graph of direct transforms.
    offsets : mapping
        Offset table; the direct offsets are sufficient.
    paths : mapping of int to sequence of int
        Path to the reference for every non-reference scanner.
    reference : int, optional
        Scanner whose frame is used.

    Returns
    -------
    set of Point3D
        Unique beacon positions in the reference frame.
    """
    beacons: Set[Point3D] = set(clouds[reference])
    for scanner, cloud in enumerate(clouds):
        if scanner == reference:
            continue
        path = paths[scanner]
        beacons.update(to_reference_frame(p, path, graph, offsets) for p in cloud)
    return beacons


def scanner_positions(
    offsets: Mapping[Tuple[int, int], Point3D], n_scanners: int, reference: int = 0
) -> Dict[int, Point3D]:
    """Origin of every scanner in the reference frame."""
    positions = {}
    for scanner in range(n_scanners):
        if scanner == reference:
            positions[scanner] = ORIGIN
        else:
            positions[scanner] = offsets[(reference, scanner)]
    return positions


def max_manhattan_distance(positions: Iterable[Point3D]) -> int:
    """Largest Manhattan distance between any two positions.

    Returns 0 for fewer than two positions.
    """
    coords = np.array([p.to_tuple() for p in positions], dtype=np.int64).reshape(-1, 3)
    if len(coords) < 2:
        return 0
    dists = np.abs(coords[:, None, :] - coords[None, :, :]).sum(axis=-1)
    return int(dists.max())
