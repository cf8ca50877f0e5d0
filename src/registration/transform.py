"""Axis mappings and pairwise transform recovery.

Scanners are only ever rotated in multiples of 90 degrees, so the
rotation between two scanner frames is a permutation of the axes with a
sign per axis.  :class:`AxisMapping` stores it as data: entry ``i`` is
``(target_axis, sign)``, meaning that axis ``i`` of the source frame is
axis ``target_axis`` of the destination frame scaled by ``sign``.

Given a list of correspondences between scanners I and J, the walk from
one shared beacon to another is the same vector in both frames, up to
that permutation and those signs.  Matching the absolute components of
the two walks yields the mapping; one shared beacon then fixes the
translation.
"""

from dataclasses import dataclass
from itertools import combinations, permutations, product
from typing import List, Sequence, Tuple

import numpy as np

from .correspondence import Correspondence, MIN_OVERLAP
from .errors import AmbiguousAxisMappingError, InsufficientCorrespondencesError
from .vector import Point3D
from ..utils.logging import get_logger

logger = get_logger(__name__)

AxisEntry = Tuple[int, int]


@dataclass(frozen=True)
class AxisMapping:
    """Signed axis permutation taking vectors from one frame to another."""

    axes: Tuple[AxisEntry, AxisEntry, AxisEntry]

    def __post_init__(self):
        if len(self.axes) != 3:
            raise ValueError("an axis mapping needs exactly three entries")
        targets = sorted(target for target, _ in self.axes)
        if targets != [0, 1, 2]:
            raise AmbiguousAxisMappingError(
                f"axis mapping {self.axes} is not a bijection over the axes"
            )
        if any(sign not in (1, -1) for _, sign in self.axes):
            raise AmbiguousAxisMappingError(
                f"axis mapping {self.axes} has a sign other than +1/-1"
            )

    def __getitem__(self, axis: int) -> AxisEntry:
        return self.axes[axis]

    def apply(self, v: Point3D) -> Point3D:
        """Express ``v`` in the destination frame."""
        out = [0, 0, 0]
        for i, (target, sign) in enumerate(self.axes):
            out[target] = v[i] * sign
        return Point3D(out[0], out[1], out[2])

    def inverse(self) -> "AxisMapping":
        inv = [(0, 1)] * 3
        for i, (target, sign) in enumerate(self.axes):
            inv[target] = (i, sign)
        return AxisMapping(tuple(inv))

    def to_matrix(self) -> np.ndarray:
        """3x3 integer matrix ``R`` such that ``R @ v == apply(v)``."""
        matrix = np.zeros((3, 3), dtype=np.int64)
        for i, (target, sign) in enumerate(self.axes):
            matrix[target, i] = sign
        return matrix

    @property
    def determinant(self) -> int:
        return int(round(np.linalg.det(self.to_matrix())))

    @property
    def is_rotation(self) -> bool:
        """True for the 24 proper rotations, False for reflections."""
        return self.determinant == 1

    @classmethod
    def identity(cls) -> "AxisMapping":
        return cls(((0, 1), (1, 1), (2, 1)))


def apply_mapping(v: Point3D, mapping: AxisMapping) -> Point3D:
    """Map vector ``v`` from the source frame of ``mapping`` to its destination."""
    return mapping.apply(v)


def all_orientations() -> List[AxisMapping]:
    """The 24 axis-aligned rotations, in a fixed order."""
    result = []
    for perm in permutations(range(3)):
        for signs in product((1, -1), repeat=3):
            mapping = AxisMapping(tuple(zip(perm, signs)))
            if mapping.is_rotation:
                result.append(mapping)
    return result


@dataclass(frozen=True)
class PairTransform:
    """Rigid transform from scanner ``source``'s frame into ``target``'s.

    A point ``p`` seen by ``source`` is ``offset + mapping.apply(p)`` in
    ``target``'s frame; ``offset`` is therefore the origin of ``source``
    expressed in ``target``'s frame.
    """
    source: int
    target: int
    mapping: AxisMapping
    offset: Point3D

    def apply(self, point: Point3D) -> Point3D:
        return self.offset + self.mapping.apply(point)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def derive_axis_mappings(
    delta_a: Point3D, delta_b: Point3D
) -> Tuple[AxisMapping, AxisMapping]:
    """Derive the mappings between two frames from one walk seen in both.

    Parameters
    ----------
    delta_a : Point3D
        Walk between two shared beacons in frame A.
    delta_b : Point3D
        The same walk in frame B.

    Returns
    -------
    tuple of AxisMapping
        ``(a_to_b, b_to_a)``.

    Raises
    ------
    AmbiguousAxisMappingError
        If an axis has a zero component, matches no axis or more than one
        axis of the other frame, or the two mappings are not inverses.
    """
    a_to_b: List[AxisEntry] = []
    b_to_a: List[AxisEntry] = [None, None, None]
    for i in range(3):
        if delta_a[i] == 0:
            raise AmbiguousAxisMappingError(f"walk {delta_a} has a zero component on axis {i}")
        matches = [j for j in range(3) if abs(delta_a[i]) == abs(delta_b[j])]
        if len(matches) != 1:
            raise AmbiguousAxisMappingError(
                f"axis {i} of {delta_a} matches {len(matches)} axes of {delta_b}"
            )
        j = matches[0]
        sign = _sign(delta_a[i]) * _sign(delta_b[j])
        a_to_b.append((j, sign))
        b_to_a[j] = (i, sign)
    if any(entry is None for entry in b_to_a):
        raise AmbiguousAxisMappingError(f"walks {delta_a} and {delta_b} leave an axis unbound")

    forward = AxisMapping(tuple(a_to_b))
    backward = AxisMapping(tuple(b_to_a))
    if forward.inverse() != backward:
        raise AmbiguousAxisMappingError(f"mappings {forward.axes} and {backward.axes} are not inverses")
    return forward, backward


def _solve_from_pair(
    first: Correspondence, second: Correspondence, source: int, target: int
) -> Tuple[PairTransform, PairTransform]:
    a0, b0 = first.source, first.target
    delta_a = second.source - a0
    delta_b = second.target - b0
    a_to_b, b_to_a = derive_axis_mappings(delta_a, delta_b)
    if not a_to_b.is_rotation:
        raise AmbiguousAxisMappingError(f"mapping {a_to_b.axes} is a reflection")

    # b0 seen from A is a0, so the origin of B in A is a0 - M_ba(b0)
    b_in_a = a0 - b_to_a.apply(b0)
    a_in_b = b0 - a_to_b.apply(a0)
    return (
        PairTransform(source=target, target=source, mapping=b_to_a, offset=b_in_a),
        PairTransform(source=source, target=target, mapping=a_to_b, offset=a_in_b),
    )


def solve_transform(
    correspondences: Sequence[Correspondence],
    source: int = 0,
    target: int = 1,
    min_support: int = MIN_OVERLAP,
) -> Tuple[PairTransform, PairTransform]:
    """Recover the transforms between two scanners from shared beacons.

    Pairs of correspondences are tried in order until one yields an
    axis mapping that is a proper rotation and whose transform maps
    enough of the correspondences exactly.

    Parameters
    ----------
    correspondences : sequence of Correspondence
        Shared beacons; ``source`` points are in scanner ``source``'s
        frame and ``target`` points in scanner ``target``'s frame.
    source, target : int
        Scanner indices, used to label the returned transforms.
    min_support : int, optional
        Number of correspondences the transform has to reproduce.  Fewer
        correspondences than this (or than two) are rejected outright.

    Returns
    -------
    tuple of PairTransform
        ``(target -> source, source -> target)``.  The first carries the
        origin of ``target`` in ``source``'s frame, the second the origin
        of ``source`` in ``target``'s frame.

    Raises
    ------
    InsufficientCorrespondencesError
        Fewer than ``max(2, min_support)`` correspondences were given.
    AmbiguousAxisMappingError
        No pair of correspondences produced a consistent transform.
    """
    required = max(2, min_support)
    if len(correspondences) < required:
        raise InsufficientCorrespondencesError(
            f"scanners {source} and {target} share {len(correspondences)} "
            f"correspondence(s); at least {required} are needed"
        )

    last_error = None
    for first, second in combinations(correspondences, 2):
        try:
            to_source, to_target = _solve_from_pair(first, second, source, target)
        except AmbiguousAxisMappingError as err:
            last_error = err
            continue
        explained = sum(1 for c in correspondences if to_source.apply(c.target) == c.source)
        if explained >= required:
            logger.debug(
                "scanners %d-%d: mapping %s, offset %s (%d/%d correspondences)",
                source, target, to_target.mapping.axes, to_source.offset,
                explained, len(correspondences),
            )
            return to_source, to_target
        last_error = AmbiguousAxisMappingError(
            f"transform explains {explained} of {len(correspondences)} correspondences"
        )
        logger.warning(
            "scanners %d-%d: rejected candidate mapping %s (%s)",
            source, target, to_target.mapping.axes, last_error,
        )

    raise AmbiguousAxisMappingError(
        f"no consistent axis mapping between scanners {source} and {target}: {last_error}"
    )
