"""Graph of directly measured scanner-to-scanner transforms.

An edge ``(i, j)`` exists when scanners ``i`` and ``j`` share enough
beacons for their relative transform to be solved.  Both directions of
an edge are stored.  The graph is incomplete by construction: scanners
that do not overlap have no edge and are related through paths (see
:mod:`.search` and :mod:`.composer`).
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .correspondence import MIN_OVERLAP, find_correspondences
from .fingerprint import DistanceFingerprint
from .transform import AxisMapping, PairTransform, solve_transform
from .vector import Point3D
from ..utils.logging import get_logger

logger = get_logger(__name__)

Edge = Tuple[int, int]


@dataclass
class TransformGraph:
    """Directed edges between scanners with their transforms.

    ``mapping(i, j)`` takes vectors from scanner ``i``'s frame into
    scanner ``j``'s frame.  ``offset(i, j)`` is the origin of scanner
    ``j`` expressed in scanner ``i``'s frame.
    """

    n_scanners: int
    _mappings: Dict[Edge, AxisMapping] = field(default_factory=dict, repr=False)
    _offsets: Dict[Edge, Point3D] = field(default_factory=dict, repr=False)
    _support: Dict[Edge, int] = field(default_factory=dict, repr=False)

    def add_pair(
        self,
        to_first: PairTransform,
        to_second: PairTransform,
        support: int = 0,
    ) -> None:
        """Insert both directions of a solved scanner pair.

        Parameters
        ----------
        to_first : PairTransform
            Transform from the second scanner into the first.
        to_second : PairTransform
            Transform from the first scanner into the second.
        support : int, optional
            Number of correspondences behind the edge.
        """
        i, j = to_first.target, to_first.source
        if (to_second.source, to_second.target) != (i, j):
            raise ValueError("transforms do not describe the same scanner pair")
        for k in (i, j):
            if not 0 <= k < self.n_scanners:
                raise ValueError(f"scanner index {k} out of range")
        self._mappings[(i, j)] = to_second.mapping
        self._mappings[(j, i)] = to_first.mapping
        # Offset (i, j) is the origin of j in i's frame
        self._offsets[(i, j)] = to_first.offset
        self._offsets[(j, i)] = to_second.offset
        self._support[(i, j)] = support
        self._support[(j, i)] = support

    def has_edge(self, i: int, j: int) -> bool:
        return (i, j) in self._mappings

    def mapping(self, i: int, j: int) -> AxisMapping:
        return self._mappings[(i, j)]

    def offset(self, i: int, j: int) -> Point3D:
        return self._offsets[(i, j)]

    def support(self, i: int, j: int) -> int:
        return self._support[(i, j)]

    def edges(self) -> List[Edge]:
        """All directed edges in sorted order."""
        return sorted(self._mappings)

    def neighbours(self, i: int) -> List[int]:
        return [b for a, b in self.edges() if a == i]

    def offsets(self) -> Dict[Edge, Point3D]:
        """Copy of the directly measured offsets."""
        return dict(self._offsets)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges())

    def __len__(self) -> int:
        return len(self._mappings)


@dataclass(frozen=True)
class PairResult:
    """Outcome of matching one unordered scanner pair."""
    first: int
    second: int
    n_correspondences: int
    transforms: Optional[Tuple[PairTransform, PairTransform]]


def match_pair(
    fingerprints: Sequence[DistanceFingerprint],
    first: int,
    second: int,
    min_overlap: int = MIN_OVERLAP,
    strict: bool = False,
) -> PairResult:
    """Match two scanners and solve their transform if they overlap."""
    common = find_correspondences(
        fingerprints[first], fingerprints[second], min_support=min_overlap, strict=strict
    )
    if len(common) < min_overlap:
        if common:
            logger.debug(
                "scanners %d-%d: %d correspondences, below %d; no edge",
                first, second, len(common), min_overlap,
            )
        return PairResult(first, second, len(common), None)
    transforms = solve_transform(common, first, second, min_support=min_overlap)
    return PairResult(first, second, len(common), transforms)


def build_transform_graph(
    fingerprints: Sequence[DistanceFingerprint],
    min_overlap: int = MIN_OVERLAP,
    strict: bool = False,
    n_workers: int = 1,
    show_progress: bool = False,
) -> TransformGraph:
    """Build the graph of direct transforms between all scanner pairs.

    Pairs are matched independently, on worker threads when
    ``n_workers > 1``.  Results are collected first and inserted into
    the graph by the calling thread in sorted pair order, so the graph
    is identical for any number of workers.

    Parameters
    ----------
    fingerprints : sequence of DistanceFingerprint
        One fingerprint per scanner, indexed by scanner number.
    min_overlap : int, optional
        Matching distances required per correspondence, and the number of
        correspondences required for an edge.
    strict : bool, optional
        Use distinct-point counting in the correspondence finder.
    n_workers : int, optional
        Number of worker threads.
    show_progress : bool, optional
        Display a tqdm progress bar over scanner pairs.

    Returns
    -------
    TransformGraph
        Graph holding both directions of every solved pair.
    """
    if n_workers < 1:
        raise ValueError("n_workers must be at least 1")

    pairs = list(combinations(range(len(fingerprints)), 2))
    results: List[PairResult] = []
    if n_workers == 1:
        for i, j in tqdm(pairs, desc="Matching scanner pairs", disable=not show_progress):
            results.append(match_pair(fingerprints, i, j, min_overlap, strict))
    else:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = [
                executor.submit(match_pair, fingerprints, i, j, min_overlap, strict)
                for i, j in pairs
            ]
            for future in tqdm(futures, total=len(pairs), desc="Matching scanner pairs",
                               disable=not show_progress):
                results.append(future.result())

    graph = TransformGraph(n_scanners=len(fingerprints))
    for result in sorted(results, key=lambda r: (r.first, r.second)):
        if result.transforms is None:
            continue
        graph.add_pair(*result.transforms, support=result.n_correspondences)
        logger.debug(
            "edge %d-%d from %d correspondences",
            result.first, result.second, result.n_correspondences,
        )

    logger.info("Transform graph: %d scanners, %d direct edges", graph.n_scanners, len(graph) // 2)
    return graph
