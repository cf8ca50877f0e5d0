"""Fill in scanner offsets that were not measured directly.

Only overlapping scanners have a measured offset.  For a scanner ``j``
whose path to the reference runs through intermediate scanners, the
offset of ``j`` in each later scanner ``i`` of the path follows from the
previous one::

    offset(i, j) = offset(i, m) + mapping(m, i) applied to offset(m, j)

where ``m`` is the scanner preceding ``i`` on the path.
"""

from typing import Dict, List, Mapping, Tuple

from .graph import TransformGraph
from .transform import apply_mapping
from .vector import Point3D
from ..utils.logging import get_logger

logger = get_logger(__name__)


def compose_offsets(
    graph: TransformGraph, paths: Mapping[int, List[int]]
) -> Dict[Tuple[int, int], Point3D]:
    """Complete the offset table along every path.

    Parameters
    ----------
    graph : TransformGraph
        Graph of direct transforms.
    paths : mapping of int to list of int
        Path from each scanner to the reference, as returned by
        :func:`.search.find_all_paths`.

    Returns
    -------
    dict
        ``{(i, j): origin of j in i's frame}`` for all direct edges plus
        every ``(i, path[0])`` with ``i`` on the path.
    """
    offsets = graph.offsets()
    for start in sorted(paths):
        path = paths[start]
        j = path[0]
        for m, i in zip(path, path[1:]):
            if (i, j) in offsets:
                continue
            offsets[(i, j)] = offsets[(i, m)] + apply_mapping(offsets[(m, j)], graph.mapping(m, i))
            logger.debug("composed offset (%d, %d) via %d: %s", i, j, m, offsets[(i, j)])
    return offsets
