"""Read scanner reports and write alignment results.

A scanner report lists, for each scanner, the beacons it detected in its
own frame::

    --- scanner 0 ---
    404,-588,-901
    528,-643,409

    --- scanner 1 ---
    686,422,578

Groups are separated by blank lines.  The first line of a group, or any
line starting with ``---``, is a header and only delimits the group.
"""

import re
from pathlib import Path
from typing import Iterable, List, Mapping

import pandas as pd

from ..registration.errors import MalformedInputError
from ..registration.vector import Point3D

_COORD_RE = re.compile(r"^\s*(-?[0-9]+)\s*,\s*(-?[0-9]+)\s*,\s*(-?[0-9]+)\s*$")


def parse_point(line: str, line_number=None) -> Point3D:
    """Parse an ``x,y,z`` line of signed integers."""
    match = _COORD_RE.match(line)
    if match is None:
        raise MalformedInputError(f"expected 'x,y,z' integers, got {line.strip()!r}", line_number)
    return Point3D(*(int(v) for v in match.groups()))


def parse_scanner_reports(text: str) -> List[List[Point3D]]:
    """Split a report into one beacon list per scanner.

    Parameters
    ----------
    text : str
        Full report contents.

    Returns
    -------
    list of list of Point3D
        Beacons per scanner, in report order.

    Raises
    ------
    MalformedInputError
        If a coordinate line is not three comma-separated integers.
    """
    clouds: List[List[Point3D]] = []
    current = None
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            current = None
            continue
        if current is None or line.lstrip().startswith("---"):
            # Header line opens a new group
            current = []
            clouds.append(current)
            continue
        current.append(parse_point(line, number))
    return clouds


def read_scanner_reports(path) -> List[List[Point3D]]:
    """Read a scanner report file.  See :func:`parse_scanner_reports`."""
    with open(Path(path), 'r', encoding='utf-8') as f:
        return parse_scanner_reports(f.read())


def beacons_to_frame(beacons: Iterable[Point3D]) -> pd.DataFrame:
    rows = [p.to_tuple() for p in sorted(beacons)]
    return pd.DataFrame(rows, columns=["x", "y", "z"], dtype="int64")


def export_beacons(beacons: Iterable[Point3D], path) -> Path:
    """Write beacon positions to CSV with columns x, y, z, sorted."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    beacons_to_frame(beacons).to_csv(out, index=False)
    return out


def export_scanner_positions(positions: Mapping[int, Point3D], path) -> Path:
    """Write scanner origins to CSV with columns scanner, x, y, z."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    rows = [(k, *positions[k].to_tuple()) for k in sorted(positions)]
    df = pd.DataFrame(rows, columns=["scanner", "x", "y", "z"], dtype="int64")
    df.to_csv(out, index=False)
    return out
