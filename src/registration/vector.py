"""Integer 3-D vector used for beacon and scanner positions."""

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, order=True)
class Point3D:
    """Immutable integer point with vector arithmetic.

    Points compare and hash by value, so they can be collected in sets
    for deduplication and sorted for deterministic output.  Axis access
    uses ``p[0]``, ``p[1]`` and ``p[2]``.
    """
    x: int
    y: int
    z: int

    def __getitem__(self, axis: int) -> int:
        if axis == 0:
            return self.x
        if axis == 1:
            return self.y
        if axis == 2:
            return self.z
        raise IndexError(f"axis index out of range: {axis}")

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __add__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Point3D":
        return Point3D(-self.x, -self.y, -self.z)

    def norm_l1(self) -> int:
        """Manhattan length of the vector."""
        return abs(self.x) + abs(self.y) + abs(self.z)

    def distance_sq(self, other: "Point3D") -> int:
        """Exact squared Euclidean distance to ``other``."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance_l2(self, other: "Point3D") -> float:
        """Euclidean distance to ``other``."""
        return math.sqrt(self.distance_sq(other))

    def to_tuple(self):
        return (self.x, self.y, self.z)

    @classmethod
    def from_iterable(cls, values) -> "Point3D":
        """Build a point from any three integer-like values."""
        x, y, z = (int(v) for v in values)
        return cls(x, y, z)


ORIGIN = Point3D(0, 0, 0)
