"""Scanner alignment package.

This package reconstructs one shared frame from scanners that each
report beacon positions in their own axis-aligned frame.  It contains
the distance fingerprints, the correspondence finder, the axis mapping
and transform solver, the transform graph with its path search and
offset composition, and the merging of beacons into the reference
frame.  The pipeline module runs all steps in order.
"""

from .vector import Point3D
from .errors import (
    AlignmentError,
    InsufficientCorrespondencesError,
    AmbiguousAxisMappingError,
    DisconnectedSensorError,
    MalformedInputError,
)
from .fingerprint import DistanceFingerprint, build_fingerprint
from .correspondence import Correspondence, find_correspondences
from .transform import AxisMapping, PairTransform, apply_mapping, all_orientations, solve_transform
from .graph import TransformGraph, build_transform_graph
from .search import dfs, find_path, find_all_paths
from .composer import compose_offsets
from .merger import merge_beacons, scanner_positions, max_manhattan_distance

__all__ = [
    "Point3D",
    "AlignmentError",
    "InsufficientCorrespondencesError",
    "AmbiguousAxisMappingError",
    "DisconnectedSensorError",
    "MalformedInputError",
    "DistanceFingerprint",
    "build_fingerprint",
    "Correspondence",
    "find_correspondences",
    "AxisMapping",
    "PairTransform",
    "apply_mapping",
    "all_orientations",
    "solve_transform",
    "TransformGraph",
    "build_transform_graph",
    "dfs",
    "find_path",
    "find_all_paths",
    "compose_offsets",
    "merge_beacons",
    "scanner_positions",
    "max_manhattan_distance",
]
