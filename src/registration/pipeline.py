"""Complete scanner alignment pipeline.

This module orchestrates the alignment of independent scanners into the
frame of one reference scanner: fingerprinting each cloud, matching
every scanner pair, solving the direct transforms, finding a path from
every scanner to the reference, composing the missing offsets and
finally merging all beacons.

Usage:
    python -m src.registration.pipeline --input scanners.txt --output output_dir/
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from .composer import compose_offsets
from .correspondence import MIN_OVERLAP
from .errors import AlignmentError
from .fingerprint import DistanceFingerprint, build_fingerprint
from .graph import TransformGraph, build_transform_graph
from .merger import max_manhattan_distance, merge_beacons, scanner_positions
from .search import find_all_paths
from .vector import Point3D
from ..common.scan_io import export_beacons, export_scanner_positions, read_scanner_reports
from ..utils.config import DEFAULT_CONFIG, load_config
from ..utils.logging import get_logger, set_level

logger = get_logger(__name__)


@dataclass
class AlignmentResult:
    """Outcome of aligning a set of scanners."""

    beacons: List[Point3D]
    """Unique beacons in the reference frame, sorted."""

    positions: Dict[int, Point3D]
    """Origin of every scanner in the reference frame."""

    paths: Dict[int, List[int]]
    """Chain of direct edges used to reach the reference, per scanner."""

    offsets: Dict[Tuple[int, int], Point3D] = field(repr=False)
    """Direct and composed offsets; (i, j) is the origin of j in i's frame."""

    max_manhattan: int = 0
    """Largest Manhattan distance between two scanner origins."""

    reference: int = 0

    @property
    def beacon_count(self) -> int:
        return len(self.beacons)

    def to_summary(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "scanners": len(self.positions),
            "unique_beacons": self.beacon_count,
            "max_manhattan_distance": self.max_manhattan,
            "scanner_positions": {str(k): list(v) for k, v in sorted(self.positions.items())},
            "paths": {str(k): v for k, v in sorted(self.paths.items())},
        }

    def save_summary(self, path: Path) -> None:
        """Save the summary to a JSON file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_summary(), f, indent=2)


class ScannerAlignmentPipeline:
    """Align scanner beacon reports into one reference frame."""

    _CONFIG_KEYS = ("min_overlap", "reference", "n_workers", "strict_matching",
                    "show_progress", "output_dir")

    def __init__(
        self,
        min_overlap: int = MIN_OVERLAP,
        reference: int = 0,
        n_workers: int = 1,
        strict_matching: bool = False,
        show_progress: bool = False,
        output_dir: Optional[Path] = None,
    ):
        """Initialize the alignment pipeline.

        Parameters
        ----------
        min_overlap : int, optional
            Matching distances required per correspondence (default 12).
        reference : int, optional
            Scanner whose frame the result is expressed in.
        n_workers : int, optional
            Worker threads for fingerprinting and pair matching.
        strict_matching : bool, optional
            Count shared distances per beacon at most once.
        show_progress : bool, optional
            Show a progress bar while matching scanner pairs.
        output_dir : Path, optional
            If given, results are exported there by :meth:`run`.
        """
        for name, value in (("min_overlap", min_overlap), ("reference", reference),
                            ("n_workers", n_workers)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name, value in (("strict_matching", strict_matching), ("show_progress", show_progress)):
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")
        if min_overlap < 2:
            raise ValueError("min_overlap must be at least 2")
        if n_workers < 1:
            raise ValueError("n_workers must be at least 1")
        self.min_overlap = min_overlap
        self.reference = reference
        self.n_workers = n_workers
        self.strict_matching = strict_matching
        self.show_progress = show_progress
        self.output_dir = Path(output_dir) if output_dir is not None else None

    @classmethod
    def from_config(cls, path=DEFAULT_CONFIG, **overrides) -> "ScannerAlignmentPipeline":
        """Create a pipeline from a YAML file, with keyword overrides."""
        cfg = load_config(str(path))
        unknown = set(cfg) - set(cls._CONFIG_KEYS)
        if unknown:
            raise ValueError(f"unknown configuration keys: {sorted(unknown)}")
        cfg.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**cfg)

    def step_1_fingerprints(self, clouds: Sequence[Sequence[Point3D]]) -> List[DistanceFingerprint]:
        """Step 1: Distance fingerprint per scanner."""
        logger.info("Step 1: Computing distance fingerprints for %d scanners", len(clouds))
        if self.n_workers > 1:
            with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
                return list(executor.map(build_fingerprint, clouds))
        return [build_fingerprint(cloud) for cloud in clouds]

    def step_2_build_graph(self, fingerprints: Sequence[DistanceFingerprint]) -> TransformGraph:
        """Step 2: Match every scanner pair and solve direct transforms."""
        logger.info("Step 2: Matching scanner pairs")
        return build_transform_graph(
            fingerprints,
            min_overlap=self.min_overlap,
            strict=self.strict_matching,
            n_workers=self.n_workers,
            show_progress=self.show_progress,
        )

    def step_3_find_paths(self, graph: TransformGraph) -> Dict[int, List[int]]:
        """Step 3: Path from every scanner to the reference."""
        logger.info("Step 3: Finding paths to reference scanner %d", self.reference)
        return find_all_paths(graph, self.reference)

    def step_4_compose_offsets(
        self, graph: TransformGraph, paths: Dict[int, List[int]]
    ) -> Dict[Tuple[int, int], Point3D]:
        """Step 4: Offsets for scanners without a direct edge to the reference."""
        logger.info("Step 4: Composing offsets along paths")
        offsets = compose_offsets(graph, paths)
        logger.info("  - %d direct, %d composed offsets", len(graph), len(offsets) - len(graph))
        return offsets

    def step_5_merge(
        self,
        clouds: Sequence[Sequence[Point3D]],
        graph: TransformGraph,
        offsets: Dict[Tuple[int, int], Point3D],
        paths: Dict[int, List[int]],
    ) -> AlignmentResult:
        """Step 5: Merge beacons and compute the scanner distance metric."""
        logger.info("Step 5: Merging beacons into the reference frame")
        beacons: Set[Point3D] = merge_beacons(clouds, graph, offsets, paths, self.reference)
        positions = scanner_positions(offsets, len(clouds), self.reference)
        result = AlignmentResult(
            beacons=sorted(beacons),
            positions=positions,
            paths=paths,
            offsets=offsets,
            max_manhattan=max_manhattan_distance(positions.values()),
            reference=self.reference,
        )
        logger.info("  - %d beacons reported, %d unique",
                    sum(len(c) for c in clouds), result.beacon_count)
        return result

    def step_6_export(self, result: AlignmentResult, output_dir: Path) -> None:
        """Step 6: Export beacons, scanner positions and the summary."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Step 6: Exporting results to %s", output_dir)
        export_beacons(result.beacons, output_dir / "beacons.csv")
        export_scanner_positions(result.positions, output_dir / "scanners.csv")
        result.save_summary(output_dir / "summary.json")

    def run(self, clouds: Sequence[Sequence[Point3D]]) -> AlignmentResult:
        """Run the complete alignment pipeline.

        Parameters
        ----------
        clouds : sequence of sequences of Point3D
            Beacons per scanner, indexed by scanner number.

        Returns
        -------
        AlignmentResult
            Merged beacons, scanner positions and metrics.

        Raises
        ------
        AlignmentError
            If a transform cannot be solved or a scanner is disconnected.
        """
        if not clouds:
            raise ValueError("at least one scanner is required")
        if not 0 <= self.reference < len(clouds):
            raise ValueError(f"reference scanner {self.reference} out of range")

        fingerprints = self.step_1_fingerprints(clouds)
        graph = self.step_2_build_graph(fingerprints)
        # Paths and composition need the complete graph
        paths = self.step_3_find_paths(graph)
        offsets = self.step_4_compose_offsets(graph, paths)
        result = self.step_5_merge(clouds, graph, offsets, paths)

        if self.output_dir is not None:
            self.step_6_export(result, self.output_dir)

        logger.info("Alignment complete: %d unique beacons, max scanner distance %d",
                    result.beacon_count, result.max_manhattan)
        return result


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        description="Align scanner beacon reports into one reference frame"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to the scanner report file"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Directory for beacons.csv, scanners.csv and summary.json"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG),
        help="YAML configuration file (default: configs/alignment.yaml)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for pair matching"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Count shared distances per beacon at most once"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-pair details"
    )

    args = parser.parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    try:
        pipeline = ScannerAlignmentPipeline.from_config(
            args.config,
            n_workers=args.workers,
            strict_matching=True if args.strict else None,
            output_dir=args.output,
        )
        clouds = read_scanner_reports(args.input)
        result = pipeline.run(clouds)
    except (AlignmentError, OSError, ValueError) as err:
        logger.error("Alignment failed: %s", err)
        return 1

    print(result.beacon_count)
    print(result.max_manhattan)
    return 0


if __name__ == "__main__":
    sys.exit(main())
