"""Error types raised by the alignment pipeline.

All errors derive from :class:`AlignmentError` so callers can catch the
whole family at once.  Stages raise them and leave the retry or abort
decision to the caller.
"""

from typing import Optional


class AlignmentError(Exception):
    """Base class for failures while aligning scanners."""


class InsufficientCorrespondencesError(AlignmentError):
    """Fewer correspondences than needed to solve a pairwise transform."""


class AmbiguousAxisMappingError(AlignmentError):
    """An axis mapping could not be assigned as a bijection over the axes."""


class DisconnectedSensorError(AlignmentError):
    """A scanner has no chain of direct edges to the reference scanner."""

    def __init__(self, scanner: int, reference: int = 0):
        self.scanner = scanner
        self.reference = reference
        super().__init__(
            f"scanner {scanner} has no path to reference scanner {reference}"
        )


class MalformedInputError(AlignmentError, ValueError):
    """A scanner report could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
