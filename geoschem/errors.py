"""Exception hierarchy for the conversion pipeline.

Every fatal condition aborts the current input and derives from
``ConversionError`` (itself a ``ValueError``), so callers that only care
about "this input could not be converted" can catch one type.
"""

from __future__ import annotations

from typing import List, Tuple


class ConversionError(ValueError):
    """Base class for fatal conversion failures."""


class EmptyContourMapError(ConversionError):
    """Raised when a contour map contains no coordinates."""


class VolumeTooLargeError(ConversionError):
    """Raised when the bounding volume exceeds the schematic size limits."""

    def __init__(self, width: int, length: int, height: int) -> None:
        self.width = width
        self.length = length
        self.height = height
        super().__init__(
            f"Schematic too big: {length} x {height} x {width} "
            f"(length x height x width) exceeds the supported volume"
        )


class UnsupportedOptionsError(ConversionError):
    """Raised for option combinations or values the converter cannot honor."""


class UnsupportedBlockError(ConversionError):
    """Raised when a palette block has no legacy numeric id."""

    def __init__(self, block_id: str) -> None:
        self.block_id = block_id
        super().__init__(f"Unsupported block identifier for legacy schematics: {block_id!r}")


class BatchConversionError(ConversionError):
    """Raised when one or more inputs of a batch failed.

    ``failures`` holds ``(name, exception)`` pairs in input order and
    ``results`` the conversions that did succeed.
    """

    def __init__(self, failures: List[Tuple[str, Exception]], results=None) -> None:
        self.failures = list(failures)
        self.results = list(results or [])
        names = ", ".join(f"{name} ({exc})" for name, exc in self.failures)
        super().__init__(f"{len(self.failures)} input(s) failed to convert: {names}")
