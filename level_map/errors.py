# level_map/errors.py
from __future__ import annotations

"""
Error taxonomy for quantization calls.

The quantizers raise these; the dispatcher turns the recoverable ones into a
QuantizeResult with `error` set instead of propagating them.
"""

from typing import Literal

ErrorKind = Literal[
    "unsupported_variant",
    "invalid_level_count",
    "shape_mismatch",
    "invalid_image",
]


class LevelMapError(Exception):
    """Base class. `kind` is a stable machine-readable tag."""

    kind: ErrorKind = "invalid_image"


class UnsupportedVariantError(LevelMapError):
    """Requested variant matches no known quantizer."""

    kind: ErrorKind = "unsupported_variant"

    def __init__(self, variant: object) -> None:
        super().__init__(f"Specified quantization type is unsupported: {variant!r}")
        self.variant = variant


class InvalidLevelCountError(LevelMapError, ValueError):
    """Level count outside 1..256 or not an integer."""

    kind: ErrorKind = "invalid_level_count"

    def __init__(self, levels: object, reason: str) -> None:
        super().__init__(f"invalid level count {levels!r}: {reason}")
        self.levels = levels


class ShapeMismatchError(LevelMapError, ValueError):
    """Destination buffer does not match the source shape or dtype."""

    kind: ErrorKind = "shape_mismatch"


class InvalidImageError(LevelMapError, TypeError):
    """Source is not a uint8 (H,W) or (H,W,C) array."""

    kind: ErrorKind = "invalid_image"


__all__ = [
    "ErrorKind",
    "LevelMapError",
    "UnsupportedVariantError",
    "InvalidLevelCountError",
    "ShapeMismatchError",
    "InvalidImageError",
]
