# level_map/dispatch.py
from __future__ import annotations

"""
Quantization entry point.

quantize() validates inputs, prepares the destination, and runs the requested
quantizer. Recoverable failures (unknown variant, bad level count, mismatched
destination) come back as a QuantizeResult with `error` set and a message on
stderr; nothing is raised for them. An invalid source array still raises
InvalidImageError since there is nothing to allocate a destination from.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .core_types import U8Image, assert_u8_image, check_levels, prepare_destination
from .errors import (
    ErrorKind,
    LevelMapError,
    ShapeMismatchError,
    UnsupportedVariantError,
)
from .igs import igs_quantize
from .mode import QuantizationType, resolve_variant
from .uniform import uniform_quantize
from .utils import error

Quantizer = Callable[..., U8Image]

QUANTIZERS: Dict[QuantizationType, Quantizer] = {
    QuantizationType.UNIFORM: uniform_quantize,
    QuantizationType.IGS: igs_quantize,
}


@dataclass(frozen=True)
class QuantizeResult:
    """Outcome of a quantize() call."""

    image: U8Image
    variant: Optional[QuantizationType]
    levels: object
    error: Optional[LevelMapError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> U8Image:
        """Return the image, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.image


def _failed(
    image: U8Image,
    variant: Optional[QuantizationType],
    levels: object,
    exc: LevelMapError,
) -> QuantizeResult:
    error(str(exc))
    return QuantizeResult(image, variant, levels, exc)


def quantize(
    source: U8Image,
    levels: int,
    variant: object,
    *,
    out: Optional[np.ndarray] = None,
    workers: int = 1,
) -> QuantizeResult:
    """
    Quantize `source` to `levels` per channel using `variant`.

    Args:
      source  : uint8 [H,W] or [H,W,C]
      levels  : 1..256
      variant : QuantizationType or its name ("uniform", "igs")
      out     : optional caller-owned destination
      workers : threads passed to the quantizer

    Returns:
      QuantizeResult. On failure `image` is the destination as allocated
      (zeros, or `out` untouched) and is never partially quantized.
    """
    src = assert_u8_image(source)

    try:
        dst = prepare_destination(src, out)
    except ShapeMismatchError as exc:
        # No usable destination: hand back a fresh zeroed buffer.
        return _failed(np.zeros_like(src), resolve_variant(variant), levels, exc)

    resolved = resolve_variant(variant)
    if resolved is None:
        return _failed(dst, None, levels, UnsupportedVariantError(variant))

    try:
        n = check_levels(levels, integer_divisor=resolved is QuantizationType.IGS)
    except LevelMapError as exc:
        return _failed(dst, resolved, levels, exc)

    QUANTIZERS[resolved](src, n, dst, workers=workers)
    return QuantizeResult(dst, resolved, n)


def quantize_or_raise(
    source: U8Image,
    levels: int,
    variant: object,
    *,
    out: Optional[np.ndarray] = None,
    workers: int = 1,
) -> U8Image:
    """Like quantize() but raises the typed error instead of returning it."""
    return quantize(source, levels, variant, out=out, workers=workers).unwrap()


def quantize_legacy(
    source: U8Image, levels: int, variant: object
) -> Tuple[U8Image, bool]:
    """Plain (destination, success_flag) form of quantize()."""
    result = quantize(source, levels, variant)
    return result.image, result.success


__all__ = [
    "QUANTIZERS",
    "QuantizeResult",
    "quantize",
    "quantize_or_raise",
    "quantize_legacy",
]
