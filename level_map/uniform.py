# level_map/uniform.py
from __future__ import annotations

"""
Uniform grey-level quantization.

Each channel value v maps to trunc(v / (256.0 / levels)). Codes are left in
0..levels-1; they are not stretched back to 0..255.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from .core_types import (
    U8Image,
    as_channel_image,
    check_levels,
    prepare_destination,
)
from .utils import split_rows_into_parts

# Bands smaller than this are not worth a thread.
MIN_ROWS_PER_BAND = 64


def uniform_divisor(levels: int) -> float:
    """Bucket width as a float: 256.0 / levels."""
    return 256.0 / check_levels(levels)


def uniform_code(value: int, levels: int) -> int:
    """Scalar mapping for one channel value."""
    return int(value / uniform_divisor(levels))


def _quantize_band(src: np.ndarray, dst: np.ndarray, divisor: float) -> None:
    # float64 quotient, truncated on the cast back to uint8
    dst[...] = (src.astype(np.float64) / divisor).astype(np.uint8)


def uniform_quantize(
    source: U8Image,
    levels: int,
    out: Optional[np.ndarray] = None,
    *,
    workers: int = 1,
) -> U8Image:
    """
    Quantize every channel of `source` to `levels` uniform buckets.

    Args:
      source  : uint8 [H,W] or [H,W,C]
      levels  : 1..256
      out     : optional destination with the same shape/dtype
      workers : threads over row bands; result is identical for any value

    Returns:
      The destination array (`out` when supplied).
    """
    n = check_levels(levels)
    dst = prepare_destination(source, out)
    src3 = as_channel_image(source)
    dst3 = as_channel_image(dst)
    divisor = 256.0 / n

    height = int(src3.shape[0])
    bands = min(max(1, int(workers)), max(1, height // MIN_ROWS_PER_BAND))
    if bands <= 1:
        _quantize_band(src3, dst3, divisor)
        return dst

    spans = split_rows_into_parts(height, bands)
    with ThreadPoolExecutor(max_workers=len(spans)) as ex:
        futs = [
            ex.submit(_quantize_band, src3[s:e], dst3[s:e], divisor)
            for s, e in spans
        ]
        for fu in futs:
            fu.result()
    return dst


__all__ = ["uniform_divisor", "uniform_code", "uniform_quantize"]
