# level_map/igs.py
from __future__ import annotations

"""
Improved Grey Scale (IGS) quantization.

Per channel, pixels are visited in row-major order and a remainder is carried
from one pixel to the next:

    adjusted  = min(value + remainder, 255)
    code      = adjusted // divisor
    remainder = adjusted % divisor

with divisor = 256 // levels. The remainder comes from the clamped value, so
anything above 255 is dropped rather than carried. Each channel starts with
remainder 0 and never sees another channel's remainder.

Channels are independent and may run on separate threads; pixels within a
channel may not.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .core_types import (
    MAX_LEVELS,
    MAX_VALUE,
    U8Image,
    as_channel_image,
    check_levels,
    prepare_destination,
)


def igs_divisor(levels: int) -> int:
    """Integer bucket width: 256 // levels (always >= 1 for valid levels)."""
    return MAX_LEVELS // check_levels(levels, integer_divisor=True)


def igs_step(remainder: int, value: int, divisor: int) -> Tuple[int, int]:
    """One fold step. Returns (code, next_remainder)."""
    adjusted = value + remainder
    if adjusted > MAX_VALUE:
        adjusted = MAX_VALUE
    return adjusted // divisor, adjusted % divisor


def igs_scan(
    values: Iterable[int], divisor: int, remainder: int = 0
) -> Tuple[List[int], int]:
    """
    Fold igs_step over a sequence of channel values.

    Returns (codes, final_remainder). Passing the returned remainder back in
    continues the scan, so splitting a sequence gives the same codes.
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")
    codes: List[int] = []
    append = codes.append
    for value in values:
        code, remainder = igs_step(remainder, int(value), divisor)
        append(code)
    return codes, remainder


def _quantize_channel(src: np.ndarray, dst: np.ndarray, divisor: int) -> int:
    # src/dst are (H, W) views of one channel; ravel() is row-major.
    codes, remainder = igs_scan(src.ravel().tolist(), divisor)
    dst[...] = np.asarray(codes, dtype=np.uint8).reshape(src.shape)
    return remainder


def igs_quantize(
    source: U8Image,
    levels: int,
    out: Optional[np.ndarray] = None,
    *,
    workers: int = 1,
) -> U8Image:
    """
    IGS-quantize every channel of `source`.

    Args:
      source  : uint8 [H,W] or [H,W,C]
      levels  : 1..256
      out     : optional destination with the same shape/dtype
      workers : threads over channels (capped at the channel count)

    Returns:
      The destination array (`out` when supplied).
    """
    divisor = igs_divisor(levels)
    dst = prepare_destination(source, out)
    src3 = as_channel_image(source)
    dst3 = as_channel_image(dst)
    channels = int(src3.shape[2])

    n_threads = min(max(1, int(workers)), channels)
    if n_threads <= 1:
        for c in range(channels):
            _quantize_channel(src3[..., c], dst3[..., c], divisor)
        return dst

    with ThreadPoolExecutor(max_workers=n_threads) as ex:
        futs = [
            ex.submit(_quantize_channel, src3[..., c], dst3[..., c], divisor)
            for c in range(channels)
        ]
        for fu in futs:
            fu.result()
    return dst


__all__ = ["igs_divisor", "igs_step", "igs_scan", "igs_quantize"]
