# level_map/display.py
"""
Viewing helpers. Quantizer output is a small code per channel, which shows up
as a near-black image; stretch_codes() spreads the codes over 0..255.
"""

from __future__ import annotations

import numpy as np

from .analysis import max_code
from .core_types import MAX_VALUE, U8Image, assert_u8_image


def stretch_codes(codes: U8Image, levels: int, variant: object) -> U8Image:
    """Rescale codes 0..max_code to 0..255, rounding to nearest."""
    img = assert_u8_image(codes)
    top = max_code(levels, variant)
    if top <= 0:
        return np.zeros_like(img)
    scaled = np.rint(img.astype(np.float64) * (MAX_VALUE / float(top)))
    return np.clip(scaled, 0, MAX_VALUE).astype(np.uint8)


__all__ = ["stretch_codes"]
