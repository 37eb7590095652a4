# level_map/analysis.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .core_types import MAX_LEVELS, MAX_VALUE, U8Image, as_channel_image, check_levels
from .mode import QuantizationType, resolve_variant
from .errors import UnsupportedVariantError


@dataclass(frozen=True)
class ChannelUsage:
    """Distinct codes of one channel with their pixel counts (ascending code)."""

    channel: int
    codes: Tuple[int, ...]
    counts: Tuple[int, ...]

    @property
    def distinct(self) -> int:
        return len(self.codes)


def max_code(levels: int, variant: object) -> int:
    """Largest code a quantizer can emit for `levels`."""
    resolved = resolve_variant(variant)
    if resolved is None:
        raise UnsupportedVariantError(variant)
    n = check_levels(levels, integer_divisor=resolved is QuantizationType.IGS)
    if resolved is QuantizationType.UNIFORM:
        return n - 1
    return MAX_VALUE // (MAX_LEVELS // n)


def level_usage(codes: U8Image) -> List[ChannelUsage]:
    """Per-channel histogram of the codes that actually occur."""
    img = as_channel_image(codes)
    out: List[ChannelUsage] = []
    for c in range(int(img.shape[2])):
        counts = np.bincount(img[..., c].ravel(), minlength=MAX_LEVELS)
        used = np.nonzero(counts)[0]
        out.append(
            ChannelUsage(
                channel=c,
                codes=tuple(int(v) for v in used),
                counts=tuple(int(counts[v]) for v in used),
            )
        )
    return out


def distinct_levels(codes: U8Image) -> int:
    """Largest number of distinct codes found in any single channel."""
    usage = level_usage(codes)
    return max((u.distinct for u in usage), default=0)


__all__ = ["ChannelUsage", "max_code", "level_usage", "distinct_levels"]
