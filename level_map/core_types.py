# level_map/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight validation helpers.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidImageError, InvalidLevelCountError, ShapeMismatchError

# Basic aliases

U8Image = NDArray[np.uint8]  # (H, W, C) or (H, W)
U8Mask = NDArray[np.uint8]  # (H, W)

# 8-bit channels: 256 representable grey levels.
MAX_LEVELS = 256
MAX_VALUE = 255

# Value objects


@dataclass(frozen=True)
class ImageInfo:
    """Dimensions and channel count of an 8-bit image buffer."""

    height: int
    width: int
    channels: int

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.height, self.width, self.channels)

    @property
    def pixels(self) -> int:
        return self.height * self.width


# Helpers


def assert_u8_image(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W) or (H,W,C) image and return it typed as U8Image."""
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"expected numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8:
        raise InvalidImageError(f"expected uint8 image, got {image.dtype}")
    if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[-1] < 1):
        raise InvalidImageError(f"expected (H,W) or (H,W,C) image, got {image.shape}")
    return image  # type: ignore[return-value]


def image_info(image: np.ndarray) -> ImageInfo:
    """Describe a validated image. 2-D arrays count as one channel."""
    img = assert_u8_image(image)
    channels = 1 if img.ndim == 2 else int(img.shape[2])
    return ImageInfo(int(img.shape[0]), int(img.shape[1]), channels)


def as_channel_image(image: np.ndarray) -> U8Image:
    """View a 2-D image as (H,W,1); 3-D images pass through unchanged."""
    img = assert_u8_image(image)
    return img[..., None] if img.ndim == 2 else img


def check_levels(levels: object, *, integer_divisor: bool = False) -> int:
    """
    Validate a level count and return it as int.

    Accepts 1..MAX_LEVELS. `integer_divisor` is accepted for readability at
    IGS call sites; the bound is the same since 256 // levels must be >= 1.
    """
    if isinstance(levels, bool) or not isinstance(levels, (int, np.integer)):
        raise InvalidLevelCountError(levels, "must be an integer")
    n = int(levels)
    if n <= 0:
        raise InvalidLevelCountError(levels, "must be positive")
    if n > MAX_LEVELS:
        reason = (
            f"divisor 256 // {n} would be zero"
            if integer_divisor
            else f"must be <= {MAX_LEVELS}"
        )
        raise InvalidLevelCountError(levels, reason)
    return n


def prepare_destination(source: U8Image, out: Optional[np.ndarray]) -> U8Image:
    """
    Return a destination buffer matching `source` shape and dtype.

    Allocates a zeroed array when `out` is None, otherwise checks `out`.
    """
    if out is None:
        return np.zeros_like(source, dtype=np.uint8)
    if not isinstance(out, np.ndarray) or out.dtype != np.uint8:
        raise ShapeMismatchError("destination must be a uint8 numpy array")
    if out.shape != source.shape:
        raise ShapeMismatchError(
            f"destination shape {out.shape} != source shape {source.shape}"
        )
    if not out.flags.writeable:
        raise ShapeMismatchError("destination is read-only")
    return out  # type: ignore[return-value]


__all__ = [
    "U8Image",
    "U8Mask",
    "MAX_LEVELS",
    "MAX_VALUE",
    "ImageInfo",
    "assert_u8_image",
    "image_info",
    "as_channel_image",
    "check_levels",
    "prepare_destination",
]
