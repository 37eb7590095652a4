# level_map/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import U8Image, U8Mask, as_channel_image

"""
Image I/O helpers. Colour images load as 8-bit sRGB (H,W,3), greyscale as
(H,W,1). Alpha is split off and handed back separately so it is never
quantized.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tif", ".tiff"}

_GREY_MODES = {"1", "L", "LA", "La", "I", "I;16", "F"}


def _convert_to_srgb(im: Image.Image, mode: str) -> Image.Image:
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None and mode == "RGBA":
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            pass

    return im.convert(mode)


def load_image(path: Path) -> Tuple[U8Image, Optional[U8Mask]]:
    """
    Load an image as uint8 channels plus optional alpha.

    Returns:
      pixels : uint8 [H,W,3] for colour, [H,W,1] for greyscale
      alpha  : uint8 [H,W] when the file carries transparency, else None
    """
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0)
        grey = im.mode in _GREY_MODES
        has_alpha = im.mode in ("RGBA", "LA", "La", "PA") or "transparency" in im.info
        if grey:
            conv = _convert_to_srgb(im, "LA" if has_alpha else "L")
        else:
            conv = _convert_to_srgb(im, "RGBA")
        arr = np.array(conv, dtype=np.uint8)

    if grey:
        if has_alpha:
            return arr[..., :1].copy(), arr[..., 1].copy()
        return arr[..., None], None
    pixels = np.ascontiguousarray(arr[..., :3])
    return pixels, (arr[..., 3].copy() if has_alpha else None)


def save_image(path: Path, pixels: U8Image, alpha: Optional[U8Mask] = None) -> Path:
    """Save pixels (and alpha if given) as PNG. Returns the path written."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    img = as_channel_image(pixels)
    channels = int(img.shape[2])
    if channels == 1:
        base = img[..., 0]
        if alpha is None:
            out = Image.fromarray(base)
        else:
            out = Image.fromarray(np.stack([base, alpha], axis=-1))
    elif channels >= 3:
        rgb = img[..., :3]
        if alpha is None and channels == 4:
            alpha = img[..., 3]
        if alpha is None:
            out = Image.fromarray(np.ascontiguousarray(rgb))
        else:
            rgba = np.concatenate([rgb, alpha[..., None]], axis=-1)
            out = Image.fromarray(rgba)
    else:
        raise ValueError(f"cannot save image with {channels} channels")
    path.parent.mkdir(parents=True, exist_ok=True)
    out.save(path)
    return path


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = ["IMAGE_EXTS", "load_image", "save_image", "is_image_file"]
