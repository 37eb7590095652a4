# level_map/__init__.py
"""
level_map package.

Purpose:
  Per-channel grey-level quantization of 8-bit images. See level_map.cli for the CLI.

Public API:
  quantize          : dispatcher returning a QuantizeResult (success or typed error).
  quantize_or_raise : same, raising the typed error instead.
  quantize_legacy   : (image, success_flag) form.
  uniform_quantize  : equal-width bucket quantizer.
  igs_quantize      : Improved Grey Scale quantizer (remainder carried per channel).
  QuantizationType  : variant discriminator.
  errors            : LevelMapError and its kinds.
  analysis          : per-channel level usage.
  display           : stretch_codes for viewing.
  image_io          : Pillow load/save helpers.

Quick start:
  from level_map import quantize, QuantizationType
  result = quantize(img, 4, QuantizationType.IGS)
  if result.success:
      codes = result.image
"""

__version__ = "0.1.0"

from . import analysis
from . import core_types
from . import display
from . import errors
from . import image_io
from . import utils

from .dispatch import QuantizeResult, quantize, quantize_legacy, quantize_or_raise
from .errors import (
    InvalidImageError,
    InvalidLevelCountError,
    LevelMapError,
    ShapeMismatchError,
    UnsupportedVariantError,
)
from .igs import igs_quantize, igs_scan, igs_step
from .mode import QuantizationType
from .uniform import uniform_quantize

__all__ = [
    "__version__",
    "analysis",
    "core_types",
    "display",
    "errors",
    "image_io",
    "utils",
    "QuantizeResult",
    "quantize",
    "quantize_legacy",
    "quantize_or_raise",
    "InvalidImageError",
    "InvalidLevelCountError",
    "LevelMapError",
    "ShapeMismatchError",
    "UnsupportedVariantError",
    "igs_quantize",
    "igs_scan",
    "igs_step",
    "QuantizationType",
    "uniform_quantize",
]
