# level_map/mode.py
from __future__ import annotations

from enum import Enum
from typing import Optional

"""
Quantization variant selection.

Exports:
- QuantizationType: the two defined variants.
- resolve_variant(requested) -> QuantizationType | None
- VARIANT_NAMES: CLI choices.

Notes:
- Strings are matched case-insensitively; "improved-grey-scale" style
  aliases resolve to IGS. Anything unknown resolves to None.
"""


class QuantizationType(str, Enum):
    UNIFORM = "uniform"
    IGS = "igs"


_ALIASES = {
    "uniform": QuantizationType.UNIFORM,
    "igs": QuantizationType.IGS,
    "improved-grey-scale": QuantizationType.IGS,
    "improved-gray-scale": QuantizationType.IGS,
}

VARIANT_NAMES = tuple(v.value for v in QuantizationType)


def resolve_variant(requested: object) -> Optional[QuantizationType]:
    """
    Map a requested variant onto a QuantizationType.
    - QuantizationType members pass through
    - known strings / aliases map to their member
    - anything else -> None (unsupported)
    """
    if isinstance(requested, QuantizationType):
        return requested
    if isinstance(requested, str):
        return _ALIASES.get(requested.strip().lower().replace("_", "-"))
    return None


__all__ = ["QuantizationType", "VARIANT_NAMES", "resolve_variant"]
