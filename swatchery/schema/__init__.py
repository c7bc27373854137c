# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Schema definitions for palettes.

Swatches, targets and palettes are immutable once built. The one
exception is a swatch's text colors, computed on first access and then
frozen.
"""

from swatchery.schema.packed_color import (
    BLACK,
    TRANSPARENT,
    WHITE,
    PackedColor,
)
from swatchery.schema.palette import (
    DARK_MUTED,
    DARK_VIBRANT,
    DEFAULT_TARGETS,
    LIGHT_MUTED,
    LIGHT_VIBRANT,
    MUTED,
    VIBRANT,
    Palette,
    Swatch,
    Target,
    TargetBuilder,
)

__all__ = [
    # Colors
    "PackedColor",
    "BLACK",
    "WHITE",
    "TRANSPARENT",
    # Swatches and targets
    "Swatch",
    "Target",
    "TargetBuilder",
    "LIGHT_VIBRANT",
    "VIBRANT",
    "DARK_VIBRANT",
    "LIGHT_MUTED",
    "MUTED",
    "DARK_MUTED",
    "DEFAULT_TARGETS",
    # Top-level container
    "Palette",
]
