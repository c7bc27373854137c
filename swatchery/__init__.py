# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Swatchery -- Prominent color extraction for image-driven UI theming.

Reduces an image's pixels to a handful of representative swatches and
picks one for each profile (vibrant / muted, light / normal / dark),
together with readable text colors for each swatch.

Quick start::

    from swatchery import generate

    palette = generate(pixels, width, height)
    palette.vibrant_swatch
    palette.vibrant_swatch.body_text_color
    palette.get_muted_color(default=0xFF808080)
"""

from __future__ import annotations

__version__ = "1.0.0"

from swatchery.measure import (
    ColorCutQuantizer,
    DefaultFilter,
    PaletteBuilder,
    PaletteConfig,
    generate,
)
from swatchery.schema import (
    DEFAULT_TARGETS,
    PackedColor,
    Palette,
    Swatch,
    Target,
    TargetBuilder,
)

__all__ = [
    # Core API
    "generate",
    "PaletteBuilder",
    "PaletteConfig",
    "Palette",
    # Types (commonly needed)
    "PackedColor",
    "Swatch",
    "Target",
    "TargetBuilder",
    "DEFAULT_TARGETS",
    # Building blocks
    "ColorCutQuantizer",
    "DefaultFilter",
    # Version
    "__version__",
]
