# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Measurement core for Swatchery.

Deterministic color quantization and swatch selection over packed
pixel buffers. No image decoding or file I/O happens here.
"""

from swatchery.measure.builder import PaletteBuilder, PaletteConfig, Region, generate
from swatchery.measure.filters import DefaultFilter, Filter
from swatchery.measure.quantizer import ColorCutQuantizer

__all__ = [
    "generate",
    "PaletteBuilder",
    "PaletteConfig",
    "Region",
    "ColorCutQuantizer",
    "DefaultFilter",
    "Filter",
]
