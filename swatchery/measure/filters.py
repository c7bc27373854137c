# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Admissibility filters for quantized colors.

A filter is any callable ``(rgb, hsl) -> bool`` returning True when the
color may appear in the palette. Filters run twice during quantization:
once on every histogram color and once on each averaged box color.
"""

from __future__ import annotations

from typing import Protocol

from swatchery.schema.packed_color import PackedColor


class Filter(Protocol):
    """Callable shape shared by all palette filters."""

    def __call__(self, rgb: PackedColor, hsl: tuple[float, float, float]) -> bool:
        ...


class DefaultFilter:
    """
    Rejects near-white, near-black and the low-saturation red/orange band.

    The red/orange band (hue 10-37°, saturation ≤ 0.82) covers skin tones,
    which make poor accent colors.
    """

    BLACK_MAX_LIGHTNESS = 0.05
    WHITE_MIN_LIGHTNESS = 0.95

    def __call__(self, rgb: PackedColor, hsl: tuple[float, float, float]) -> bool:
        return not (
            self.is_white(hsl) or self.is_black(hsl) or self.is_near_red_i_line(hsl)
        )

    @classmethod
    def is_black(cls, hsl: tuple[float, float, float]) -> bool:
        return hsl[2] <= cls.BLACK_MAX_LIGHTNESS

    @classmethod
    def is_white(cls, hsl: tuple[float, float, float]) -> bool:
        return hsl[2] >= cls.WHITE_MIN_LIGHTNESS

    @staticmethod
    def is_near_red_i_line(hsl: tuple[float, float, float]) -> bool:
        return 10.0 <= hsl[0] <= 37.0 and hsl[1] <= 0.82

    def __repr__(self) -> str:
        return "DefaultFilter()"


def is_allowed(
    filters: list[Filter],
    rgb: PackedColor,
    hsl: tuple[float, float, float],
) -> bool:
    """True if every filter accepts the color (first rejection wins)."""
    for f in filters:
        if not f(rgb, hsl):
            return False
    return True
