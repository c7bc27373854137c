# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Color science for packed sRGB colors.

Conversions: sRGB ↔ HSL, sRGB → CIE XYZ (D65, 2° observer)

Readability:
- Relative luminance (the Y of XYZ, scaled to [0, 1])
- WCAG 2.0 contrast ratio, with "over" compositing of translucent text
- Minimum alpha search for a text color to reach a contrast ratio

References:
- WCAG 2.0 contrast ratio:
  http://www.w3.org/TR/2008/REC-WCAG20-20081211/#contrast-ratiodef

Scalar functions work on plain Python numbers. ``rgb_to_hsl_batch`` is the
NumPy counterpart of ``rgb_to_hsl`` for whole histograms.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from swatchery.schema.packed_color import IntLike, PackedColor, to_packed


MIN_ALPHA_SEARCH_MAX_ITERATIONS = 10
MIN_ALPHA_SEARCH_PRECISION = 1


def _constrain(amount: float, low: float, high: float) -> float:
    return low if amount < low else min(amount, high)


# =============================================================================
# sRGB ↔ HSL
# =============================================================================


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """
    Convert 0-255 RGB components to HSL.

    Returns:
        (h, s, l) where
        - h: Hue in degrees [0, 360)
        - s: Saturation [0, 1]
        - l: Lightness [0, 1]
    """
    rf = r / 255.0
    gf = g / 255.0
    bf = b / 255.0

    max_c = max(rf, gf, bf)
    min_c = min(rf, gf, bf)
    delta = max_c - min_c

    lightness = (max_c + min_c) / 2.0

    if max_c == min_c:
        # Monochromatic
        hue = 0.0
        saturation = 0.0
    else:
        if max_c == rf:
            hue = ((gf - bf) / delta) % 6.0
        elif max_c == gf:
            hue = ((bf - rf) / delta) + 2.0
        else:
            hue = ((rf - gf) / delta) + 4.0

        saturation = delta / (1.0 - abs(2.0 * lightness - 1.0))

    hue = (hue * 60.0) % 360.0

    return (
        _constrain(hue, 0.0, 360.0),
        _constrain(saturation, 0.0, 1.0),
        _constrain(lightness, 0.0, 1.0),
    )


def color_to_hsl(color: IntLike) -> tuple[float, float, float]:
    """HSL of a packed color. The alpha component is ignored."""
    c = to_packed(color)
    return rgb_to_hsl(c.red, c.green, c.blue)


def rgb_to_hsl_batch(rgb: NDArray[np.integer]) -> NDArray[np.float64]:
    """
    Vectorized ``rgb_to_hsl``.

    Args:
        rgb: Array of shape (N, 3) with 0-255 RGB components

    Returns:
        Array of shape (N, 3) with (h, s, l) per row
    """
    rgb = np.asarray(rgb, dtype=np.float64) / 255.0
    rf, gf, bf = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    max_c = rgb.max(axis=1)
    min_c = rgb.min(axis=1)
    delta = max_c - min_c
    lightness = (max_c + min_c) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    # Branch order matches the scalar version: red, then green, then blue
    hue = np.where(
        max_c == rf,
        np.mod((gf - bf) / safe_delta, 6.0),
        np.where(
            max_c == gf,
            (bf - rf) / safe_delta + 2.0,
            (rf - gf) / safe_delta + 4.0,
        ),
    )
    hue = np.where(chromatic, np.mod(hue * 60.0, 360.0), 0.0)

    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    safe_denom = np.where(denom > 0, denom, 1.0)
    saturation = np.where(chromatic, delta / safe_denom, 0.0)

    return np.stack(
        [
            np.clip(hue, 0.0, 360.0),
            np.clip(saturation, 0.0, 1.0),
            np.clip(lightness, 0.0, 1.0),
        ],
        axis=-1,
    )


# =============================================================================
# sRGB → XYZ
# =============================================================================


def _srgb_channel_to_linear(value: int) -> float:
    c = value / 255.0
    return c / 12.92 if c < 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def rgb_to_xyz(r: int, g: int, b: int) -> tuple[float, float, float]:
    """
    Convert 0-255 RGB components to CIE XYZ (D65 illuminant).

    Returns:
        (X, Y, Z) with
        - X in [0, 95.047)
        - Y in [0, 100)
        - Z in [0, 108.883)
    """
    sr = _srgb_channel_to_linear(r)
    sg = _srgb_channel_to_linear(g)
    sb = _srgb_channel_to_linear(b)

    return (
        100.0 * (sr * 0.4124 + sg * 0.3576 + sb * 0.1805),
        100.0 * (sr * 0.2126 + sg * 0.7152 + sb * 0.0722),
        100.0 * (sr * 0.0193 + sg * 0.1192 + sb * 0.9505),
    )


def color_to_xyz(color: IntLike) -> tuple[float, float, float]:
    """XYZ of a packed color. The alpha component is ignored."""
    c = to_packed(color)
    return rgb_to_xyz(c.red, c.green, c.blue)


def luminance(color: IntLike) -> float:
    """
    Relative luminance of a color in [0, 1].

    Defined as the Y component of the XYZ representation, divided by 100.
    """
    return color_to_xyz(color)[1] / 100.0


# =============================================================================
# Compositing
# =============================================================================


def set_alpha(color: IntLike, alpha: int) -> PackedColor:
    """Return ``color`` with its alpha component set to ``alpha``."""
    return to_packed(color).with_alpha(alpha)


def _composite_alpha(fg_alpha: int, bg_alpha: int) -> int:
    return 0xFF - (((0xFF - bg_alpha) * (0xFF - fg_alpha)) // 0xFF)


def _composite_component(fg_c: int, fg_a: int, bg_c: int, bg_a: int, a: int) -> int:
    if a == 0:
        return 0
    return ((0xFF * fg_c * fg_a) + (bg_c * bg_a * (0xFF - fg_a))) // (a * 0xFF)


def composite(foreground: IntLike, background: IntLike) -> PackedColor:
    """
    Composite ``foreground`` over ``background`` (the "over" operator).

    Integer arithmetic throughout; a fully transparent result has all
    color channels set to 0.
    """
    fg = to_packed(foreground)
    bg = to_packed(background)

    a = _composite_alpha(fg.alpha, bg.alpha)
    r = _composite_component(fg.red, fg.alpha, bg.red, bg.alpha, a)
    g = _composite_component(fg.green, fg.alpha, bg.green, bg.alpha, a)
    b = _composite_component(fg.blue, fg.alpha, bg.blue, bg.alpha, a)

    return PackedColor.argb(a, r, g, b)


# =============================================================================
# Contrast
# =============================================================================


def _require_opaque(background: PackedColor) -> None:
    if background.alpha != 255:
        raise ValueError(
            f"Background must be opaque, got alpha={background.alpha} "
            f"for {background.hex}"
        )


def contrast_ratio(foreground: IntLike, background: IntLike) -> float:
    """
    WCAG contrast ratio between ``foreground`` and ``background``.

    A translucent foreground is composited over the background first.

    Args:
        foreground: Text color, any alpha
        background: Opaque background color

    Returns:
        Ratio in [1, 21]

    Raises:
        ValueError: If the background is not fully opaque
    """
    fg = to_packed(foreground)
    bg = to_packed(background)
    _require_opaque(bg)

    if fg.alpha < 255:
        fg = composite(fg, bg)

    luminance1 = luminance(fg) + 0.05
    luminance2 = luminance(bg) + 0.05

    return max(luminance1, luminance2) / min(luminance1, luminance2)


def minimum_alpha(
    foreground: IntLike,
    background: IntLike,
    min_contrast_ratio: float,
) -> Optional[int]:
    """
    Smallest alpha for ``foreground`` that reaches ``min_contrast_ratio``
    over ``background``.

    Binary search over [0, 255], bounded to
    ``MIN_ALPHA_SEARCH_MAX_ITERATIONS`` steps. The returned value is the
    upper end of the final window, which is known to pass.

    Returns:
        Alpha in [0, 255], or None if even a fully opaque foreground does
        not reach the ratio

    Raises:
        ValueError: If the background is not fully opaque
    """
    fg = to_packed(foreground)
    bg = to_packed(background)
    _require_opaque(bg)

    # A fully opaque foreground is the best case
    if contrast_ratio(fg.with_alpha(255), bg) < min_contrast_ratio:
        return None

    num_iterations = 0
    min_alpha = 0
    max_alpha = 255

    while (
        num_iterations < MIN_ALPHA_SEARCH_MAX_ITERATIONS
        and (max_alpha - min_alpha) > MIN_ALPHA_SEARCH_PRECISION
    ):
        test_alpha = (min_alpha + max_alpha) // 2

        if contrast_ratio(fg.with_alpha(test_alpha), bg) < min_contrast_ratio:
            min_alpha = test_alpha
        else:
            max_alpha = test_alpha

        num_iterations += 1

    return max_alpha
