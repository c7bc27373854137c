# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""Tests for color science (HSL, XYZ, luminance, contrast)."""

import numpy as np
import pytest

from swatchery.schema.packed_color import BLACK, WHITE, PackedColor
from swatchery.measure.colorspace import (
    color_to_hsl,
    composite,
    contrast_ratio,
    luminance,
    minimum_alpha,
    rgb_to_hsl,
    rgb_to_hsl_batch,
    rgb_to_xyz,
    set_alpha,
)


class TestHSL:

    def test_primaries(self):
        assert rgb_to_hsl(255, 0, 0) == pytest.approx((0.0, 1.0, 0.5))
        assert rgb_to_hsl(0, 255, 0) == pytest.approx((120.0, 1.0, 0.5))
        assert rgb_to_hsl(0, 0, 255) == pytest.approx((240.0, 1.0, 0.5))

    def test_red_branch_wraps_negative_hue(self):
        """Magenta has g < b on the red branch, which must wrap to 300°."""
        h, s, l = rgb_to_hsl(255, 0, 255)
        assert h == pytest.approx(300.0)

    def test_monochromatic(self):
        for x in range(256):
            h, s, l = rgb_to_hsl(x, x, x)
            assert h == 0.0
            assert s == 0.0
            assert l == pytest.approx(x / 255.0)

    def test_hue_range(self):
        rng = np.random.default_rng(7)
        for r, g, b in rng.integers(0, 256, size=(200, 3)):
            h, s, l = rgb_to_hsl(int(r), int(g), int(b))
            assert 0.0 <= h < 360.0
            assert 0.0 <= s <= 1.0
            assert 0.0 <= l <= 1.0

    def test_alpha_ignored(self):
        assert color_to_hsl(0x00FF0000) == color_to_hsl(0xFFFF0000)

    def test_batch_matches_scalar(self):
        rgb = np.random.default_rng(42).integers(0, 256, size=(300, 3))
        rgb = np.vstack([rgb, [[0, 0, 0], [255, 255, 255], [90, 90, 90]]])
        batch = rgb_to_hsl_batch(rgb)
        scalar = np.array([rgb_to_hsl(*map(int, row)) for row in rgb])
        np.testing.assert_allclose(batch, scalar, atol=1e-12)


class TestXYZ:

    def test_white(self):
        x, y, z = rgb_to_xyz(255, 255, 255)
        assert x == pytest.approx(95.05, abs=1e-6)
        assert y == pytest.approx(100.0, abs=1e-6)
        assert z == pytest.approx(108.9, abs=1e-6)

    def test_black(self):
        assert rgb_to_xyz(0, 0, 0) == (0.0, 0.0, 0.0)

    def test_gamma_threshold(self):
        """Channel values below 0.04045 use the linear segment."""
        x, _, _ = rgb_to_xyz(10, 0, 0)
        assert x == pytest.approx(100.0 * (10 / 255.0 / 12.92) * 0.4124, abs=1e-10)

    def test_luminance_range(self):
        assert luminance(BLACK) == 0.0
        assert luminance(WHITE) == pytest.approx(1.0)
        assert 0.0 < luminance(PackedColor.rgb(128, 128, 128)) < 1.0


class TestComposite:

    def test_opaque_foreground_wins(self):
        assert composite(0xFF112233, 0xFF445566) == PackedColor(0xFF112233)

    def test_transparent_foreground_shows_background(self):
        assert composite(0x00112233, 0xFF445566) == PackedColor(0xFF445566)

    def test_half_white_over_black(self):
        assert composite(set_alpha(WHITE, 128), BLACK) == PackedColor(0xFF808080)

    def test_both_transparent_gives_zero(self):
        assert composite(0x00FFFFFF, 0x00FFFFFF) == PackedColor(0)


class TestContrast:

    def test_white_on_black_is_maximum(self):
        assert contrast_ratio(WHITE, BLACK) == pytest.approx(21.0)

    def test_symmetric(self):
        a = PackedColor.rgb(30, 120, 200)
        b = PackedColor.rgb(240, 230, 10)
        assert contrast_ratio(a, b) == pytest.approx(contrast_ratio(b, a))

    def test_same_color_is_one(self):
        c = PackedColor.rgb(100, 50, 25)
        assert contrast_ratio(c, c) == pytest.approx(1.0)

    def test_translucent_foreground_is_composited(self):
        half_white = set_alpha(WHITE, 128)
        expected = contrast_ratio(PackedColor(0xFF808080), BLACK)
        assert contrast_ratio(half_white, BLACK) == pytest.approx(expected)

    def test_translucent_background_rejected(self):
        with pytest.raises(ValueError, match="opaque"):
            contrast_ratio(WHITE, set_alpha(BLACK, 200))


class TestMinimumAlpha:

    def test_unsatisfiable_ratio(self):
        assert minimum_alpha(WHITE, BLACK, 21.1) is None

    def test_result_passes(self):
        alpha = minimum_alpha(WHITE, BLACK, 4.5)
        assert alpha is not None
        assert 0 <= alpha <= 255
        assert contrast_ratio(set_alpha(WHITE, alpha), BLACK) >= 4.5

    def test_result_is_smallest(self):
        alpha = minimum_alpha(WHITE, BLACK, 4.5)
        assert alpha > 0
        assert contrast_ratio(set_alpha(WHITE, alpha - 1), BLACK) < 4.5

    def test_monotonic_in_ratio(self):
        background = PackedColor.rgb(20, 40, 90)
        alphas = [
            minimum_alpha(WHITE, background, ratio)
            for ratio in (1.5, 2.0, 3.0, 4.5, 7.0)
        ]
        assert all(a is not None for a in alphas)
        assert alphas == sorted(alphas)

    def test_foreground_alpha_ignored_for_feasibility(self):
        """Feasibility is judged on the fully opaque foreground."""
        assert minimum_alpha(set_alpha(WHITE, 0), BLACK, 4.5) == minimum_alpha(WHITE, BLACK, 4.5)

    def test_translucent_background_rejected(self):
        with pytest.raises(ValueError):
            minimum_alpha(WHITE, set_alpha(BLACK, 0), 3.0)
