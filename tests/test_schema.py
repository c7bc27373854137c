# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""Tests for swatches, targets and the palette container."""

import copy
import pickle
import threading

import pytest

from swatchery.schema import (
    BLACK,
    DARK_MUTED,
    DARK_VIBRANT,
    DEFAULT_TARGETS,
    LIGHT_MUTED,
    LIGHT_VIBRANT,
    MUTED,
    VIBRANT,
    WHITE,
    PackedColor,
    Palette,
    Swatch,
    Target,
    TargetBuilder,
)
from swatchery.measure.colorspace import contrast_ratio


class TestSwatch:

    def test_components(self):
        s = Swatch(0xFF3941C8, 10)
        assert (s.red, s.green, s.blue) == (0x39, 0x41, 0xC8)
        assert s.rgb == PackedColor(0xFF3941C8)
        assert s.hex == "#3941C8"

    def test_hsl(self):
        assert Swatch(0xFFFF0000, 1).hsl == pytest.approx((0.0, 1.0, 0.5))

    def test_equality_by_color_and_population(self):
        assert Swatch(0xFFFF0000, 2) == Swatch(PackedColor(0xFFFF0000), 2)
        assert Swatch(0xFFFF0000, 2) != Swatch(0xFFFF0000, 3)

    def test_negative_population_rejected(self):
        with pytest.raises(ValueError):
            Swatch(0xFFFF0000, -1)

    def test_frozen(self):
        s = Swatch(0xFFFF0000, 2)
        with pytest.raises(AttributeError):
            s.population = 5


class TestSwatchTextColors:

    def test_dark_swatch_uses_white(self):
        s = Swatch(BLACK, 1)
        assert s.title_text_color.with_alpha(255) == WHITE
        assert s.body_text_color.with_alpha(255) == WHITE

    def test_body_needs_more_alpha_than_title(self):
        s = Swatch(PackedColor.rgb(20, 40, 90), 1)
        assert s.body_text_color.alpha >= s.title_text_color.alpha

    def test_contrast_guaranteed(self):
        for color in (0xFF1A237E, 0xFF2E7D32, 0xFFC62828, 0xFF777777, 0xFFFFEB3B):
            s = Swatch(color, 1)
            assert contrast_ratio(s.body_text_color, s.rgb) >= 4.5
            assert contrast_ratio(s.title_text_color, s.rgb) >= 3.0

    def test_light_swatch_uses_black(self):
        s = Swatch(WHITE, 1)
        assert s.title_text_color.with_alpha(255) == BLACK
        assert s.body_text_color.with_alpha(255) == BLACK

    def test_mid_gray_falls_back_to_black(self):
        """White reaches 3.0 but not 4.5 on #777777, so both roles use black."""
        s = Swatch(0xFF777777, 1)
        assert s.title_text_color.with_alpha(255) == BLACK
        assert s.body_text_color.with_alpha(255) == BLACK

    def test_memoized(self):
        s = Swatch(0xFF1A237E, 1)
        first = s.body_text_color
        assert s.body_text_color is first
        assert s.title_text_color is s.title_text_color

    def test_concurrent_access_computes_once(self):
        s = Swatch(0xFF2E7D32, 1)
        results = []

        def read():
            results.append((s.title_text_color, s.body_text_color))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1


class TestTargets:

    def test_vibrant_values(self):
        assert VIBRANT.saturation_targets == pytest.approx((0.35, 1.0, 1.0))
        assert VIBRANT.lightness_targets == pytest.approx((0.3, 0.5, 0.7))

    def test_light_vibrant_values(self):
        assert LIGHT_VIBRANT.minimum_lightness == pytest.approx(0.55)
        assert LIGHT_VIBRANT.target_lightness == pytest.approx(0.74)
        assert LIGHT_VIBRANT.maximum_lightness == pytest.approx(1.0)

    def test_dark_muted_values(self):
        assert DARK_MUTED.lightness_targets == pytest.approx((0.0, 0.26, 0.45))
        assert DARK_MUTED.saturation_targets == pytest.approx((0.0, 0.3, 0.4))

    def test_muted_saturation(self):
        for target in (LIGHT_MUTED, MUTED, DARK_MUTED):
            assert target.target_saturation == pytest.approx(0.3)
            assert target.maximum_saturation == pytest.approx(0.4)

    def test_default_weights(self):
        for target in DEFAULT_TARGETS:
            assert target.saturation_weight == pytest.approx(0.24)
            assert target.lightness_weight == pytest.approx(0.52)
            assert target.population_weight == pytest.approx(0.24)
            assert target.is_exclusive

    def test_default_order(self):
        assert DEFAULT_TARGETS == (
            LIGHT_VIBRANT, VIBRANT, DARK_VIBRANT, LIGHT_MUTED, MUTED, DARK_MUTED,
        )

    def test_identity_semantics(self):
        copy = TargetBuilder(VIBRANT).build()
        assert copy != VIBRANT
        assert copy.lightness_targets == VIBRANT.lightness_targets
        assert len({copy, VIBRANT}) == 2

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError):
            Target(weights=(1.0, 1.0))


class TestTargetBuilder:

    def test_weights_normalized(self):
        t = (
            TargetBuilder()
            .set_saturation_weight(2)
            .set_lightness_weight(1)
            .set_population_weight(1)
            .build()
        )
        assert t.weights == pytest.approx((0.5, 0.25, 0.25))

    def test_zero_weight_excluded(self):
        t = TargetBuilder(VIBRANT).set_population_weight(0).build()
        assert t.population_weight == 0.0
        assert t.saturation_weight + t.lightness_weight == pytest.approx(1.0)
        assert t.saturation_weight == pytest.approx(0.24 / 0.76)

    def test_negative_weight_has_no_influence_on_sum(self):
        t = (
            TargetBuilder()
            .set_saturation_weight(-1)
            .set_lightness_weight(3)
            .set_population_weight(1)
            .build()
        )
        assert t.weights == pytest.approx((-1.0, 0.75, 0.25))

    def test_setters(self):
        t = (
            TargetBuilder(name="accent")
            .set_minimum_saturation(0.1)
            .set_target_saturation(0.6)
            .set_maximum_saturation(0.9)
            .set_minimum_lightness(0.2)
            .set_target_lightness(0.4)
            .set_maximum_lightness(0.8)
            .set_exclusive(False)
            .build()
        )
        assert t.saturation_targets == pytest.approx((0.1, 0.6, 0.9))
        assert t.lightness_targets == pytest.approx((0.2, 0.4, 0.8))
        assert not t.is_exclusive
        assert t.name == "accent"

    def test_does_not_mutate_base(self):
        TargetBuilder(VIBRANT).set_target_lightness(0.9).build()
        assert VIBRANT.target_lightness == pytest.approx(0.5)


class TestPalette:

    def test_from_swatches(self):
        swatches = [Swatch(0xFFFF0000, 10), Swatch(0xFF1A237E, 5)]
        palette = Palette.from_swatches(swatches)
        assert palette.dominant_swatch is palette.swatches[0]
        assert palette.targets == DEFAULT_TARGETS

    def test_empty_palette(self):
        palette = Palette.from_swatches([])
        assert palette.dominant_swatch is None
        assert len(palette.selected) == 0
        assert palette.get_dominant_color() is None
        assert palette.get_dominant_color(default=0xFF808080) == PackedColor(0xFF808080)
        assert palette.vibrant_swatch is None
        assert palette.get_vibrant_color(0xFF000000) == BLACK

    def test_selected_is_read_only(self):
        palette = Palette.from_swatches([Swatch(0xFFFF0000, 1)])
        with pytest.raises(TypeError):
            palette.selected[VIBRANT] = Swatch(0xFF00FF00, 1)

    def test_color_for_target(self):
        palette = Palette.from_swatches([Swatch(0xFFFF0000, 1)])
        assert palette.get_color_for_target(LIGHT_VIBRANT) == PackedColor(0xFFFF0000)
        assert palette.get_light_vibrant_color() == PackedColor(0xFFFF0000)
        assert palette.get_color_for_target(DARK_VIBRANT) is None
        assert palette.get_dark_vibrant_color(default=WHITE) == WHITE


class TestPickling:

    def _palette(self):
        return Palette.from_swatches(
            [Swatch(0xFFFF0000, 100), Swatch(0xFF1A237E, 50), Swatch(0xFF8090A0, 30)]
        )

    def test_swatch_round_trip(self):
        s = Swatch(0xFF1A237E, 7)
        body = s.body_text_color
        restored = pickle.loads(pickle.dumps(s))
        assert restored == s
        assert restored.body_text_color == body

    def test_canonical_target_keeps_identity(self):
        for target in DEFAULT_TARGETS:
            assert pickle.loads(pickle.dumps(target)) is target
            assert copy.deepcopy(target) is target

    def test_custom_target_round_trip(self):
        custom = TargetBuilder(VIBRANT, name="vibrant").set_exclusive(False).build()
        restored = pickle.loads(pickle.dumps(custom))
        assert restored is not VIBRANT
        assert restored.weights == custom.weights
        assert restored.lightness_targets == custom.lightness_targets
        assert not restored.is_exclusive

    def test_palette_round_trip(self):
        palette = self._palette()
        restored = pickle.loads(pickle.dumps(palette))

        assert restored.swatches == palette.swatches
        assert restored.dominant_swatch == palette.dominant_swatch
        assert restored.targets == DEFAULT_TARGETS
        assert restored.vibrant_swatch is not None
        assert restored.vibrant_swatch == palette.vibrant_swatch
        assert restored.get_light_vibrant_color() == PackedColor(0xFFFF0000)
        assert restored.used_colors == palette.used_colors

    def test_palette_deepcopy(self):
        palette = self._palette()
        copied = copy.deepcopy(palette)
        assert copied.dark_vibrant_swatch == palette.dark_vibrant_swatch
        with pytest.raises(TypeError):
            copied.selected[VIBRANT] = Swatch(0xFF00FF00, 1)

    def test_custom_target_keys_survive_round_trip(self):
        custom = TargetBuilder(MUTED).set_exclusive(False).build()
        palette = Palette.from_swatches([Swatch(0xFF8090A0, 3)], [custom])
        restored = pickle.loads(pickle.dumps(palette))
        assert restored.get_swatch_for_target(restored.targets[0]) == Swatch(0xFF8090A0, 3)
