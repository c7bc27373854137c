# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""Tests for packed ARGB colors."""

import pickle

import pytest

from swatchery.schema.packed_color import BLACK, TRANSPARENT, WHITE, PackedColor, to_packed


class TestPacking:

    @pytest.mark.parametrize(
        "argb",
        [(0, 0, 0, 0), (255, 255, 255, 255), (255, 18, 52, 86), (128, 1, 254, 127)],
    )
    def test_roundtrip(self, argb):
        assert PackedColor.argb(*argb).unpack() == argb

    def test_rgb_is_opaque(self):
        c = PackedColor.rgb(10, 20, 30)
        assert c.alpha == 255
        assert c.is_opaque

    def test_signed_storage(self):
        assert WHITE.value == -1
        assert BLACK.value == -16777216
        assert TRANSPARENT.value == 0

    def test_unsigned_and_signed_inputs_agree(self):
        assert PackedColor(0xFFFF0000) == PackedColor(-65536)
        assert PackedColor(0xFFFF0000).unsigned == 0xFFFF0000

    def test_component_out_of_range(self):
        with pytest.raises(ValueError, match="red"):
            PackedColor.argb(255, 256, 0, 0)
        with pytest.raises(ValueError, match="alpha"):
            PackedColor.rgb(0, 0, 0).with_alpha(-1)

    def test_components_mask_to_8_bits(self):
        c = PackedColor(0x80FF7F01)
        assert (c.alpha, c.red, c.green, c.blue) == (0x80, 0xFF, 0x7F, 0x01)

    def test_with_alpha(self):
        c = WHITE.with_alpha(0x40)
        assert c.unsigned == 0x40FFFFFF
        assert WHITE.alpha == 255  # original untouched


class TestHex:

    def test_hex_includes_alpha(self):
        assert PackedColor(0xFF3941C8).hex == "#FF3941C8"

    def test_rgb_hex(self):
        assert PackedColor(0x803941C8).rgb_hex == "#3941C8"

    def test_from_hex_opaque(self):
        assert PackedColor.from_hex("#FF0000") == PackedColor(0xFFFF0000)

    def test_from_hex_with_alpha(self):
        assert PackedColor.from_hex("80112233").alpha == 0x80

    def test_from_hex_invalid(self):
        with pytest.raises(ValueError):
            PackedColor.from_hex("#FFF")


class TestWrappingArithmetic:

    def test_add_overflows_to_min(self):
        assert (PackedColor(0x7FFFFFFF) + 1).value == -(2 ** 31)

    def test_sub_underflows_to_max(self):
        assert (PackedColor(-(2 ** 31)) - 1).value == 0x7FFFFFFF

    def test_mul_wraps(self):
        assert (PackedColor(0x10000) * 0x10000).value == 0

    def test_division_truncates_toward_zero(self):
        assert (PackedColor(-7) // 2).value == -3
        assert (PackedColor(-7) % 2).value == -1

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            PackedColor(1) // 0

    def test_shifts(self):
        assert (PackedColor(1) << 31).value == -(2 ** 31)
        assert (PackedColor(-16) >> 2).value == -4

    def test_bitwise(self):
        assert (WHITE & 0x00FFFFFF).unsigned == 0x00FFFFFF
        assert (PackedColor(0x00FF0000) | 0xFF000000).unsigned == 0xFFFF0000
        assert ~TRANSPARENT == WHITE

    def test_int_conversion(self):
        assert int(WHITE) == -1
        assert to_packed(-1) == WHITE
        assert to_packed(WHITE) is WHITE

    def test_hashable(self):
        assert len({PackedColor(0xFFFFFFFF), WHITE, PackedColor(-1)}) == 1

    def test_reflected_operators_wrap(self):
        assert (1 - PackedColor(5)).value == -4
        assert (-(2 ** 31) - PackedColor(1)).value == 0x7FFFFFFF
        assert (7 // PackedColor(-2)).value == -3
        assert (7 % PackedColor(-2)).value == 1
        assert (1 << PackedColor(31)).value == -(2 ** 31)
        assert (-16 >> PackedColor(2)).value == -4

    def test_pickle(self):
        color = PackedColor(0xFF3941C8)
        assert pickle.loads(pickle.dumps(color)) == color
