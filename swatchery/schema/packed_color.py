# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Packed 32-bit ARGB color integers.

Layout, most to least significant byte::

    [alpha:8][red:8][green:8][blue:8]

The stored value is always the *signed* 32-bit interpretation, so opaque
white is ``-1`` and opaque black is ``-16777216``. Any Python int is
accepted on construction and reduced modulo 2**32. All arithmetic wraps
the same way fixed-width integers do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _wrap(value: int) -> int:
    """Reduce an arbitrary int to the signed 32-bit range."""
    value &= _MASK_32
    if value & _SIGN_BIT:
        value -= 1 << 32
    return value


def _check_component(name: str, value: int) -> int:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} component must be 0-255, got {value}")
    return value


IntLike = Union[int, "PackedColor"]


@dataclass(frozen=True, slots=True)
class PackedColor:
    """
    An immutable ARGB color packed into a single 32-bit integer.

    Attributes:
        value: Signed 32-bit packed value
    """
    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _wrap(int(self.value)))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def argb(cls, alpha: int, red: int, green: int, blue: int) -> PackedColor:
        """Pack four 0-255 components."""
        _check_component("alpha", alpha)
        _check_component("red", red)
        _check_component("green", green)
        _check_component("blue", blue)
        return cls((alpha << 24) | (red << 16) | (green << 8) | blue)

    @classmethod
    def rgb(cls, red: int, green: int, blue: int) -> PackedColor:
        """Pack an opaque color."""
        return cls.argb(255, red, green, blue)

    @classmethod
    def from_hex(cls, hex_color: str) -> PackedColor:
        """
        Parse ``#RRGGBB`` (opaque) or ``#AARRGGBB``.
        """
        digits = hex_color.lstrip("#")
        if len(digits) == 6:
            return cls(0xFF000000 | int(digits, 16))
        if len(digits) == 8:
            return cls(int(digits, 16))
        raise ValueError(f"Expected #RRGGBB or #AARRGGBB, got {hex_color!r}")

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    @property
    def alpha(self) -> int:
        return (self.value >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self.value >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.value >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.value & 0xFF

    def unpack(self) -> tuple[int, int, int, int]:
        """Return ``(alpha, red, green, blue)``."""
        return self.alpha, self.red, self.green, self.blue

    @property
    def is_opaque(self) -> bool:
        return self.alpha == 255

    @property
    def unsigned(self) -> int:
        """The packed value as an unsigned 32-bit int (``0xAARRGGBB``)."""
        return self.value & _MASK_32

    @property
    def hex(self) -> str:
        """Hex string like ``#FF3941C8`` (alpha first)."""
        return f"#{self.unsigned:08X}"

    @property
    def rgb_hex(self) -> str:
        """Hex string without alpha, like ``#3941C8``."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def with_alpha(self, alpha: int) -> PackedColor:
        """Return this color with its alpha component replaced."""
        _check_component("alpha", alpha)
        return PackedColor((self.value & 0x00FFFFFF) | (alpha << 24))

    # -------------------------------------------------------------------------
    # Integer protocol
    # -------------------------------------------------------------------------

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"PackedColor({self.hex})"

    def __add__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value + int(other))

    def __sub__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value - int(other))

    def __mul__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value * int(other))

    def __floordiv__(self, other: IntLike) -> PackedColor:
        # Truncating division, as fixed-width integers do
        divisor = int(other)
        if divisor == 0:
            raise ZeroDivisionError("PackedColor division by zero")
        quotient = abs(self.value) // abs(divisor)
        if (self.value < 0) != (divisor < 0):
            quotient = -quotient
        return PackedColor(quotient)

    def __mod__(self, other: IntLike) -> PackedColor:
        divisor = int(other)
        if divisor == 0:
            raise ZeroDivisionError("PackedColor modulo by zero")
        quotient = int(self // divisor)
        return PackedColor(self.value - quotient * divisor)

    def __and__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value & int(other))

    def __or__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value | int(other))

    def __xor__(self, other: IntLike) -> PackedColor:
        return PackedColor(self.value ^ int(other))

    def __lshift__(self, bits: int) -> PackedColor:
        return PackedColor(self.value << (int(bits) & 31))

    def __rshift__(self, bits: int) -> PackedColor:
        # Arithmetic shift on the signed value
        return PackedColor(self.value >> (int(bits) & 31))

    def __invert__(self) -> PackedColor:
        return PackedColor(~self.value)

    def __rsub__(self, other: int) -> PackedColor:
        return PackedColor(other) - self

    def __rfloordiv__(self, other: int) -> PackedColor:
        return PackedColor(other) // self

    def __rmod__(self, other: int) -> PackedColor:
        return PackedColor(other) % self

    def __rlshift__(self, other: int) -> PackedColor:
        return PackedColor(other) << self

    def __rrshift__(self, other: int) -> PackedColor:
        return PackedColor(other) >> self

    def __reduce__(self):
        return (PackedColor, (self.value,))

    __radd__ = __add__
    __rmul__ = __mul__
    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__


def to_packed(color: IntLike) -> PackedColor:
    """Coerce an int or PackedColor to a PackedColor."""
    if isinstance(color, PackedColor):
        return color
    return PackedColor(int(color))


BLACK = PackedColor(0xFF000000)
WHITE = PackedColor(0xFFFFFFFF)
TRANSPARENT = PackedColor(0x00000000)
