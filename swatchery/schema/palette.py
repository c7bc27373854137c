# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Palette schema: swatches, targets and the generated palette.

Design principles:
- Immutable: Swatch, Target and Palette never change after construction.
  The only exception is a Swatch's text colors, which are computed once on
  first access and then frozen.
- Deterministic: the same swatches and targets always give the same palette.
- Identity-keyed targets: two targets with identical values are still
  different profiles. ``Palette.selected`` is keyed by target identity.

HSL conventions:
- Hue: 0-360 degrees
- Saturation: 0.0 = gray, 1.0 = fully saturated
- Lightness: 0.0 = black, 0.5 = pure hue, 1.0 = white
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from swatchery.schema.packed_color import IntLike, PackedColor, to_packed


# =============================================================================
# Swatch
# =============================================================================

MIN_CONTRAST_TITLE_TEXT = 3.0
MIN_CONTRAST_BODY_TEXT = 4.5

# Guards the text-color cell of every swatch; instances hold no lock
_TEXT_COLOR_LOCK = threading.Lock()


@dataclass(frozen=True)
class Swatch:
    """
    A representative color and the number of pixels it stands for.

    Attributes:
        rgb: Packed color of the swatch (opaque)
        population: Number of image pixels represented by this swatch
    """
    rgb: PackedColor
    population: int
    _text_colors: Optional[tuple[PackedColor, PackedColor]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "rgb", to_packed(self.rgb))
        if self.population < 0:
            raise ValueError(f"Population must be >= 0, got {self.population}")

    @property
    def red(self) -> int:
        return self.rgb.red

    @property
    def green(self) -> int:
        return self.rgb.green

    @property
    def blue(self) -> int:
        return self.rgb.blue

    @property
    def hex(self) -> str:
        """Hex color string like "#3941C8"."""
        return self.rgb.rgb_hex

    @cached_property
    def hsl(self) -> tuple[float, float, float]:
        """
        HSL of this swatch's color.

        (hue [0, 360), saturation [0, 1], lightness [0, 1])
        """
        from swatchery.measure.colorspace import rgb_to_hsl
        return rgb_to_hsl(self.red, self.green, self.blue)

    @property
    def title_text_color(self) -> PackedColor:
        """
        Color for 'title' text drawn over this swatch.

        Guaranteed to reach a contrast ratio of at least 3.0 where any
        white or black alpha can.
        """
        return self._ensure_text_colors()[0]

    @property
    def body_text_color(self) -> PackedColor:
        """
        Color for 'body' text drawn over this swatch.

        Guaranteed to reach a contrast ratio of at least 4.5 where any
        white or black alpha can.
        """
        return self._ensure_text_colors()[1]

    def _ensure_text_colors(self) -> tuple[PackedColor, PackedColor]:
        cached = self._text_colors
        if cached is not None:
            return cached
        with _TEXT_COLOR_LOCK:
            if self._text_colors is None:
                object.__setattr__(self, "_text_colors", self._generate_text_colors())
            return self._text_colors

    def _generate_text_colors(self) -> tuple[PackedColor, PackedColor]:
        """Return (title, body) text colors."""
        from swatchery.measure.colorspace import minimum_alpha
        from swatchery.schema.packed_color import BLACK, WHITE

        # The swatch may carry a translucent alpha; contrast needs an opaque base
        background = self.rgb.with_alpha(255)

        # White first, as most swatch colors are dark
        light_body = minimum_alpha(WHITE, background, MIN_CONTRAST_BODY_TEXT)
        light_title = minimum_alpha(WHITE, background, MIN_CONTRAST_TITLE_TEXT)

        if light_body is not None and light_title is not None:
            return WHITE.with_alpha(light_title), WHITE.with_alpha(light_body)

        dark_body = minimum_alpha(BLACK, background, MIN_CONTRAST_BODY_TEXT)
        dark_title = minimum_alpha(BLACK, background, MIN_CONTRAST_TITLE_TEXT)

        if dark_body is not None and dark_title is not None:
            return BLACK.with_alpha(dark_title), BLACK.with_alpha(dark_body)

        # No single base color works for both roles; mix them
        title = (
            WHITE.with_alpha(light_title)
            if light_title is not None
            else BLACK.with_alpha(dark_title if dark_title is not None else 255)
        )
        body = (
            WHITE.with_alpha(light_body)
            if light_body is not None
            else BLACK.with_alpha(dark_body if dark_body is not None else 255)
        )
        return title, body

    def __repr__(self) -> str:
        return f"Swatch(rgb={self.hex}, population={self.population})"


# =============================================================================
# Target
# =============================================================================

TARGET_DARK_LUMA = 0.26
MAX_DARK_LUMA = 0.45

MIN_LIGHT_LUMA = 0.55
TARGET_LIGHT_LUMA = 0.74

MIN_NORMAL_LUMA = 0.3
TARGET_NORMAL_LUMA = 0.5
MAX_NORMAL_LUMA = 0.7

TARGET_MUTED_SATURATION = 0.3
MAX_MUTED_SATURATION = 0.4

TARGET_VIBRANT_SATURATION = 1.0
MIN_VIBRANT_SATURATION = 0.35

WEIGHT_SATURATION = 0.24
WEIGHT_LUMA = 0.52
WEIGHT_POPULATION = 0.24

INDEX_MIN = 0
INDEX_TARGET = 1
INDEX_MAX = 2

INDEX_WEIGHT_SAT = 0
INDEX_WEIGHT_LUMA = 1
INDEX_WEIGHT_POP = 2


@dataclass(frozen=True, eq=False)
class Target:
    """
    A scoring profile used to pick one swatch from a palette.

    Compared and hashed by identity. Create custom targets with
    ``TargetBuilder``. The six canonical targets keep their identity when
    pickled or deep-copied.

    Attributes:
        saturation_targets: (minimum, target, maximum) saturation
        lightness_targets: (minimum, target, maximum) lightness
        weights: Normalized (saturation, lightness, population) weights
        is_exclusive: If True, a color selected for this target cannot be
            selected by a later target
        name: Label used in reprs and logs
    """
    saturation_targets: tuple[float, float, float] = (0.0, 0.5, 1.0)
    lightness_targets: tuple[float, float, float] = (0.0, 0.5, 1.0)
    weights: tuple[float, float, float] = (
        WEIGHT_SATURATION, WEIGHT_LUMA, WEIGHT_POPULATION,
    )
    is_exclusive: bool = True
    name: str = "custom"

    def __post_init__(self) -> None:
        for attr in ("saturation_targets", "lightness_targets", "weights"):
            values = tuple(float(v) for v in getattr(self, attr))
            if len(values) != 3:
                raise ValueError(f"{attr} must have 3 values, got {len(values)}")
            object.__setattr__(self, attr, values)
        object.__setattr__(self, "weights", normalize_weights(self.weights))

    @property
    def minimum_saturation(self) -> float:
        return self.saturation_targets[INDEX_MIN]

    @property
    def target_saturation(self) -> float:
        return self.saturation_targets[INDEX_TARGET]

    @property
    def maximum_saturation(self) -> float:
        return self.saturation_targets[INDEX_MAX]

    @property
    def minimum_lightness(self) -> float:
        return self.lightness_targets[INDEX_MIN]

    @property
    def target_lightness(self) -> float:
        return self.lightness_targets[INDEX_TARGET]

    @property
    def maximum_lightness(self) -> float:
        return self.lightness_targets[INDEX_MAX]

    @property
    def saturation_weight(self) -> float:
        """
        Importance of a color's saturation being close to the target.

        Relative to the other weights; 0 means no influence.
        """
        return self.weights[INDEX_WEIGHT_SAT]

    @property
    def lightness_weight(self) -> float:
        """
        Importance of a color's lightness being close to the target.

        Relative to the other weights; 0 means no influence.
        """
        return self.weights[INDEX_WEIGHT_LUMA]

    @property
    def population_weight(self) -> float:
        """
        Importance of a color's population being close to the most
        populous swatch.
        """
        return self.weights[INDEX_WEIGHT_POP]

    def __repr__(self) -> str:
        return (
            f"Target({self.name!r}, saturation={self.saturation_targets}, "
            f"lightness={self.lightness_targets}, weights={self.weights}, "
            f"exclusive={self.is_exclusive})"
        )

    def __reduce_ex__(self, protocol):
        # The six canonical targets unpickle to the module-level instances
        if _CANONICAL_TARGETS.get(self.name) is self:
            return (_canonical_target, (self.name,))
        return super().__reduce_ex__(protocol)


def normalize_weights(weights: Sequence[float]) -> tuple[float, ...]:
    """
    Scale positive weights so they sum to 1.

    Weights <= 0 are left untouched and take no part in the sum.
    """
    total = sum(w for w in weights if w > 0)
    if total == 0:
        return tuple(weights)
    return tuple(w / total if w > 0 else w for w in weights)


class TargetBuilder:
    """
    Fluent builder for custom ``Target`` instances.

    Example:
        >>> target = (
        ...     TargetBuilder(VIBRANT)
        ...     .set_population_weight(0)
        ...     .set_exclusive(False)
        ...     .build()
        ... )
    """

    def __init__(self, target: Optional[Target] = None, *, name: Optional[str] = None):
        base = target if target is not None else Target()
        self._saturation = list(base.saturation_targets)
        self._lightness = list(base.lightness_targets)
        self._weights = list(base.weights)
        self._exclusive = base.is_exclusive
        self._name = name if name is not None else base.name

    def set_minimum_saturation(self, value: float) -> TargetBuilder:
        self._saturation[INDEX_MIN] = value
        return self

    def set_target_saturation(self, value: float) -> TargetBuilder:
        self._saturation[INDEX_TARGET] = value
        return self

    def set_maximum_saturation(self, value: float) -> TargetBuilder:
        self._saturation[INDEX_MAX] = value
        return self

    def set_minimum_lightness(self, value: float) -> TargetBuilder:
        self._lightness[INDEX_MIN] = value
        return self

    def set_target_lightness(self, value: float) -> TargetBuilder:
        self._lightness[INDEX_TARGET] = value
        return self

    def set_maximum_lightness(self, value: float) -> TargetBuilder:
        self._lightness[INDEX_MAX] = value
        return self

    def set_saturation_weight(self, weight: float) -> TargetBuilder:
        self._weights[INDEX_WEIGHT_SAT] = weight
        return self

    def set_lightness_weight(self, weight: float) -> TargetBuilder:
        self._weights[INDEX_WEIGHT_LUMA] = weight
        return self

    def set_population_weight(self, weight: float) -> TargetBuilder:
        self._weights[INDEX_WEIGHT_POP] = weight
        return self

    def set_exclusive(self, exclusive: bool) -> TargetBuilder:
        """Whether a color picked for this target is unavailable to later targets."""
        self._exclusive = exclusive
        return self

    def set_name(self, name: str) -> TargetBuilder:
        self._name = name
        return self

    def build(self) -> Target:
        """Build the target. Weights are normalized by ``Target`` itself."""
        return Target(
            saturation_targets=tuple(self._saturation),
            lightness_targets=tuple(self._lightness),
            weights=tuple(self._weights),
            is_exclusive=self._exclusive,
            name=self._name,
        )


def _canonical(name: str, *, light: str, vibrant: bool) -> Target:
    builder = TargetBuilder(name=name)

    if light == "light":
        builder.set_minimum_lightness(MIN_LIGHT_LUMA).set_target_lightness(TARGET_LIGHT_LUMA)
    elif light == "dark":
        builder.set_target_lightness(TARGET_DARK_LUMA).set_maximum_lightness(MAX_DARK_LUMA)
    else:
        (
            builder.set_minimum_lightness(MIN_NORMAL_LUMA)
            .set_target_lightness(TARGET_NORMAL_LUMA)
            .set_maximum_lightness(MAX_NORMAL_LUMA)
        )

    if vibrant:
        (
            builder.set_minimum_saturation(MIN_VIBRANT_SATURATION)
            .set_target_saturation(TARGET_VIBRANT_SATURATION)
        )
    else:
        (
            builder.set_target_saturation(TARGET_MUTED_SATURATION)
            .set_maximum_saturation(MAX_MUTED_SATURATION)
        )

    return builder.build()


LIGHT_VIBRANT = _canonical("light_vibrant", light="light", vibrant=True)
VIBRANT = _canonical("vibrant", light="normal", vibrant=True)
DARK_VIBRANT = _canonical("dark_vibrant", light="dark", vibrant=True)
LIGHT_MUTED = _canonical("light_muted", light="light", vibrant=False)
MUTED = _canonical("muted", light="normal", vibrant=False)
DARK_MUTED = _canonical("dark_muted", light="dark", vibrant=False)

DEFAULT_TARGETS: tuple[Target, ...] = (
    LIGHT_VIBRANT,
    VIBRANT,
    DARK_VIBRANT,
    LIGHT_MUTED,
    MUTED,
    DARK_MUTED,
)

_CANONICAL_TARGETS: dict[str, Target] = {t.name: t for t in DEFAULT_TARGETS}


def _canonical_target(name: str) -> Target:
    return _CANONICAL_TARGETS[name]


# =============================================================================
# Palette
# =============================================================================


@dataclass(frozen=True, eq=False)
class Palette:
    """
    Generated palette: all swatches plus one selected swatch per target.

    Attributes:
        swatches: Every swatch produced by quantization
        targets: Targets used for selection, in priority order
        selected: Target → chosen swatch (targets without a match are absent)
        used_colors: Colors claimed by exclusive targets
        dominant_swatch: Most populous swatch, None for an empty palette
    """
    swatches: tuple[Swatch, ...]
    targets: tuple[Target, ...]
    selected: Mapping[Target, Swatch]
    used_colors: frozenset[PackedColor]
    dominant_swatch: Optional[Swatch]

    def __post_init__(self) -> None:
        object.__setattr__(self, "swatches", tuple(self.swatches))
        object.__setattr__(self, "targets", tuple(self.targets))
        object.__setattr__(self, "selected", MappingProxyType(dict(self.selected)))
        object.__setattr__(self, "used_colors", frozenset(self.used_colors))

    def __reduce__(self):
        return (
            Palette,
            (
                self.swatches,
                self.targets,
                dict(self.selected),
                self.used_colors,
                self.dominant_swatch,
            ),
        )

    @classmethod
    def from_swatches(
        cls,
        swatches: Sequence[Swatch],
        targets: Optional[Sequence[Target]] = None,
    ) -> Palette:
        """
        Build a palette from pre-computed swatches.

        Useful for tests, or to rebuild a palette from a stored swatch list.
        Uses the six default targets unless ``targets`` is given.
        """
        from swatchery.measure.selection import select_palette
        return select_palette(swatches, targets if targets is not None else DEFAULT_TARGETS)

    def get_swatch_for_target(self, target: Target) -> Optional[Swatch]:
        """Swatch selected for ``target``, or None."""
        return self.selected.get(target)

    def get_color_for_target(
        self,
        target: Target,
        default: Optional[IntLike] = None,
    ) -> Optional[PackedColor]:
        """Selected color for ``target``, or ``default`` if none was selected."""
        swatch = self.get_swatch_for_target(target)
        if swatch is not None:
            return swatch.rgb
        return to_packed(default) if default is not None else None

    def get_dominant_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        """Color of the dominant swatch, or ``default`` for an empty palette."""
        if self.dominant_swatch is not None:
            return self.dominant_swatch.rgb
        return to_packed(default) if default is not None else None

    # Profile shortcuts

    @property
    def light_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(LIGHT_VIBRANT)

    @property
    def vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(VIBRANT)

    @property
    def dark_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(DARK_VIBRANT)

    @property
    def light_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(LIGHT_MUTED)

    @property
    def muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(MUTED)

    @property
    def dark_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(DARK_MUTED)

    def get_light_vibrant_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(LIGHT_VIBRANT, default)

    def get_vibrant_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(VIBRANT, default)

    def get_dark_vibrant_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(DARK_VIBRANT, default)

    def get_light_muted_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(LIGHT_MUTED, default)

    def get_muted_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(MUTED, default)

    def get_dark_muted_color(self, default: Optional[IntLike] = None) -> Optional[PackedColor]:
        return self.get_color_for_target(DARK_MUTED, default)
