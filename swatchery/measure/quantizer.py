# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Color quantization by volume-based box splitting.

A median-cut variant tuned for picking out *distinct* colors rather than
representative ones. The RGB cube (at 5 bits per channel) is repeatedly
divided, always splitting the box with the largest color volume, until the
requested number of boxes exists. Median cut splits by population, so
large flat areas swallow the palette; splitting by volume keeps small but
distinct colors alive.

Pipeline:
1. Reduce each pixel to 5 bits per channel (15-bit color, 32768 buckets)
2. Build a histogram and zero out buckets rejected by the filters
3. Few enough colors left → one swatch per color, done
4. Otherwise split boxes largest-volume first
5. Average each box (population weighted) and re-apply the filters
"""

from __future__ import annotations

import heapq
import logging
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from swatchery.schema.packed_color import PackedColor
from swatchery.schema.palette import Swatch
from swatchery.measure.colorspace import rgb_to_hsl_batch
from swatchery.measure.filters import Filter, is_allowed


logger = logging.getLogger(__name__)


QUANTIZE_WORD_WIDTH = 5
QUANTIZE_WORD_MASK = (1 << QUANTIZE_WORD_WIDTH) - 1
HISTOGRAM_SIZE = 1 << (QUANTIZE_WORD_WIDTH * 3)


# =============================================================================
# Reduced-width color helpers
# =============================================================================


class Component(Enum):
    """Color channel a box can be split along."""
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


def modify_word_width(value: int, current_width: int, target_width: int) -> int:
    """
    Change the bit width of a channel value.

    Narrowing keeps the most significant bits. Widening replicates the high
    bits into the new low bits, so full scale maps to full scale
    (31 at 5 bits → 255 at 8 bits).
    """
    if target_width > current_width:
        shift = target_width - current_width
        new_value = value << shift
        if shift <= current_width:
            new_value |= value >> (current_width - shift)
    else:
        new_value = value >> (current_width - target_width)
    return new_value & ((1 << target_width) - 1)


def quantized_red(color: int) -> int:
    return (color >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK


def quantized_green(color: int) -> int:
    return (color >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK


def quantized_blue(color: int) -> int:
    return color & QUANTIZE_WORD_MASK


def quantize_from_rgb888(pixels: NDArray[np.int64]) -> NDArray[np.int64]:
    """
    Reduce packed ARGB pixels to 15-bit ``r << 10 | g << 5 | b`` colors.

    Alpha is discarded.
    """
    shift = 8 - QUANTIZE_WORD_WIDTH
    r = ((pixels >> 16) & 0xFF) >> shift
    g = ((pixels >> 8) & 0xFF) >> shift
    b = (pixels & 0xFF) >> shift
    return (r << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) | (g << QUANTIZE_WORD_WIDTH) | b


def approximate_to_rgb888(r: int, g: int, b: int) -> PackedColor:
    """Expand 5-bit channels back to an opaque 8-bit color."""
    return PackedColor.rgb(
        modify_word_width(r, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(g, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(b, QUANTIZE_WORD_WIDTH, 8),
    )


def quantized_to_rgb888(color: int) -> PackedColor:
    return approximate_to_rgb888(
        quantized_red(color), quantized_green(color), quantized_blue(color)
    )


def _expand_channels(colors: NDArray[np.int64]) -> NDArray[np.int64]:
    """(N,) 15-bit colors → (N, 3) 8-bit RGB, vectorized."""
    channels = np.stack(
        [
            (colors >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK,
            (colors >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK,
            colors & QUANTIZE_WORD_MASK,
        ],
        axis=-1,
    )
    shift = 8 - QUANTIZE_WORD_WIDTH
    return (channels << shift) | (channels >> (QUANTIZE_WORD_WIDTH - shift))


def _modify_significant_octet(
    colors: NDArray[np.int64],
    dimension: Component,
) -> NDArray[np.int64]:
    """
    Re-pack colors so ``dimension`` is the most significant channel.

    Sorting the re-packed values orders colors by that channel; the mapping
    is a bijection, so sorting by it and restoring is the same as sorting
    the originals with this key.
    """
    if dimension is Component.RED:
        return colors

    r = (colors >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK
    g = (colors >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK
    b = colors & QUANTIZE_WORD_MASK

    if dimension is Component.GREEN:
        return (g << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) | (r << QUANTIZE_WORD_WIDTH) | b
    return (b << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) | (g << QUANTIZE_WORD_WIDTH) | r


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


# =============================================================================
# Vbox
# =============================================================================


class Vbox:
    """
    A tightly fitting box around a run of the sorted color array.

    ``lower`` and ``upper`` are inclusive indices into the quantizer's color
    array. Channel bounds are kept at the reduced (5-bit) width.
    """

    def __init__(
        self,
        lower: int,
        upper: int,
        colors: NDArray[np.int64],
        histogram: NDArray[np.int64],
    ):
        self.lower = lower
        self.upper = upper
        self._colors = colors
        self._histogram = histogram
        self.population = 0
        self.min_red = self.max_red = 0
        self.min_green = self.max_green = 0
        self.min_blue = self.max_blue = 0
        self.fit_box()

    @property
    def volume(self) -> int:
        return (
            (self.max_red - self.min_red + 1)
            * (self.max_green - self.min_green + 1)
            * (self.max_blue - self.min_blue + 1)
        )

    @property
    def color_count(self) -> int:
        return 1 + self.upper - self.lower

    def can_split(self) -> bool:
        return self.color_count > 1

    def fit_box(self) -> None:
        """Recompute channel bounds and population to fit the colors in range."""
        box_colors = self._colors[self.lower:self.upper + 1]

        r = (box_colors >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK
        g = (box_colors >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK
        b = box_colors & QUANTIZE_WORD_MASK

        self.min_red, self.max_red = int(r.min()), int(r.max())
        self.min_green, self.max_green = int(g.min()), int(g.max())
        self.min_blue, self.max_blue = int(b.min()), int(b.max())
        self.population = int(self._histogram[box_colors].sum())

    def longest_color_dimension(self) -> Component:
        """Channel with the widest range; ties favour red, then green."""
        red_length = self.max_red - self.min_red
        green_length = self.max_green - self.min_green
        blue_length = self.max_blue - self.min_blue

        if red_length >= green_length and red_length >= blue_length:
            return Component.RED
        if green_length >= red_length and green_length >= blue_length:
            return Component.GREEN
        return Component.BLUE

    def find_split_point(self) -> int:
        """
        Index of the last color that stays in this box after a split.

        Sorts the box's colors along the longest dimension in place, then
        walks them until half of the box's population has been covered.
        """
        dimension = self.longest_color_dimension()
        lower, upper = self.lower, self.upper

        box_colors = self._colors[lower:upper + 1]
        order = np.argsort(_modify_significant_octet(box_colors, dimension), kind="stable")
        self._colors[lower:upper + 1] = box_colors[order]

        counts = np.cumsum(self._histogram[self._colors[lower:upper + 1]])
        midpoint = self.population // 2
        offset = int(np.searchsorted(counts, midpoint, side="left"))

        # Never split on the upper index, that would leave this box unchanged
        return min(upper - 1, lower + offset)

    def split_box(self) -> Vbox:
        """
        Split this box in two along its longest dimension.

        This box shrinks to the lower half; the upper half is returned.

        Raises:
            RuntimeError: If the box holds a single color
        """
        if not self.can_split():
            raise RuntimeError("Can not split a box with only 1 color")

        split_point = self.find_split_point()
        new_box = Vbox(split_point + 1, self.upper, self._colors, self._histogram)

        self.upper = split_point
        self.fit_box()

        return new_box

    def average_color(self) -> Swatch:
        """Population-weighted average color of the box."""
        box_colors = self._colors[self.lower:self.upper + 1]
        populations = self._histogram[box_colors]
        total = int(populations.sum())

        r = (box_colors >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK
        g = (box_colors >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK
        b = box_colors & QUANTIZE_WORD_MASK

        red_mean = _round_half_up(int((r * populations).sum()) / total)
        green_mean = _round_half_up(int((g * populations).sum()) / total)
        blue_mean = _round_half_up(int((b * populations).sum()) / total)

        return Swatch(approximate_to_rgb888(red_mean, green_mean, blue_mean), total)

    def __repr__(self) -> str:
        return (
            f"Vbox([{self.lower}, {self.upper}], population={self.population}, "
            f"volume={self.volume})"
        )


# =============================================================================
# Quantizer
# =============================================================================


PixelInput = Union[NDArray[np.integer], Sequence[int], Iterable[PackedColor]]


def as_pixel_array(pixels: PixelInput) -> NDArray[np.int64]:
    """
    Coerce packed pixels to an int64 array of unsigned 32-bit values.

    Accepts NumPy arrays (signed or unsigned), ints and PackedColors.
    """
    if isinstance(pixels, np.ndarray):
        arr = pixels.astype(np.int64, copy=False).ravel()
    else:
        arr = np.fromiter((int(p) for p in pixels), dtype=np.int64)
    return arr & 0xFFFFFFFF


class ColorCutQuantizer:
    """
    Reduce an image's colors to at most ``max_colors`` swatches.

    Quantization runs once, in the constructor. Results are available from
    ``quantized_colors``.

    Args:
        pixels: Packed ARGB pixels (any order; alpha is ignored)
        max_colors: Maximum number of swatches to produce (>= 1)
        filters: Admissibility filters, applied in order

    Example:
        >>> q = ColorCutQuantizer([0xFFFF0000, 0xFFFF0000, 0xFF00FF00], 4)
        >>> [s.population for s in q.quantized_colors]
        [1, 2]
    """

    def __init__(
        self,
        pixels: PixelInput,
        max_colors: int,
        filters: Optional[Sequence[Filter]] = None,
    ):
        if max_colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {max_colors}")

        self._filters: list[Filter] = list(filters) if filters else []

        quantized = quantize_from_rgb888(as_pixel_array(pixels))
        histogram = np.bincount(quantized, minlength=HISTOGRAM_SIZE).astype(np.int64)

        self._filter_histogram(histogram)

        self._histogram = histogram
        # flatnonzero returns indices ascending, so the array starts RGB-sorted
        self._colors = np.flatnonzero(histogram).astype(np.int64)

        distinct_color_count = len(self._colors)
        logger.debug(
            "Quantizing %d pixels: %d distinct colors after filtering (max %d)",
            len(quantized), distinct_color_count, max_colors,
        )

        if distinct_color_count <= max_colors:
            # Fewer colors than requested, use them as they are
            self._quantized_colors = [
                Swatch(quantized_to_rgb888(int(color)), int(histogram[color]))
                for color in self._colors
            ]
        else:
            self._quantized_colors = self._quantize_pixels(max_colors)

    @property
    def quantized_colors(self) -> list[Swatch]:
        """Swatches produced by quantization."""
        return list(self._quantized_colors)

    def _filter_histogram(self, histogram: NDArray[np.int64]) -> None:
        """Zero out every populated bucket whose color a filter rejects."""
        if not self._filters:
            return

        populated = np.flatnonzero(histogram)
        if len(populated) == 0:
            return

        rgb = _expand_channels(populated.astype(np.int64))
        hsl = rgb_to_hsl_batch(rgb)

        rejected = 0
        for color, (r, g, b), (h, s, l) in zip(populated, rgb, hsl):
            packed = PackedColor.rgb(int(r), int(g), int(b))
            if not is_allowed(self._filters, packed, (float(h), float(s), float(l))):
                histogram[color] = 0
                rejected += 1

        if rejected:
            logger.debug("Filters rejected %d of %d histogram colors", rejected, len(populated))

    def _quantize_pixels(self, max_colors: int) -> list[Swatch]:
        # Queue ordered by volume descending; insertion order breaks ties
        queue: list[tuple[int, int, Vbox]] = []
        counter = 0

        def offer(vbox: Vbox) -> None:
            nonlocal counter
            heapq.heappush(queue, (-vbox.volume, counter, vbox))
            counter += 1

        # To start, a box containing every color
        offer(Vbox(0, len(self._colors) - 1, self._colors, self._histogram))

        self._split_boxes(queue, offer, max_colors)

        return self._generate_average_colors(v for _, _, v in sorted(queue))

    @staticmethod
    def _split_boxes(queue, offer, max_size: int) -> None:
        """
        Split the largest box until ``max_size`` boxes exist.

        Stops early when the largest box holds a single color, since every
        remaining box then has volume 1 as well.
        """
        while len(queue) < max_size:
            if not queue or not queue[0][2].can_split():
                return

            _, _, vbox = heapq.heappop(queue)
            offer(vbox.split_box())
            offer(vbox)

    def _generate_average_colors(self, vboxes: Iterable[Vbox]) -> list[Swatch]:
        colors: list[Swatch] = []
        for vbox in vboxes:
            swatch = vbox.average_color()
            # Averaging can produce a color the filters would have rejected
            if is_allowed(self._filters, swatch.rgb, swatch.hsl):
                colors.append(swatch)
            else:
                logger.debug("Dropping averaged color %s from %r", swatch.hex, vbox)
        return colors
