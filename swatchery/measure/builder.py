# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Palette generation API.

This is the primary entry point for Swatchery. ``PaletteBuilder`` takes an
image's packed pixels, samples them (optionally inside a region and after
downscaling), quantizes them and selects one swatch per target.

Quick start::

    from swatchery import PaletteBuilder

    palette = PaletteBuilder(pixels, width, height).generate()
    palette.vibrant_swatch
    palette.get_dark_muted_color(default=0xFF000000)
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from swatchery.schema import DEFAULT_TARGETS, Palette, Target
from swatchery.measure.filters import DefaultFilter, Filter
from swatchery.measure.quantizer import ColorCutQuantizer, PixelInput, as_pixel_array
from swatchery.measure.selection import select_palette


logger = logging.getLogger(__name__)


DEFAULT_RESIZE_IMAGE_AREA = 112 * 112
DEFAULT_CALCULATE_NUMBER_COLORS = 16


@dataclass(frozen=True)
class PaletteConfig:
    """Default generation settings for ``PaletteBuilder``."""

    # Maximum number of swatches the quantizer may produce.
    # Good values depend on the image: 16 suits most photos,
    # 24-32 suits landscapes, 8 or fewer suits faces.
    max_colors: int = DEFAULT_CALCULATE_NUMBER_COLORS

    # Images with more pixels than this are scaled down before sampling.
    # <= 0 disables area-based scaling.
    resize_area: int = DEFAULT_RESIZE_IMAGE_AREA

    # Used only when resize_area is disabled: images whose longest side
    # exceeds this are scaled down. <= 0 disables it.
    resize_max_dimension: int = -1

    def __post_init__(self) -> None:
        if self.max_colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {self.max_colors}")


@dataclass(frozen=True)
class Region:
    """
    Rectangle of the image to sample, in pixels.

    ``left``/``top`` are inclusive, ``right``/``bottom`` exclusive.
    """
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersect(self, width: int, height: int) -> Region:
        """Clip to an image of the given size."""
        return Region(
            max(self.left, 0),
            max(self.top, 0),
            min(self.right, width),
            min(self.bottom, height),
        )

    def scale(self, scale: float, width: int, height: int) -> Region:
        """Scale into an image resized by ``scale`` to ``width`` × ``height``."""
        return Region(
            int(math.floor(self.left * scale)),
            int(math.floor(self.top * scale)),
            min(int(math.ceil(self.right * scale)), width),
            min(int(math.ceil(self.bottom * scale)), height),
        )


# =============================================================================
# Pixel packing
# =============================================================================


def pack_pixels(pixels: NDArray[np.uint8]) -> NDArray[np.int64]:
    """
    Pack an (H, W, 3) RGB or (H, W, 4) RGBA uint8 array into ARGB ints.

    RGB input is treated as opaque.

    Returns:
        Array of shape (H * W,) with unsigned 32-bit packed values
    """
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3) or (H, W, 4) array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 array, got {pixels.dtype}")

    channels = pixels.reshape(-1, pixels.shape[2]).astype(np.int64)
    if pixels.shape[2] == 4:
        alpha = channels[:, 3]
    else:
        alpha = np.full(len(channels), 0xFF, dtype=np.int64)

    return (alpha << 24) | (channels[:, 0] << 16) | (channels[:, 1] << 8) | channels[:, 2]


def unpack_pixels(pixels: NDArray[np.int64], height: int, width: int) -> NDArray[np.uint8]:
    """Inverse of ``pack_pixels``: packed ARGB → (H, W, 4) RGBA uint8."""
    packed = pixels.reshape(height, width)
    return np.stack(
        [
            (packed >> 16) & 0xFF,
            (packed >> 8) & 0xFF,
            packed & 0xFF,
            (packed >> 24) & 0xFF,
        ],
        axis=-1,
    ).astype(np.uint8)


def _resize_nearest(
    pixels: NDArray[np.int64],
    height: int,
    width: int,
    new_height: int,
    new_width: int,
) -> NDArray[np.int64]:
    """Nearest-neighbour resize of packed pixels using PIL."""
    from PIL import Image

    img = Image.fromarray(unpack_pixels(pixels, height, width))
    img = img.resize((new_width, new_height), Image.Resampling.NEAREST)
    return pack_pixels(np.asarray(img, dtype=np.uint8))


# =============================================================================
# Builder
# =============================================================================


class PaletteBuilder:
    """
    Configures and runs palette generation for one image.

    Setters return the builder so calls can be chained. Defaults come from
    ``PaletteConfig``, the ``DefaultFilter`` and the six default targets.

    Args:
        pixels: Row-major packed ARGB pixels, ``width * height`` of them
        width: Image width in pixels
        height: Image height in pixels
        config: Default settings (uses ``PaletteConfig()`` if None)

    Raises:
        ValueError: If the pixel count does not match the dimensions
    """

    def __init__(
        self,
        pixels: PixelInput,
        width: int,
        height: int,
        *,
        config: Optional[PaletteConfig] = None,
    ):
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be >= 0, got {width}x{height}")

        self._pixels = as_pixel_array(pixels)
        if len(self._pixels) != width * height:
            raise ValueError(
                f"Expected {width * height} pixels for a {width}x{height} image, "
                f"got {len(self._pixels)}"
            )

        cfg = config or PaletteConfig()
        self._width = width
        self._height = height
        self._max_colors = cfg.max_colors
        self._resize_area = cfg.resize_area
        self._resize_max_dimension = cfg.resize_max_dimension
        self._filters: list[Filter] = [DefaultFilter()]
        self._targets: list[Target] = list(DEFAULT_TARGETS)
        self._region: Optional[Region] = None

    @classmethod
    def from_array(
        cls,
        pixels: NDArray[np.uint8],
        *,
        config: Optional[PaletteConfig] = None,
    ) -> PaletteBuilder:
        """Builder for an (H, W, 3) RGB or (H, W, 4) RGBA uint8 array."""
        if not isinstance(pixels, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(pixels)}")
        height, width = pixels.shape[:2]
        return cls(pack_pixels(pixels), width, height, config=config)

    @classmethod
    def from_image(cls, image, *, config: Optional[PaletteConfig] = None) -> PaletteBuilder:
        """
        Builder for a decoded ``PIL.Image.Image``.

        The image is converted to RGBA; no ICC profile handling is done,
        so callers should pass sRGB images.
        """
        from PIL import Image

        if not isinstance(image, Image.Image):
            raise TypeError(f"Expected PIL image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls.from_array(np.asarray(image, dtype=np.uint8), config=config)

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def maximum_color_count(self, colors: int) -> PaletteBuilder:
        """Set the maximum number of colors the quantizer may produce."""
        if colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {colors}")
        self._max_colors = colors
        return self

    def resize_image_area(self, area: int) -> PaletteBuilder:
        """
        Scale images with more than ``area`` pixels down before sampling.

        Takes precedence over ``resize_max_dimension``. <= 0 disables it.
        """
        self._resize_area = area
        return self

    def resize_max_dimension(self, max_dimension: int) -> PaletteBuilder:
        """Scale images whose longest side exceeds ``max_dimension`` down."""
        self._resize_max_dimension = max_dimension
        return self

    def clear_filters(self) -> PaletteBuilder:
        """Remove all filters, including the default one."""
        self._filters.clear()
        return self

    def add_filter(self, color_filter: Filter) -> PaletteBuilder:
        """Add a filter; filters run in the order they were added."""
        self._filters.append(color_filter)
        return self

    def set_region(self, left: int, top: int, right: int, bottom: int) -> PaletteBuilder:
        """
        Only sample pixels inside this rectangle.

        The region is clipped to the image.

        Raises:
            ValueError: If the region does not intersect the image
        """
        region = Region(left, top, right, bottom).intersect(self._width, self._height)
        if region.is_empty:
            raise ValueError(
                f"Region ({left}, {top}, {right}, {bottom}) does not intersect "
                f"the {self._width}x{self._height} image"
            )
        self._region = region
        return self

    def clear_region(self) -> PaletteBuilder:
        self._region = None
        return self

    def add_target(self, target: Target) -> PaletteBuilder:
        """Add a target; ignored if it is already present."""
        if target not in self._targets:
            self._targets.append(target)
        return self

    def clear_targets(self) -> PaletteBuilder:
        """Remove all targets, including the defaults."""
        self._targets.clear()
        return self

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate(self) -> Palette:
        """Generate the palette synchronously."""
        pixels, width, height = self._scale_down()

        region = self._region
        if region is not None and (width, height) != (self._width, self._height):
            region = region.scale(width / self._width, width, height)

        sample = self._sample(pixels, width, height, region)

        quantizer = ColorCutQuantizer(sample, self._max_colors, self._filters)
        swatches = quantizer.quantized_colors

        return select_palette(swatches, self._targets)

    async def generate_async(self) -> Palette:
        """Generate the palette in a worker thread."""
        return await asyncio.to_thread(self.generate)

    def _scale_down(self) -> tuple[NDArray[np.int64], int, int]:
        width, height = self._width, self._height
        scale = -1.0

        if self._resize_area > 0:
            area = width * height
            if area > self._resize_area:
                scale = math.sqrt(self._resize_area / area)
        elif self._resize_max_dimension > 0:
            max_dimension = max(width, height)
            if max_dimension > self._resize_max_dimension:
                scale = self._resize_max_dimension / max_dimension

        if scale <= 0:
            return self._pixels, width, height

        new_width = int(math.ceil(width * scale))
        new_height = int(math.ceil(height * scale))
        logger.debug(
            "Scaling %dx%d image to %dx%d (scale %.4f)",
            width, height, new_width, new_height, scale,
        )
        return (
            _resize_nearest(self._pixels, height, width, new_height, new_width),
            new_width,
            new_height,
        )

    @staticmethod
    def _sample(
        pixels: NDArray[np.int64],
        width: int,
        height: int,
        region: Optional[Region],
    ) -> NDArray[np.int64]:
        if region is None:
            return pixels
        grid = pixels.reshape(height, width)
        return grid[region.top:region.bottom, region.left:region.right].ravel()


def generate(
    pixels: PixelInput,
    width: int,
    height: int,
    *,
    max_colors: int = DEFAULT_CALCULATE_NUMBER_COLORS,
    filters: Optional[Sequence[Filter]] = None,
    targets: Optional[Sequence[Target]] = None,
    region: Optional[tuple[int, int, int, int]] = None,
    resize_area: int = DEFAULT_RESIZE_IMAGE_AREA,
    resize_max_dimension: int = -1,
) -> Palette:
    """
    Generate a palette in one call.

    Args:
        pixels: Row-major packed ARGB pixels
        width: Image width
        height: Image height
        max_colors: Maximum number of swatches (default: 16)
        filters: Filters to apply (default: ``[DefaultFilter()]``; pass an
            empty list to disable filtering)
        targets: Targets in priority order (default: the six profiles)
        region: Optional (left, top, right, bottom) rectangle to sample
        resize_area: Downscale threshold in pixels (<= 0 disables)
        resize_max_dimension: Longest-side threshold, used only when
            resize_area is disabled

    Returns:
        The generated Palette

    Example:
        >>> palette = generate(
        ...     [0xFFFF0000, 0xFFFF0000, 0xFF00FF00, 0xFF0000FF], 2, 2,
        ...     max_colors=4,
        ... )
        >>> palette.dominant_swatch.hex
        '#FF0000'
    """
    builder = PaletteBuilder(
        pixels,
        width,
        height,
        config=PaletteConfig(
            max_colors=max_colors,
            resize_area=resize_area,
            resize_max_dimension=resize_max_dimension,
        ),
    )

    if filters is not None:
        builder.clear_filters()
        for f in filters:
            builder.add_filter(f)

    if targets is not None:
        builder.clear_targets()
        for t in targets:
            builder.add_target(t)

    if region is not None:
        builder.set_region(*region)

    return builder.generate()
