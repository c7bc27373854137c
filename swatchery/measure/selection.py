# Copyright (c) 2026 Swatchery
# SPDX-License-Identifier: MIT

"""
Target-driven swatch selection.

Each target is processed in priority order. Every candidate swatch gets a
score in [0, 1] from three weighted terms:

- saturation: how close the swatch's saturation is to the target's,
  relative to the target's maximum saturation
- lightness: the same for lightness
- population: the swatch's population relative to the dominant swatch

The best-scoring swatch wins; on a tie the earlier swatch wins. Exclusive
targets claim their swatch's color so that later targets cannot pick it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from swatchery.schema.packed_color import PackedColor
from swatchery.schema.palette import DEFAULT_TARGETS, Palette, Swatch, Target


logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return 0.0 if value < 0.0 else min(value, 1.0)


def find_dominant_swatch(swatches: Sequence[Swatch]) -> Optional[Swatch]:
    """Most populous swatch; the first one wins ties. None if empty."""
    dominant: Optional[Swatch] = None
    max_population = -1
    for swatch in swatches:
        if swatch.population > max_population:
            dominant = swatch
            max_population = swatch.population
    return dominant


def _closeness(value: float, target: float, maximum: float) -> float:
    """1 at the target value, falling off linearly with distance / maximum."""
    if maximum <= 0:
        return 0.0
    return _clamp01(1.0 - abs(value - target) / maximum)


def score_swatch(swatch: Swatch, target: Target, max_population: int) -> float:
    """
    Score how well ``swatch`` fits ``target``.

    Args:
        swatch: Candidate swatch
        target: Target with normalized weights
        max_population: Population of the dominant swatch

    Returns:
        Weighted score; weights <= 0 contribute nothing
    """
    _, saturation, lightness = swatch.hsl

    score = 0.0
    if target.saturation_weight > 0:
        score += target.saturation_weight * _closeness(
            saturation, target.target_saturation, target.maximum_saturation
        )
    if target.lightness_weight > 0:
        score += target.lightness_weight * _closeness(
            lightness, target.target_lightness, target.maximum_lightness
        )
    if target.population_weight > 0 and max_population > 0:
        score += target.population_weight * _clamp01(swatch.population / max_population)
    return score


def _should_be_scored(
    swatch: Swatch,
    target: Target,
    used_colors: set[PackedColor],
) -> bool:
    return not target.is_exclusive or swatch.rgb not in used_colors


def generate_scored_target(
    swatches: Sequence[Swatch],
    target: Target,
    used_colors: set[PackedColor],
    max_population: int,
) -> Optional[Swatch]:
    """Best swatch for ``target`` among unclaimed candidates, or None."""
    best: Optional[Swatch] = None
    best_score = 0.0
    for swatch in swatches:
        if not _should_be_scored(swatch, target, used_colors):
            continue
        score = score_swatch(swatch, target, max_population)
        if best is None or score > best_score:
            best = swatch
            best_score = score
    return best


def select_palette(
    swatches: Sequence[Swatch],
    targets: Optional[Sequence[Target]] = None,
) -> Palette:
    """
    Assign swatches to targets and assemble the palette.

    Args:
        swatches: Quantized swatches, in quantizer order
        targets: Targets in priority order (defaults to the six profiles)

    Returns:
        Palette with the full swatch list, per-target selection and the
        dominant swatch. An empty swatch list gives an empty selection and
        no dominant swatch.
    """
    swatches = tuple(swatches)
    targets = tuple(targets) if targets is not None else DEFAULT_TARGETS

    dominant = find_dominant_swatch(swatches)
    max_population = dominant.population if dominant is not None else 0

    selected: dict[Target, Swatch] = {}
    used_colors: set[PackedColor] = set()

    for target in targets:
        if target in selected:
            continue
        swatch = generate_scored_target(swatches, target, used_colors, max_population)
        if swatch is None:
            logger.debug("No swatch available for target %s", target.name)
            continue
        selected[target] = swatch
        if target.is_exclusive:
            used_colors.add(swatch.rgb)

    logger.debug(
        "Selected %d of %d targets from %d swatches",
        len(selected), len(targets), len(swatches),
    )

    return Palette(
        swatches=swatches,
        targets=targets,
        selected=selected,
        used_colors=used_colors,
        dominant_swatch=dominant,
    )
