"""
Purpose: Coordinate generalization (snapping) for the privacy engine.
What it does:

Quantizes a coordinate to a fixed decimal-degree grid:

snap_fine    -> 0.001 deg (~100 m, "intersection" level)

snap_coarse  -> 0.01 deg  (~1 km, "grid" / block-group level)

Rule: pure functions only. Snapping is lossy and idempotent.
"""

from __future__ import annotations

import math
from typing import Callable

from .models import Point, PrivacyMode, Stop

Snapper = Callable[[Point], Point]

FINE_DECIMALS = 3
COARSE_DECIMALS = 2


def _round_half_up(value: float, decimals: int) -> float:
    # round() is banker's rounding; storage has always used half-up
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale


def snap_to_resolution(point: Point, decimals: int) -> Point:
    """
    Round lat and lng independently to `decimals` decimal places.
    """
    return Point(
        lat=_round_half_up(point.lat, decimals),
        lng=_round_half_up(point.lng, decimals),
    )


def snap_fine(point: Point) -> Point:
    return snap_to_resolution(point, FINE_DECIMALS)


def snap_coarse(point: Point) -> Point:
    return snap_to_resolution(point, COARSE_DECIMALS)


def snap_stop(stop: Stop, snap: Snapper = snap_fine) -> Stop:
    """Snap a stop's coordinate, keeping its label and derived flag."""
    return Stop(point=snap(stop.point), label=stop.label, is_derived=stop.is_derived)


def snapper_for_mode(mode: PrivacyMode) -> Snapper:
    """
    Target resolution per privacy mode.
    EXACT has no snapper; asking for one is a programming error.
    """
    if mode == PrivacyMode.INTERSECTION:
        return snap_fine
    if mode == PrivacyMode.GRID:
        return snap_coarse
    raise ValueError(f"privacy mode {mode!r} has no snapping resolution")
