#Purpose: Great-circle distance math for the privacy engine.
#Haversine only; no projections, no antimeridian special-casing.

from __future__ import annotations

import math
from typing import Sequence

from .models import Point

EARTH_RADIUS_M = 6_371_000  # meters


def haversine_m(a: Point, b: Point) -> float:
    """Great-circle distance in meters between two points."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def route_length_m(points: Sequence[Point]) -> float:
    """
    Sum of leg distances along the route, in meters.
    Zero for routes with fewer than two points.
    """
    total = 0.0
    for a, b in zip(points[:-1], points[1:]):
        total += haversine_m(a, b)
    return total
