"""
Purpose: Random buffer zones around stops.
What it does:

- BufferRadiusSampler draws one redaction radius per invocation, uniform in
  [min_m, max_m). The radius is never returned to callers of the engine,
  stored or logged: knowing it would let an observer invert the redaction.

- redact_with_buffer classifies every route point as inside/outside the
  buffer of any stop and either drops or generalizes the inside ones.

Rule: randomness is injected. Nothing here reads the module-level `random` state.
"""

from __future__ import annotations

import secrets
from typing import List, Optional, Protocol, Sequence

from .generalize import Snapper, snap_fine, snap_stop
from .geo import haversine_m
from .models import Point, RedactionResult, RedactionStrategy, Stop

DEFAULT_BUFFER_MIN_M = 100.0
DEFAULT_BUFFER_MAX_M = 200.0


class RandomSource(Protocol):
    def random(self) -> float: ...


class RadiusSampler(Protocol):
    def sample(self) -> float: ...


class BufferRadiusSampler:
    """
    Samples a buffer radius in meters, uniform over [min_m, max_m).

    `rng` is any object with a random() -> [0.0, 1.0) method. Defaults to a
    secrets.SystemRandom (OS CSPRNG). Pass random.Random(seed) in tests.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        min_m: float = DEFAULT_BUFFER_MIN_M,
        max_m: float = DEFAULT_BUFFER_MAX_M,
    ):
        if min_m <= 0:
            raise ValueError("min_m must be > 0")
        if max_m <= min_m:
            raise ValueError("max_m must be > min_m")

        self.rng = rng or secrets.SystemRandom()
        self.min_m = min_m
        self.max_m = max_m

    def sample(self) -> float:
        while True:
            radius = self.min_m + self.rng.random() * (self.max_m - self.min_m)
            # float rounding can land exactly on max_m
            if radius < self.max_m:
                return radius

    def __repr__(self) -> str:
        return f"{type(self).__name__}(min_m={self.min_m}, max_m={self.max_m})"


class FixedRadiusSampler:
    """Always returns the same radius. For tests and simulations only."""

    def __init__(self, radius_m: float):
        if radius_m <= 0:
            raise ValueError("radius_m must be > 0")
        self.radius_m = radius_m

    def sample(self) -> float:
        return self.radius_m


def min_distance_to_stops_m(point: Point, stops: Sequence[Stop]) -> float:
    """Distance in meters from point to its nearest stop (inf with no stops)."""
    return min((haversine_m(point, stop.point) for stop in stops), default=float("inf"))


def redact_with_buffer(
    route: Sequence[Point],
    stops: Sequence[Stop],
    radius_m: float,
    *,
    strategy: RedactionStrategy = RedactionStrategy.DROP,
    snap: Snapper = snap_fine,
) -> RedactionResult:
    """
    Apply buffer redaction around every stop.

    A point is in-buffer when its distance to the nearest stop is < radius_m.
      DROP       -> in-buffer points are omitted
      GENERALIZE -> in-buffer points are replaced with snap(point)

    Points outside every buffer are kept exactly. Stops are always snapped.
    Relative order of the route is preserved.
    """
    redacted: List[Point] = []

    for point in route:
        if min_distance_to_stops_m(point, stops) >= radius_m:
            redacted.append(point)
        elif strategy == RedactionStrategy.GENERALIZE:
            redacted.append(snap(point))
        # DROP: in-buffer point is discarded

    return RedactionResult(
        route=redacted,
        stops=[snap_stop(stop, snap) for stop in stops],
    )
