#Purpose: Decide which locations on a route are "sensitive" stops.
#Caller-supplied stops always win; otherwise the trip endpoints are used.

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from .models import InvalidRoute, Point, Stop

StopLike = Union[Stop, Point]


def as_stop(value: StopLike) -> Stop:
    """Wrap a bare Point as an explicit (non-derived) stop."""
    if isinstance(value, Stop):
        return value
    return Stop(point=value)


def extract_stops(
    route: Sequence[Point],
    stops: Optional[Sequence[StopLike]] = None,
) -> List[Stop]:
    """
    Resolve the stops a route must be protected around.

    Args:
        route: ordered route points (at least 2)
        stops: optional caller-supplied stops (Points or Stops)

    Returns:
        The caller's stops unchanged when non-empty, else [first, last] of the
        route flagged as derived.
    """
    if len(route) < 2:
        raise InvalidRoute(f"route needs at least 2 points, got {len(route)}")

    if stops:
        return [as_stop(stop) for stop in stops]

    return [
        Stop(point=route[0], label="start", is_derived=True),
        Stop(point=route[-1], label="end", is_derived=True),
    ]
