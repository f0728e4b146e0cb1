#Purpose: Auto-routing ("driving" mode) for submissions.
#Turns the waypoints a user clicked into a route ready for the privacy engine:
#the OSRM geometry becomes the route, the clicked waypoints become its explicit stops.
#Freehand routes never come through here.

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from privacy.models import Point, Stop

from .osrm_client import OSRMClient


@dataclass(frozen=True)
class DrivingRoute:
    route: List[Point]
    stops: List[Stop]
    distance_m: float
    duration_s: float


def build_driving_route(client: OSRMClient, waypoints: List[Point]) -> DrivingRoute:
    """
    Route through the waypoints (origin, stopovers, destination) in click order.
    Waypoints are labelled origin / stop-N / destination.
    """
    geometry = client.compute_route(waypoints)

    stops = []
    last = len(waypoints) - 1
    for index, waypoint in enumerate(waypoints):
        if index == 0:
            label = "origin"
        elif index == last:
            label = "destination"
        else:
            label = f"stop-{index}"
        stops.append(Stop(point=waypoint, label=label))

    return DrivingRoute(
        route=geometry.points,
        stops=stops,
        distance_m=geometry.distance_m,
        duration_s=geometry.duration_s,
    )
