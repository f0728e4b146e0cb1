"""
Purpose: Domain models for the privacy engine.
What it does:
- Defines core value types:
- Point (lat, lng) - immutable, range checked
- Stop (point, label, is_derived) - a sensitive location on a route
- RedactionResult (route, stops) - the only thing the engine hands back

Defines enums:
- PrivacyMode = EXACT | INTERSECTION | GRID
- RedactionStrategy = DROP | GENERALIZE

Rule: No distance math, no snapping. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
import math


class InvalidRoute(ValueError):
    """Raised when a route has fewer than two points."""
    pass


class InvalidCoordinate(ValueError):
    """Raised when a latitude/longitude is not finite or out of range."""
    pass


class PrivacyMode(str, Enum):
    EXACT = "exact"
    INTERSECTION = "intersection"  # ~100 m snapping
    GRID = "grid"                  # ~1 km snapping


class RedactionStrategy(str, Enum):
    """
    What happens to a route point that falls inside a stop buffer.
    DROP removes it, GENERALIZE keeps it at reduced precision.
    """
    DROP = "drop"
    GENERALIZE = "generalize"


@dataclass(frozen=True)
class Point:
    """
    A WGS84 coordinate in decimal degrees.
    Snapping produces new Points, so compare with isclose() rather than identity.
    """

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise InvalidCoordinate(f"non-finite coordinate ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidCoordinate(f"lat {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidCoordinate(f"lng {self.lng} outside [-180, 180]")

    def isclose(self, other: Point, abs_tol: float = 1e-9) -> bool:
        return (
            math.isclose(self.lat, other.lat, rel_tol=0.0, abs_tol=abs_tol)
            and math.isclose(self.lng, other.lng, rel_tol=0.0, abs_tol=abs_tol)
        )

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Point:
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))


@dataclass(frozen=True)
class Stop:
    """
    A sensitive location a route visits (origin, destination, added waypoint).
    is_derived is True when the engine inferred it from the route instead of
    the caller supplying it.
    """

    point: Point
    label: Optional[str] = None
    is_derived: bool = False

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lng(self) -> float:
        return self.point.lng

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = self.point.as_dict()
        if self.label is not None:
            data["label"] = self.label
        data["isDerived"] = self.is_derived
        return data


@dataclass
class RedactionResult:
    """
    Output of one engine invocation. Embedded verbatim into the stored submission.
    """
    route: List[Point]
    stops: List[Stop] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "route": [point.as_dict() for point in self.route],
            "stops": [stop.as_dict() for stop in self.stops],
        }
