"""
Purpose: Data structures for a stored route submission.
What it does:
- SubmissionPayload: validated client body (route, stops, metadata)
- SubmissionMetadata: title, description, map center/zoom, travel mode, privacy mode
- Submission: the record handed to the store, holding only redacted coordinates

Rule: No validation or redaction logic. Models only.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from privacy.models import Point, PrivacyMode, Stop


class TravelMode(str, Enum):
    FREEHAND = "freehand"
    DRIVING = "driving"


@dataclass(frozen=True)
class MapCenter:
    lat: float
    lng: float


@dataclass(frozen=True)
class SubmissionMetadata:
    mode: TravelMode
    privacy: PrivacyMode
    title: Optional[str] = None
    description: Optional[str] = None
    center: Optional[MapCenter] = None
    zoom: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "center": {"lat": self.center.lat, "lng": self.center.lng} if self.center else None,
            "zoom": self.zoom,
            "mode": self.mode.value,
            "privacy": self.privacy.value,
        }


@dataclass(frozen=True)
class SubmissionPayload:
    """
    Output of payload validation. Coordinates here are still exact.
    """
    route: List[Point]
    metadata: SubmissionMetadata
    stops: List[Stop] = field(default_factory=list)


@dataclass
class Submission:
    """
    What gets persisted. route/stops are the engine's redacted output.
    """
    id: str
    route: List[Point]
    stops: List[Stop]
    metadata: SubmissionMetadata
    privacy_mode: PrivacyMode
    ip_hash: Optional[str] = None
    user_agent: Optional[str] = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def new(
        route: List[Point],
        stops: List[Stop],
        metadata: SubmissionMetadata,
        ip_hash: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Submission:
        return Submission(
            id=str(uuid.uuid4()),
            route=route,
            stops=stops,
            metadata=metadata,
            privacy_mode=metadata.privacy,
            ip_hash=ip_hash,
            user_agent=user_agent,
        )

    def to_record(self) -> Dict[str, Any]:
        """Storage shape: stops and privacyMode live inside metadata."""
        metadata = self.metadata.as_dict()
        metadata["privacyMode"] = self.privacy_mode.value
        metadata["stops"] = [stop.as_dict() for stop in self.stops]
        return {
            "id": self.id,
            "route": [point.as_dict() for point in self.route],
            "metadata": metadata,
            "ipHash": self.ip_hash,
            "userAgent": self.user_agent,
            "submittedAt": self.submitted_at.isoformat(),
        }
