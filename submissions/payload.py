#Purpose: Validate the raw JSON body of a route submission.
#Pydantic models mirror the client body; parse_payload turns them into the
#domain SubmissionPayload or raises InvalidPayload listing every field problem.
#The engine only ever sees validated input.

from __future__ import annotations

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, conlist, field_validator

from privacy.models import Point, PrivacyMode, Stop
from privacy.policy import PrivacyPolicy, default_policy

from .models import MapCenter, SubmissionMetadata, SubmissionPayload, TravelMode

MAX_TITLE_LENGTH = 300
MAX_DESCRIPTION_LENGTH = 2000
MAX_LABEL_LENGTH = 80
MIN_ZOOM = 0
MAX_ZOOM = 22

# strict: JSON numbers only, no "40.7" strings or true/false
Latitude = Annotated[float, Field(strict=True, ge=-90.0, le=90.0, allow_inf_nan=False)]
Longitude = Annotated[float, Field(strict=True, ge=-180.0, le=180.0, allow_inf_nan=False)]
FiniteNumber = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class InvalidPayload(ValueError):
    """Raised when a submission body fails validation."""

    def __init__(self, errors: List[str]):
        super().__init__("Invalid payload: " + "; ".join(errors))
        self.errors = errors


class LatLngBody(BaseModel):
    lat: Latitude
    lng: Longitude


class StopBody(LatLngBody):
    label: Optional[str] = Field(default=None, max_length=MAX_LABEL_LENGTH)


class CenterBody(BaseModel):
    lat: FiniteNumber
    lng: FiniteNumber


class MetadataBody(BaseModel):
    title: Optional[str] = Field(default=None, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    center: Optional[CenterBody] = None
    # 14.0 is an integer zoom; 14.5 is not
    zoom: Optional[int] = Field(default=None, ge=MIN_ZOOM, le=MAX_ZOOM)
    mode: TravelMode
    privacy: Optional[PrivacyMode] = None

    @field_validator("zoom", mode="before")
    @classmethod
    def reject_bool_zoom(cls, value: Any):
        if isinstance(value, bool):
            raise ValueError("zoom must be a number")
        return value


class SubmissionBody(BaseModel):
    route: conlist(LatLngBody, min_length=2)
    stops: Optional[List[StopBody]] = None
    metadata: MetadataBody

    @field_validator("route")
    @classmethod
    def cap_route_points(cls, route: List[LatLngBody], info: ValidationInfo):
        max_points = (info.context or {}).get("max_route_points")
        if max_points is not None and len(route) > max_points:
            raise ValueError(f"route must have at most {max_points} points")
        return route


def _format_errors(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in detail['loc']) or 'body'}: {detail['msg']}"
        for detail in error.errors()
    ]


def parse_payload(data: Any, policy: Optional[PrivacyPolicy] = None) -> SubmissionPayload:
    """
    Validate a submission body of the shape {route, stops?, metadata}.

    Raises:
        InvalidPayload: with one message per failing field.
    """
    policy = policy or default_policy()

    try:
        body = SubmissionBody.model_validate(data, context={"max_route_points": policy.max_route_points})
    except ValidationError as e:
        raise InvalidPayload(_format_errors(e)) from e

    meta = body.metadata
    metadata = SubmissionMetadata(
        mode=meta.mode,
        privacy=meta.privacy or policy.default_mode,
        title=meta.title,
        description=meta.description,
        center=MapCenter(lat=meta.center.lat, lng=meta.center.lng) if meta.center else None,
        zoom=meta.zoom,
    )

    return SubmissionPayload(
        route=[Point(lat=p.lat, lng=p.lng) for p in body.route],
        metadata=metadata,
        stops=[Stop(point=Point(lat=s.lat, lng=s.lng), label=s.label) for s in body.stops or []],
    )
