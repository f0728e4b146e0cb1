"""
Route privacy engine.

Public API:
- Domain models: Point, Stop, PrivacyMode, RedactionStrategy, RedactionResult
- Errors: InvalidRoute, InvalidCoordinate
- Engine entry: process_route_for_privacy
- Config: PrivacyPolicy, default_policy, policy_from_env
"""
from .models import (
    InvalidCoordinate,
    InvalidRoute,
    Point,
    PrivacyMode,
    RedactionResult,
    RedactionStrategy,
    Stop,
)
from .buffer import BufferRadiusSampler, FixedRadiusSampler, redact_with_buffer
from .engine import process_route_for_privacy
from .generalize import snap_coarse, snap_fine
from .geo import haversine_m, route_length_m
from .policy import PrivacyPolicy, default_policy, policy_from_env
from .stops import extract_stops

__all__ = [
    "Point",
    "Stop",
    "PrivacyMode",
    "RedactionStrategy",
    "RedactionResult",
    "InvalidRoute",
    "InvalidCoordinate",
    "BufferRadiusSampler",
    "FixedRadiusSampler",
    "redact_with_buffer",
    "process_route_for_privacy",
    "snap_fine",
    "snap_coarse",
    "haversine_m",
    "route_length_m",
    "PrivacyPolicy",
    "default_policy",
    "policy_from_env",
    "extract_stops",
]
