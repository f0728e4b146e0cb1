"""
Purpose: Central configuration for route redaction (single source of truth).
What it does:

Stores all tunable privacy parameters:

REDACTION_STRATEGY = drop

BUFFER_MIN_M = 100, BUFFER_MAX_M = 200

DEFAULT_MODE = intersection

MAX_ROUTE_POINTS = 10000

Values can be overridden from the environment (.env is loaded):
PRIVACY_REDACTION_STRATEGY, PRIVACY_BUFFER_MIN_M, PRIVACY_BUFFER_MAX_M, PRIVACY_DEFAULT_MODE

Rule: No logic here beyond validation - just parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .buffer import (
    DEFAULT_BUFFER_MAX_M,
    DEFAULT_BUFFER_MIN_M,
    BufferRadiusSampler,
    RandomSource,
)
from .models import PrivacyMode, RedactionStrategy


@dataclass(frozen=True)
class PrivacyPolicy:
    """
    Central configuration for the redaction engine.

    Notes:
    - redaction_strategy decides what happens to points inside a stop buffer.
      DROP leaves a gap in the trace; GENERALIZE keeps continuity at ~100 m / ~1 km precision.
    - the buffer bounds only define the sampling range; the actual radius is
      drawn per submission and never stored.
    """

    redaction_strategy: RedactionStrategy = RedactionStrategy.DROP

    # --- Buffer radius sampling range (meters) ---
    buffer_min_m: float = DEFAULT_BUFFER_MIN_M
    buffer_max_m: float = DEFAULT_BUFFER_MAX_M

    # Mode used when a submission does not ask for one.
    default_mode: PrivacyMode = PrivacyMode.INTERSECTION

    # --- Input caps (enforced by the payload parser) ---
    max_route_points: int = 10_000

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup.
        """
        if self.buffer_min_m <= 0:
            raise ValueError("buffer_min_m must be > 0")

        if self.buffer_max_m <= self.buffer_min_m:
            raise ValueError("buffer_max_m must be > buffer_min_m")

        if self.max_route_points < 2:
            raise ValueError("max_route_points must be >= 2")

        if not isinstance(self.redaction_strategy, RedactionStrategy):
            raise ValueError(f"unknown redaction_strategy {self.redaction_strategy!r}")

        if not isinstance(self.default_mode, PrivacyMode):
            raise ValueError(f"unknown default_mode {self.default_mode!r}")

    def sampler(self, rng: Optional[RandomSource] = None) -> BufferRadiusSampler:
        """Build a radius sampler over this policy's range."""
        return BufferRadiusSampler(rng=rng, min_m=self.buffer_min_m, max_m=self.buffer_max_m)


def default_policy() -> PrivacyPolicy:
    """
    Convenience factory for the default policy.
    """
    p = PrivacyPolicy()
    p.validate()
    return p


def policy_from_env() -> PrivacyPolicy:
    """
    Build a policy from environment variables, falling back to defaults.
    Invalid enum values raise ValueError at startup rather than per request.
    """
    load_dotenv()

    p = PrivacyPolicy(
        redaction_strategy=RedactionStrategy(
            os.getenv("PRIVACY_REDACTION_STRATEGY", RedactionStrategy.DROP.value).lower()
        ),
        buffer_min_m=float(os.getenv("PRIVACY_BUFFER_MIN_M", DEFAULT_BUFFER_MIN_M)),
        buffer_max_m=float(os.getenv("PRIVACY_BUFFER_MAX_M", DEFAULT_BUFFER_MAX_M)),
        default_mode=PrivacyMode(
            os.getenv("PRIVACY_DEFAULT_MODE", PrivacyMode.INTERSECTION.value).lower()
        ),
    )
    p.validate()
    return p
