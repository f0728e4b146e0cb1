"""
Purpose: Entry point of the privacy engine used by the submission layer.
What it does:

Dispatches on PrivacyMode:

EXACT         -> passthrough, no randomness consulted

INTERSECTION  -> buffer redaction around stops, ~100 m snapping

GRID          -> buffer redaction around stops, ~1 km snapping

Rule: pure and re-entrant. No I/O, no state kept between calls.
Two calls with identical inputs may return different routes (random buffer).
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from .buffer import RadiusSampler, redact_with_buffer
from .generalize import snapper_for_mode
from .models import InvalidRoute, Point, PrivacyMode, RedactionResult
from .policy import PrivacyPolicy, default_policy
from .stops import StopLike, as_stop, extract_stops

logger = logging.getLogger(__name__)


def process_route_for_privacy(
    route: Sequence[Point],
    mode: Union[PrivacyMode, str],
    stops: Optional[Sequence[StopLike]] = None,
    *,
    policy: Optional[PrivacyPolicy] = None,
    sampler: Optional[RadiusSampler] = None,
) -> RedactionResult:
    """
    Decide what coordinates of a submitted route are safe to persist.

    Args:
        route: validated, ordered route points (>= 2)
        mode: requested privacy mode (enum or its string value)
        stops: optional caller-supplied stops; inferred from the route when empty
        policy: redaction strategy and buffer range (defaults to default_policy())
        sampler: buffer radius source (defaults to policy.sampler(), a CSPRNG)

    Returns:
        RedactionResult with the route and stops to store.

    Raises:
        InvalidRoute: route has fewer than 2 points.
    """
    if len(route) < 2:
        raise InvalidRoute(f"route needs at least 2 points, got {len(route)}")

    mode = PrivacyMode(mode)
    policy = policy or default_policy()

    logger.debug(
        f"Processing route: {len(route)} points, privacy: {mode.value}, "
        f"stops: {len(stops) if stops else 0}"
    )

    if mode == PrivacyMode.EXACT:
        return RedactionResult(
            route=list(route),
            stops=[as_stop(stop) for stop in stops or []],
        )

    snap = snapper_for_mode(mode)
    resolved_stops = extract_stops(route, stops)

    if resolved_stops:
        sampler = sampler or policy.sampler()
        result = redact_with_buffer(
            route,
            resolved_stops,
            sampler.sample(),
            strategy=policy.redaction_strategy,
            snap=snap,
        )
        logger.debug(
            f"Buffer privacy ({policy.redaction_strategy.value}) with {len(resolved_stops)} stops: "
            f"{len(result.route)} points kept (removed {len(route) - len(result.route)})"
        )
        return result

    # extract_stops always yields endpoints for a valid route; kept total regardless
    logger.warning("No stops available, falling back to snapping every point")
    return RedactionResult(route=[snap(point) for point in route], stops=[])
