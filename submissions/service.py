"""
Purpose: Ingest a validated submission and persist only what is safe.
What it does:
- runs the privacy engine on the route and stops
- hashes the client IP with a server-side salt (IP_HASH_SALT), never storing it raw
- builds the stored record and hands it to the store
- reads a stored route back for visualization
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from privacy.buffer import RadiusSampler
from privacy.engine import process_route_for_privacy
from privacy.generalize import snap_stop, snapper_for_mode
from privacy.models import Point, PrivacyMode
from privacy.policy import PrivacyPolicy, default_policy
from privacy.stops import extract_stops

from .models import Submission, SubmissionPayload
from .store import SubmissionStore

# IP_HASH_SALT may come from .env
load_dotenv()

logger = logging.getLogger(__name__)


def hash_ip(ip: Optional[str], salt: Optional[str]) -> Optional[str]:
    """sha256 hex of "ip|salt"; None when there is no ip."""
    if not ip:
        return None
    return hashlib.sha256(f"{ip}|{salt or ''}".encode("utf-8")).hexdigest()


def client_ip(forwarded_for: Optional[str], remote_addr: Optional[str] = None) -> str:
    """
    First hop of X-Forwarded-For (we sit behind one trusted proxy), else the socket address.
    """
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return remote_addr or ""


class SubmissionService:
    def __init__(
        self,
        store: SubmissionStore,
        policy: Optional[PrivacyPolicy] = None,
        sampler: Optional[RadiusSampler] = None,
        ip_hash_salt: Optional[str] = None,
    ):
        self.store = store
        self.policy = policy or default_policy()
        self.sampler = sampler
        # no salt -> IPs are not recorded at all
        self.ip_hash_salt = ip_hash_salt if ip_hash_salt is not None else os.getenv("IP_HASH_SALT")

    def submit(
        self,
        payload: SubmissionPayload,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Submission:
        """
        Redact and persist a submission. Returns the stored Submission.
        """
        mode = payload.metadata.privacy
        result = process_route_for_privacy(
            payload.route,
            mode,
            payload.stops,
            policy=self.policy,
            sampler=self.sampler,
        )

        submission = Submission.new(
            route=result.route,
            stops=result.stops,
            metadata=payload.metadata,
            ip_hash=hash_ip(ip, self.ip_hash_salt) if self.ip_hash_salt else None,
            user_agent=user_agent,
        )
        self.store.save(submission.to_record())

        logger.info(
            f"Stored submission {submission.id}: privacy={mode.value}, "
            f"{len(result.route)}/{len(payload.route)} points kept, {len(result.stops)} stops"
        )
        return submission

    def get_route(self, submission_id: str) -> Dict[str, Any]:
        """
        Route data for visualization. Raises SubmissionNotFound for unknown ids.
        """
        record = self.store.get(submission_id)
        metadata = record.get("metadata") or {}

        stops = metadata.get("stops")
        if not stops:
            stops = self._fallback_stops(record.get("route") or [], metadata.get("privacyMode"))

        return {
            "id": record["id"],
            "route": record["route"],
            "stops": stops,
            "metadata": metadata,
            "submittedAt": record.get("submittedAt"),
        }

    def _fallback_stops(self, route: List[Dict[str, Any]], privacy_mode: Optional[str]) -> List[Dict[str, Any]]:
        # records stored without stops: infer endpoints, at the record's own precision
        if len(route) < 2:
            return []
        points = [Point.from_dict(item) for item in route]
        stops = extract_stops(points)

        mode = PrivacyMode(privacy_mode or self.policy.default_mode)
        if mode != PrivacyMode.EXACT:
            snap = snapper_for_mode(mode)
            stops = [snap_stop(stop, snap) for stop in stops]
        return [stop.as_dict() for stop in stops]
