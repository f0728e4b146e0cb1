"""
Submissions package: validation, redaction and storage of user-submitted routes.

Public API:
- parse_payload, InvalidPayload
- SubmissionService, hash_ip, client_ip
- Submission, SubmissionMetadata, SubmissionPayload, TravelMode
- SubmissionStore, InMemorySubmissionStore, SubmissionNotFound
"""
from .models import MapCenter, Submission, SubmissionMetadata, SubmissionPayload, TravelMode
from .payload import InvalidPayload, parse_payload
from .service import SubmissionService, client_ip, hash_ip
from .store import InMemorySubmissionStore, SubmissionNotFound, SubmissionStore

__all__ = [
    "MapCenter",
    "Submission",
    "SubmissionMetadata",
    "SubmissionPayload",
    "TravelMode",
    "InvalidPayload",
    "parse_payload",
    "SubmissionService",
    "client_ip",
    "hash_ip",
    "SubmissionStore",
    "InMemorySubmissionStore",
    "SubmissionNotFound",
]
