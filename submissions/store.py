#Purpose: Key-value persistence seam for submissions.
#The real database lives outside this repo; anything with save/get by id fits.

from __future__ import annotations

import copy
from typing import Any, Dict


class SubmissionNotFound(KeyError):
    """Raised when no submission exists for an id."""
    pass


class SubmissionStore:
    """
    Interface for submission storage, keyed by submission id.
    Records are the plain dicts produced by Submission.to_record().
    save and get copy, so a caller never holds the stored dict itself.
    """

    def save(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def get(self, submission_id: str) -> Dict[str, Any]:
        raise NotImplementedError


class InMemorySubmissionStore(SubmissionStore):
    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}

    def save(self, record: Dict[str, Any]) -> None:
        self._records[record["id"]] = copy.deepcopy(record)

    def get(self, submission_id: str) -> Dict[str, Any]:
        try:
            return copy.deepcopy(self._records[submission_id])
        except KeyError:
            raise SubmissionNotFound(submission_id) from None

    def __len__(self) -> int:
        return len(self._records)
