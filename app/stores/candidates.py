from __future__ import annotations

from typing import Any

from pymongo.collection import Collection

from app.models.base import utcnow
from app.models.candidate import Candidate


class MongoCandidateStore:
    """Candidate reads and answer writes against the raw ``candidates`` collection.

    Answers live under ``answers.<questionId>`` inside the candidate document, so
    a batch for one candidate is a single-document ``$set``: atomic, and an
    unconditional overwrite of whatever each key held before.
    """

    def __init__(self, collection: Collection | None = None) -> None:
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = Candidate._get_collection()
        return self._collection

    def get(self, registration_number: str) -> dict[str, Any] | None:
        return self.collection.find_one({"_id": registration_number})

    def list_for_exam(self, exam_title: str) -> list[dict[str, Any]]:
        return list(self.collection.find({"exam": exam_title}, projection={"photoUrl": False}))

    def save_answers(self, registration_number: str, answers: dict[str, dict]) -> bool:
        """Upsert answers for one candidate; False when the candidate does not exist."""
        update = {f"answers.{qid}": data for qid, data in answers.items()}
        update["updated_at"] = utcnow()
        result = self.collection.update_one({"_id": registration_number}, {"$set": update})
        return result.matched_count > 0

    def complete(self, registration_number: str, answers: dict[str, dict], completed_at: str) -> bool:
        """Mark submitted and write all answers in one update; False when the candidate does not exist."""
        update: dict[str, Any] = {f"answers.{qid}": data for qid, data in answers.items()}
        update.update({
            "submitted": True,
            "examCompletedAt": completed_at,
            "updated_at": utcnow(),
        })
        result = self.collection.update_one({"_id": registration_number}, {"$set": update})
        return result.matched_count > 0
