from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from app.stores import CandidateStore
from app.utils.base import InvalidFormat, MissingField, NotFound, Provenance


logger = logging.getLogger(__name__)

QUESTION_PREFIX = "Q"


class AnswerIn(BaseModel):
    """One answer as submitted by the exam client."""
    model_config = ConfigDict(populate_by_name=True)

    registration_number: str | None = Field(default=None, alias="registrationNumber")
    question_id: str | int | None = Field(default=None, alias="questionId")
    answer: int | str | None = None
    exam_name: str | None = Field(default=None, alias="examName")
    order: int | None = None
    skipped: bool | None = None


class IngestReport(BaseModel):
    saved_count: int
    unknown_candidates: list[str] = []


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_question_id(raw: str | int | None) -> str:
    """Prefix the question id with ``Q`` unless it already carries it."""
    qid = "" if raw is None else str(raw).strip()
    if not qid:
        raise MissingField("Missing required fields", details="questionId")
    if "." in qid or qid.startswith("$"):
        raise InvalidFormat("Invalid question id", details=qid)
    return qid if qid.startswith(QUESTION_PREFIX) else f"{QUESTION_PREFIX}{qid}"


def _parse_answer(value: int | str | None) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidFormat("Invalid answer value", details=str(value)) from None


def coerce_answer(
    entry: AnswerIn,
    provenance: Provenance,
    timestamp: str,
    exam_name: str | None = None,
) -> dict[str, Any]:
    """Stored shape of an answer: int when attempted, null when skipped or left blank."""
    skipped = bool(entry.skipped)
    value = None if skipped or entry.answer is None else _parse_answer(entry.answer)
    return {
        "examName": exam_name if exam_name is not None else entry.exam_name,
        "timestamp": timestamp,
        "order": entry.order,
        "answer": value,
        "skipped": skipped,
        "submittedVia": provenance.value,
    }


def keep_all(entry: AnswerIn) -> bool:
    return True


def attempted_only(entry: AnswerIn) -> bool:
    """Timeout saves record only what was actually attempted."""
    return not entry.skipped and entry.answer is not None


class AnswerIngestion:
    """Single write path shared by the individual, bulk, timeout and completion submissions."""

    def __init__(self, store: CandidateStore) -> None:
        self.store = store

    def _batches(
        self,
        entries: Iterable[AnswerIn],
        provenance: Provenance,
        keep: Callable[[AnswerIn], bool],
    ) -> tuple[dict[str, dict[str, dict]], dict[str, int]]:
        # Validate everything before the first write
        timestamp = now_iso()
        batches: dict[str, dict[str, dict]] = {}
        counts: dict[str, int] = {}
        for entry in entries:
            if not keep(entry):
                continue
            if not entry.registration_number:
                raise MissingField("Missing required fields", details="registrationNumber")
            qid = normalize_question_id(entry.question_id)
            batches.setdefault(entry.registration_number, {})[qid] = coerce_answer(entry, provenance, timestamp)
            counts[entry.registration_number] = counts.get(entry.registration_number, 0) + 1
        return batches, counts

    def _ingest(
        self,
        entries: Iterable[AnswerIn],
        provenance: Provenance,
        keep: Callable[[AnswerIn], bool] = keep_all,
    ) -> IngestReport:
        batches, counts = self._batches(entries, provenance, keep)
        saved = 0
        unknown: list[str] = []
        for registration_number, answers in batches.items():
            if self.store.save_answers(registration_number, answers):
                saved += counts[registration_number]
            else:
                unknown.append(registration_number)
        if unknown:
            logger.warning("Dropped %s answers for unknown candidates %s", provenance.value, unknown)
        return IngestReport(saved_count=saved, unknown_candidates=unknown)

    def save_answer(self, entry: AnswerIn) -> IngestReport:
        missing = [
            name for name, value in (
                ("registrationNumber", entry.registration_number),
                ("questionId", entry.question_id),
                ("examName", entry.exam_name),
            ) if value is None or value == ""
        ]
        # 0 and an explicit null are both values; only a body without the key is missing
        if "answer" not in entry.model_fields_set:
            missing.append("answer")
        if missing:
            raise MissingField("Missing required fields", details=", ".join(missing))

        report = self._ingest([entry], Provenance.INDIVIDUAL)
        if report.unknown_candidates:
            raise NotFound("Candidate not found", details=entry.registration_number)
        return report

    def save_all_answers(self, entries: list[AnswerIn] | None) -> IngestReport:
        if not isinstance(entries, list) or not entries:
            raise InvalidFormat("Invalid answers format. Expected non-empty array.")
        return self._ingest(entries, Provenance.INDIVIDUAL)

    def timeout_save_answers(self, entries: list[AnswerIn] | None) -> IngestReport:
        if not isinstance(entries, list):
            raise InvalidFormat("Invalid answers format")
        return self._ingest(entries, Provenance.TIMEOUT, keep=attempted_only)

    def complete_exam(
        self,
        candidate_id: str | None,
        exam_name: str | None,
        entries: list[AnswerIn] | None,
    ) -> dict[str, Any]:
        """Record final answers and the submitted flag in one atomic write."""
        if not candidate_id or not exam_name:
            raise MissingField("Missing required fields or invalid answers format")
        if not isinstance(entries, list):
            raise InvalidFormat("Missing required fields or invalid answers format")

        timestamp = now_iso()
        answers = {
            normalize_question_id(entry.question_id): coerce_answer(entry, Provenance.COMPLETION, timestamp, exam_name)
            for entry in entries
        }
        if not self.store.complete(candidate_id, answers, completed_at=timestamp):
            raise NotFound("Candidate not found", details=candidate_id)

        logger.info("Candidate %s completed %s with %d answers", candidate_id, exam_name, len(entries))
        return {
            "candidateId": candidate_id,
            "examName": exam_name,
            "submittedAt": timestamp,
            "totalAnswers": len(entries),
            "skippedCount": sum(1 for entry in entries if entry.skipped),
        }

    def candidate_answers(self, registration_id: str) -> dict[str, Any]:
        """Stored answers of one candidate ordered by question order."""
        if not registration_id:
            raise MissingField("Registration ID is required")
        candidate = self.store.get(registration_id)
        stored: dict[str, dict] = (candidate or {}).get("answers") or {}
        if not stored:
            raise NotFound("No answers found for this registration ID")

        answers = []
        for qid, data in stored.items():
            value = data.get("answer")
            order = data.get("order")
            answers.append({
                "questionId": qid,
                **data,
                "answer": value if isinstance(value, int) and not isinstance(value, bool) else None,
                "order": int(order) if order is not None else None,
                "skipped": bool(data.get("skipped")),
            })
        answers.sort(key=lambda a: (a["order"] is None, a["order"] or 0))

        return {
            "registrationId": registration_id,
            "candidateDetails": {
                "name": candidate.get("candidateName"),
                "exam": candidate.get("exam"),
                "examDate": candidate.get("examDate"),
                "examCompletedAt": candidate.get("examCompletedAt"),
            },
            "answers": answers,
            "metadata": {
                "totalAnswers": len(answers),
                "skippedCount": sum(1 for a in answers if a["skipped"]),
                "submittedAnswers": sum(1 for a in answers if not a["skipped"]),
            },
        }
