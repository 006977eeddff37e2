from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping

from app.services.scoring import Score, score_candidate, select_today_exam
from app.stores import CandidateStore, ExamStore, ResultStore
from app.utils.base import NotFound


logger = logging.getLogger(__name__)


def build_result(candidate: Mapping[str, Any], score: Score) -> dict[str, Any]:
    return {
        "registrationNumber": candidate.get("_id"),
        "candidateName": candidate.get("candidateName"),
        "phone": candidate.get("phone"),
        "totalQuestions": score.total,
        "correctAnswers": score.correct,
        "skippedQuestions": score.skipped,
        "wrongAnswers": score.wrong,
        "submitted": bool(candidate.get("submitted", False)),
        "used": bool(candidate.get("used", False)),
    }


class ResultsService:
    """Scores candidates of an exam and materializes each result by (exam, candidate)."""

    def __init__(self, exam_store: ExamStore, candidate_store: CandidateStore, result_store: ResultStore) -> None:
        self.exam_store = exam_store
        self.candidate_store = candidate_store
        self.result_store = result_store

    def score_today(self, today: date | None = None) -> dict[str, Any]:
        today = today or date.today()
        exam = select_today_exam(self.exam_store.exams_on(today), today)
        if exam is None:
            raise NotFound("No exam found for today")
        return self.score_exam(exam)

    def score_exam(self, exam: Mapping[str, Any]) -> dict[str, Any]:
        """Score every candidate registered to ``exam`` one after another.

        A candidate that fails to score or persist is logged and listed under
        ``summary.failed``; the remaining candidates are still processed.
        """
        exam_id = exam["id"]
        questions = self.exam_store.list_questions(exam_id)

        results: list[dict[str, Any]] = []
        failed: list[str] = []
        for candidate in self.candidate_store.list_for_exam(exam_id):
            registration_number = candidate.get("_id")
            try:
                answers = (candidate.get("answers") or {}).values()
                result = build_result(candidate, score_candidate(questions, answers))
                self.result_store.put(exam_id, registration_number, {
                    **result,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                })
            except Exception:
                logger.exception("Failed to materialize result for %s in %s", registration_number, exam_id)
                failed.append(str(registration_number))
                continue
            results.append(result)

        logger.info("Materialized %d results for %s (%d failed)", len(results), exam_id, len(failed))
        return {
            "examDetails": {
                "examName": exam_id,
                "date": exam.get("date"),
                "startTime": exam.get("startTime"),
                "endTime": exam.get("endTime"),
                "totalMarks": exam.get("marks"),
            },
            "results": results,
            "summary": {
                "succeeded": len(results),
                "failed": failed,
            },
        }

    def all_results(self) -> dict[str, Any]:
        """Reshape every stored result into per-exam groups; nothing is recomputed."""
        stored = self.result_store.all()
        data = [
            {
                "examId": exam_id,
                "candidates": [
                    {"registrationId": registration_id, **fields}
                    for registration_id, fields in candidates.items()
                ],
            }
            for exam_id, candidates in stored.items()
        ]
        return {
            "data": data,
            "metadata": {
                "totalExams": len(data),
                "totalCandidates": sum(len(group["candidates"]) for group in data),
            },
        }
