from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class Score:
    total: int
    correct: int
    skipped: int

    @property
    def wrong(self) -> int:
        # Derived, never accumulated: an answer is either correct, skipped or wrong
        return self.total - self.correct - self.skipped


def score_candidate(
    questions: Iterable[Mapping[str, Any]],
    answers: Iterable[Mapping[str, Any]],
) -> Score:
    """Count correct/skipped answers of one candidate against an exam's questions.

    Answers are matched to questions by ``order``. A question with no matching
    answer, or whose answer is marked skipped, counts as skipped. Answers that
    match no question (stale data from a deleted question) are ignored.
    """
    by_order: dict[Any, Mapping[str, Any]] = {}
    for answer in answers:
        by_order.setdefault(answer.get("order"), answer)

    total = correct = skipped = 0
    for question in questions:
        total += 1
        answer = by_order.get(question.get("order"))
        if answer is None or answer.get("skipped"):
            skipped += 1
        elif answer.get("answer") is not None and answer.get("answer") == question.get("correctAnswer"):
            correct += 1
    return Score(total=total, correct=correct, skipped=skipped)


def select_today_exam(exams: Iterable[Mapping[str, Any]], today: date) -> Mapping[str, Any] | None:
    """First exam whose scheduled date is ``today``; exam dates are unique on write."""
    day = today.isoformat()
    for exam in exams:
        if exam.get("date") == day:
            return exam
    return None
