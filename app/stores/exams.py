from __future__ import annotations

from datetime import date
from typing import Any

from app.models.exam import Exam
from app.models.question import Question


class MongoExamStore:
    def exams_on(self, day: date) -> list[dict[str, Any]]:
        return [exam.schedule() for exam in Exam.objects(date=day)]

    def list_questions(self, exam_title: str) -> list[dict[str, Any]]:
        questions: list[Question] = Question.objects(exam=exam_title).order_by("order")
        return [q.to_output() for q in questions]
