from __future__ import annotations

import random
from datetime import date

from app.connections.mongo import init_mongo, close_mongo
from app.models.candidate import Candidate
from app.models.exam import Exam
from app.models.question import Question, OPTION_COUNT
from app.services import exams as exam_service
from app.services.candidates import new_registration_number


EXAM_TITLE = "General Aptitude"


def _ensure_exam() -> Exam:
    exam_service.schedule_exam(
        EXAM_TITLE,
        day=date.today().isoformat(),
        start_time="10:00 AM",
        end_time="11:00 AM",
        marks=10,
        price=0,
    )
    for i in range(1, 11):
        exam_service.add_question(
            EXAM_TITLE,
            text=f"Sample question {i}",
            options=[f"Option {idx + 1}" for idx in range(OPTION_COUNT)],
            correct_answer=random.randint(0, OPTION_COUNT - 1),
        )
    return Exam.objects(title=EXAM_TITLE).first()


def _ensure_candidates(exam: Exam) -> list[Candidate]:
    fixtures = [
        ("Alice Example", "9000000001"),
        ("Bob Example", "9000000002"),
        ("Carol Example", "9000000003"),
    ]
    candidates: list[Candidate] = []
    for name, phone in fixtures:
        candidate = Candidate(
            registration_number=f"{new_registration_number()}{phone[-1]}",
            candidate_name=name,
            gender="unspecified",
            dob="2000-01-01",
            district="Central",
            pincode="560001",
            state="Karnataka",
            phone=phone,
            exam=exam.title,
            exam_date=exam.date.isoformat(),
            exam_start_time=exam.start_time,
            exam_end_time=exam.end_time,
        )
        candidate.save(force_insert=True)
        candidates.append(candidate)
    return candidates


def seed() -> None:
    init_mongo()
    try:
        Candidate.drop_collection()
        Question.drop_collection()
        Exam.drop_collection()

        exam = _ensure_exam()
        _ensure_candidates(exam)
        print("Seed completed.")
    finally:
        close_mongo()


if __name__ == "__main__":
    seed()
