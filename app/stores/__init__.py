from __future__ import annotations

from datetime import date
from typing import Any, Protocol

from app.stores.candidates import MongoCandidateStore
from app.stores.exams import MongoExamStore
from app.stores.results import RedisResultStore


class CandidateStore(Protocol):
    def get(self, registration_number: str) -> dict[str, Any] | None: ...
    def list_for_exam(self, exam_title: str) -> list[dict[str, Any]]: ...
    def save_answers(self, registration_number: str, answers: dict[str, dict]) -> bool: ...
    def complete(self, registration_number: str, answers: dict[str, dict], completed_at: str) -> bool: ...


class ExamStore(Protocol):
    def exams_on(self, day: date) -> list[dict[str, Any]]: ...
    def list_questions(self, exam_title: str) -> list[dict[str, Any]]: ...


class ResultStore(Protocol):
    def put(self, exam_id: str, registration_number: str, payload: dict[str, Any]) -> None: ...
    def all(self) -> dict[str, dict[str, dict[str, Any]]]: ...


__all__ = [
    "CandidateStore",
    "ExamStore",
    "ResultStore",
    "MongoCandidateStore",
    "MongoExamStore",
    "RedisResultStore",
]
