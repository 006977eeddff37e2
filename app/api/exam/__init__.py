import json
import logging
import time
from typing import Iterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from redis import RedisError

from app.connections.redis import get_redis
from app.models.exam import Exam
from app.models.question import Question
from app.services import exams as exam_service
from app.utils.base import NotFound
from app.utils.config import settings


logger = logging.getLogger(__name__)

router = APIRouter()


class QuestionBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str]
    correct_answer: int = Field(alias="correctAnswer")
    image: str | None = None


class DateTimeBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    marks: int
    price: float


class ExamQuestionsBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_name: str = Field(alias="examName")


@router.post("/exams/{exam_title}/questions")
def add_question(exam_title: str, body: QuestionBody) -> dict:
    """ADMIN: Append a question to an exam."""
    question = exam_service.add_question(exam_title, body.question, body.options, body.correct_answer, body.image)
    return {"message": "Question added successfully", "questionId": str(question.id), "order": question.order}


@router.put("/exams/{exam_title}/questions/{question_id}")
def update_question(exam_title: str, question_id: str, body: QuestionBody) -> dict:
    """ADMIN: Replace a question's text, options, correct answer and (optionally) image."""
    exam_service.update_question(exam_title, question_id, body.question, body.options, body.correct_answer, body.image)
    return {"message": "Question updated successfully"}


@router.delete("/exams/{exam_title}/questions/{question_id}")
def delete_question(exam_title: str, question_id: str) -> dict:
    """ADMIN: Delete a question; other questions keep their order."""
    exam_service.delete_question(exam_title, question_id)
    return {"message": "Question deleted successfully"}


@router.post("/exams/{exam_title}/date-time")
def save_exam_date_time(exam_title: str, body: DateTimeBody) -> dict:
    """ADMIN: Upsert an exam's schedule, marks and price."""
    exam_service.schedule_exam(exam_title, body.date, body.start_time, body.end_time, body.marks, body.price)
    return {
        "message": "Exam details saved successfully",
        "data": {
            "examTitle": exam_title,
            "date": body.date,
            "startTime": body.start_time,
            "endTime": body.end_time,
            "marks": body.marks,
            "price": body.price,
        },
    }


@router.get("/exams/{exam_title}/date-time")
def get_exam_date_time(exam_title: str) -> dict:
    exam: Exam | None = Exam.objects(title=exam_title).first()
    if not exam or not exam.date:
        raise NotFound("Exam date and time not found")
    schedule = exam.schedule()
    schedule.pop("id")
    return {"examTitle": exam_title, **schedule}


@router.get("/exams")
def list_exams() -> dict:
    """PUBLIC: Every exam with its schedule."""
    exams: list[Exam] = Exam.objects.order_by("date")
    return {"success": True, "data": [e.schedule() for e in exams]}


@router.get("/exams/qa")
def exams_answer_key() -> dict:
    """ADMIN: Every exam with its questions and correct answers, for answer-key review."""
    exams: list[Exam] = Exam.objects.order_by("title")
    data = []
    for exam in exams:
        questions: list[Question] = Question.objects(exam=exam.title).order_by("order")
        data.append({
            "id": exam.title,
            "examDetails": exam.schedule(),
            "questions": [q.to_output(exclude=["metadata"]) for q in questions],
        })
    return {"success": True, "data": data}


@router.post("/exam-questions")
def exam_questions(body: ExamQuestionsBody) -> dict:
    """PUBLIC: Questions of an exam in order, without their correct answers."""
    exam: Exam | None = Exam.objects(title=body.exam_name).first()
    if not exam:
        raise NotFound("Exam not found")
    questions: list[Question] = Question.objects(exam=exam.title).order_by("order")
    return {
        "success": True,
        "data": {
            "examDetails": exam.schedule(),
            "questions": [q.to_output(exclude=["correct_answer"]) for q in questions],
        },
    }


def _event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def _today_exams_event() -> str:
    try:
        return _event({"success": True, "data": exam_service.today_exams()})
    except Exception as exc:
        logger.warning("Failed to load today's exams for stream: %s", exc)
        return _event({"success": False, "error": "Failed to fetch exam data", "details": str(exc)})


def today_exam_events(poll_seconds: float) -> Iterator[str]:
    """Emit today's exams on connect, then again on every change notice or poll tick."""
    pubsub = None
    try:
        pubsub = get_redis().pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(settings.today_exams_channel)
    except (RedisError, AssertionError) as exc:
        logger.warning("Today-exam stream falling back to polling: %s", exc)
        pubsub = None

    try:
        yield _today_exams_event()
        while True:
            if pubsub is not None:
                # Returns early when an exam schedule changes
                pubsub.get_message(timeout=poll_seconds)
            else:
                time.sleep(poll_seconds)
            yield _today_exams_event()
    finally:
        if pubsub is not None:
            pubsub.close()


@router.get("/today-exams")
def today_exams_stream() -> StreamingResponse:
    """PUBLIC: Server-sent events carrying today's exams, earliest first."""
    return StreamingResponse(
        today_exam_events(settings.stream_poll_seconds),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
