from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any

from mongoengine.errors import ValidationError
from redis import RedisError

from app.connections.redis import get_redis
from app.models.exam import Exam
from app.models.question import OPTION_COUNT, Question
from app.utils.base import Conflict, InvalidFormat, NotFound
from app.utils.config import settings


logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^(0?[1-9]|1[0-2]):[0-5][0-9]\s?(AM|PM)$", re.IGNORECASE)


def parse_clock(value: str) -> datetime:
    """Parse a 12-hour clock time such as ``1:45 PM`` or ``01:45pm``."""
    if not value or not TIME_PATTERN.match(value.strip()):
        raise InvalidFormat("Invalid time format. Please provide time in 12-hour format (e.g., 1:45 PM).")
    return datetime.strptime(value.replace(" ", "").upper(), "%I:%M%p")


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidFormat("Invalid date format. Expected YYYY-MM-DD.", details=str(value)) from None


def get_or_create_exam(title: str) -> Exam:
    exam: Exam | None = Exam.objects(title=title).first()
    if exam is None:
        exam = Exam(title=title)
        exam.save()
    return exam


def schedule_exam(title: str, day: str, start_time: str, end_time: str, marks: int, price: float) -> Exam:
    """Upsert an exam's date, times, marks and price.

    Only one exam may be scheduled on a given date, so today's exam is never
    ambiguous; a second exam on the same date raises ``Conflict``.
    """
    scheduled_on = parse_day(day)
    parse_clock(start_time)
    parse_clock(end_time)

    clash: Exam | None = Exam.objects(date=scheduled_on, title__ne=title).first()
    if clash:
        raise Conflict("Another exam is already scheduled on this date", details=clash.title)

    exam = Exam.objects(title=title).first() or Exam(title=title)
    exam.date = scheduled_on
    exam.start_time = start_time
    exam.end_time = end_time
    exam.marks = marks
    exam.price = price
    exam.save()

    publish_exams_updated(title)
    return exam


def publish_exams_updated(title: str) -> None:
    """Best-effort change notice for today-exam subscribers."""
    try:
        get_redis().publish(settings.today_exams_channel, title)
    except (RedisError, AssertionError) as exc:
        logger.warning("Could not publish exam update for %s: %s", title, exc)


def today_exams(today: date | None = None) -> list[dict[str, Any]]:
    """Exams scheduled for ``today``, earliest start time first."""
    today = today or date.today()
    exams = [exam.schedule() for exam in Exam.objects(date=today)]
    return sorted(exams, key=lambda e: _start_key(e.get("startTime")))


def _start_key(value: str | None) -> datetime:
    try:
        return parse_clock(value or "")
    except InvalidFormat:
        return datetime.max


def _validate_question(options: list[str], correct_answer: int) -> None:
    if len(options) != OPTION_COUNT or not 0 <= correct_answer < OPTION_COUNT:
        raise InvalidFormat("Invalid options or correct answer")


def add_question(title: str, text: str, options: list[str], correct_answer: int, image: str | None = None) -> Question:
    """Append a question; its order is one past the highest order ever kept for the exam."""
    _validate_question(options, correct_answer)
    exam = get_or_create_exam(title)

    existing = Question.objects(exam=exam.title)
    last: Question | None = existing.order_by("-order").only("order").first()
    next_order = max(existing.count(), last.order if last else 0) + 1

    question = Question(
        exam=exam.title,
        text=text,
        options=options,
        correct_answer=correct_answer,
        order=next_order,
        image=image,
    )
    question.save()
    return question


def update_question(
    title: str,
    question_id: str,
    text: str,
    options: list[str],
    correct_answer: int,
    image: str | None = None,
) -> Question:
    _validate_question(options, correct_answer)
    question = _get_question(title, question_id)
    question.text = text
    question.options = options
    question.correct_answer = correct_answer
    if image is not None:
        question.image = image
    question.save()
    return question


def delete_question(title: str, question_id: str) -> None:
    """Delete a question; remaining orders are left untouched."""
    _get_question(title, question_id).delete()


def _get_question(title: str, question_id: str) -> Question:
    try:
        question: Question | None = Question.objects(id=question_id, exam=title).first()
    except ValidationError:
        # Malformed ObjectId
        question = None
    if not question:
        raise NotFound("Question not found")
    return question
