from __future__ import annotations

import logging
import time
from datetime import date

from app.models.base import utcnow
from app.models.candidate import Candidate
from app.utils.base import Conflict, InvalidFormat, NotFound


logger = logging.getLogger(__name__)

REGISTRATION_PREFIX = "REG"

REQUIRED_PROFILE_FIELDS = [
    "candidateName",
    "district",
    "dob",
    "exam",
    "examDate",
    "examStartTime",
    "examEndTime",
    "gender",
    "phone",
]


def new_registration_number() -> str:
    return f"{REGISTRATION_PREFIX}{int(time.time() * 1000)}"


def get_candidate(registration_number: str) -> Candidate:
    candidate: Candidate | None = Candidate.objects(registration_number=registration_number).first()
    if not candidate:
        raise NotFound("Invalid registration number")
    return candidate


def _ensure_exam_day_reached(candidate: Candidate, today: date) -> None:
    try:
        exam_day = date.fromisoformat(candidate.exam_date[:10])
    except (TypeError, ValueError):
        raise InvalidFormat("Invalid exam date on registration", details=candidate.exam_date) from None
    if exam_day > today:
        raise Conflict("This registration number is for an upcoming exam and cannot be used yet")


def validate_registration(registration_number: str, today: date | None = None) -> Candidate:
    """Check that a registration may start its exam now."""
    candidate = get_candidate(registration_number)
    _ensure_exam_day_reached(candidate, today or date.today())
    if candidate.used:
        raise Conflict("This registration number has already been used", used=True)

    data = candidate.to_output()
    missing = [field for field in REQUIRED_PROFILE_FIELDS if not data.get(field)]
    if missing:
        raise InvalidFormat(f"Missing required fields: {', '.join(missing)}")
    return candidate


def start_exam(registration_number: str, today: date | None = None) -> None:
    """Flip ``used`` exactly once; a second start attempt is rejected."""
    candidate = get_candidate(registration_number)
    _ensure_exam_day_reached(candidate, today or date.today())

    updated = Candidate.objects(registration_number=registration_number, used__ne=True).update_one(
        set__used=True,
        set__started_at=utcnow(),
        set__updated_at=utcnow(),
    )
    if not updated:
        raise Conflict("This registration number has already been used", used=True)
    logger.info("Exam session started for %s", registration_number)
