import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.models.candidate import Candidate
from app.services import candidates as candidate_service
from app.utils.base import MissingField, NotFound


logger = logging.getLogger(__name__)

router = APIRouter()


class RegisterBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    candidate_name: str | None = Field(default=None, alias="candidateName")
    gender: str | None = None
    dob: str | None = None
    district: str | None = None
    pincode: str | None = None
    state: str | None = None
    email: str | None = None
    phone: str | None = None
    exam: str | None = None
    exam_date: str | None = Field(default=None, alias="examDate")
    exam_start_time: str | None = Field(default=None, alias="examStartTime")
    exam_end_time: str | None = Field(default=None, alias="examEndTime")
    photo_url: str | None = Field(default=None, alias="photoUrl")


REGISTER_REQUIRED = [
    "candidateName", "gender", "dob", "district",
    "pincode", "state", "phone", "exam",
    "examDate", "examStartTime", "examEndTime",
]


class RegistrationBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    registration_number: str = Field(alias="registrationNumber")


@router.post("/register", status_code=201)
def register(body: RegisterBody) -> dict:
    """PUBLIC: Register a candidate for an exam and issue a registration number."""
    data = body.model_dump(by_alias=True)
    missing = [field for field in REGISTER_REQUIRED if not data.get(field)]
    if missing:
        raise MissingField(f"Missing required fields: {', '.join(missing)}")

    candidate = Candidate(
        registration_number=candidate_service.new_registration_number(),
        candidate_name=body.candidate_name,
        gender=body.gender,
        dob=body.dob,
        district=body.district,
        pincode=body.pincode,
        state=body.state,
        email=body.email or "",
        phone=body.phone,
        exam=body.exam,
        exam_date=body.exam_date,
        exam_start_time=body.exam_start_time,
        exam_end_time=body.exam_end_time,
        photo_url=body.photo_url,
    )
    candidate.save(force_insert=True)
    logger.info("Registered candidate %s for %s", candidate.registration_number, candidate.exam)

    output = candidate.to_output(exclude=["answers", "metadata"])
    return {
        "success": True,
        "message": "Candidate registered successfully",
        "data": {"registrationNumber": candidate.registration_number, **output},
    }


@router.post("/validate-registration")
def validate_registration(body: RegistrationBody) -> dict:
    """PUBLIC: Check a registration number is due, unused and complete."""
    candidate = candidate_service.validate_registration(body.registration_number)
    return {
        "success": True,
        "examName": candidate.exam,
        "candidateName": candidate.candidate_name,
        "district": candidate.district,
        "examDate": candidate.exam_date,
        "examStartTime": candidate.exam_start_time,
        "examEndTime": candidate.exam_end_time,
        "used": False,
    }


@router.post("/start-exam")
def start_exam(body: RegistrationBody) -> dict:
    """PUBLIC: Begin the exam session; a registration can start only once."""
    candidate_service.start_exam(body.registration_number)
    return {"success": True, "message": "Exam started successfully"}


@router.get("/candidates")
def list_candidates() -> dict:
    candidates: list[Candidate] = Candidate.objects.exclude("answers")
    return {
        "message": "Candidates fetched successfully",
        "candidates": [c.to_output(exclude=["answers", "metadata"]) for c in candidates],
    }


@router.delete("/candidates")
def delete_candidates() -> dict:
    """ADMIN: Remove every registration together with its stored answers."""
    deleted = Candidate.objects.delete()
    logger.warning("Deleted %d candidates", deleted)
    return {"message": "Candidates collection and related data deleted successfully", "deletedCount": deleted}


@router.get("/latest-candidate")
def latest_candidate() -> dict:
    """PUBLIC: Most recent registration, used to print the hall ticket."""
    candidate: Candidate | None = Candidate.objects.exclude("answers").order_by("-created_at").first()
    if not candidate:
        raise NotFound("No candidates found")
    return {
        "message": "Latest candidate fetched successfully",
        "candidate": candidate.to_output(exclude=["answers", "metadata"]),
    }


@router.get("/candidate/{registration_number}")
def get_candidate(registration_number: str) -> dict:
    candidate: Candidate | None = Candidate.objects(registration_number=registration_number).exclude("answers").first()
    if not candidate:
        raise NotFound("Candidate not found")
    return {"success": True, "data": candidate.to_output(exclude=["answers", "metadata"])}
