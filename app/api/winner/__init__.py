from datetime import date

from fastapi import APIRouter
from mongoengine.errors import NotUniqueError
from pydantic import BaseModel, ConfigDict, Field

from app.models.candidate import Candidate
from app.models.winner import WinnerChoice
from app.utils.base import Conflict, InvalidFormat, MissingField, NotFound, WinnerOption, WinnerStatus


router = APIRouter()


class WinnerChoiceBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_title: str | None = Field(default=None, alias="examTitle")
    registration_number: str | None = Field(default=None, alias="registrationNumber")
    rank: int | None = None
    selected_option: str | None = Field(default=None, alias="selectedOption")


class WinnerStatusBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_title: str = Field(alias="examTitle")
    registration_number: str = Field(alias="registrationNumber")
    status: str


@router.post("/save-winner-choice")
def save_winner_choice(body: WinnerChoiceBody) -> dict:
    """PUBLIC: Record a ranked candidate's prize choice, once per exam."""
    if not body.exam_title or not body.registration_number or not body.rank or not body.selected_option:
        raise MissingField(
            "Missing required fields. Please provide examTitle, registrationNumber, rank, and selectedOption"
        )
    if body.selected_option not in WinnerOption.values():
        raise InvalidFormat('Invalid selectedOption. Must be either "product" or "cash"')

    existing = WinnerChoice.objects(exam_title=body.exam_title, registration_number=body.registration_number).first()
    if existing:
        raise Conflict("Winner choice already recorded for this registration number")

    candidate: Candidate | None = Candidate.objects(registration_number=body.registration_number).only(
        "candidate_name", "exam", "exam_date",
    ).first()
    details = None
    if candidate:
        details = {"name": candidate.candidate_name, "exam": candidate.exam, "examDate": candidate.exam_date}

    winner = WinnerChoice(
        exam_title=body.exam_title,
        registration_number=body.registration_number,
        rank=body.rank,
        selected_option=body.selected_option,
        date_created=date.today().strftime("%d/%m/%Y"),
        candidate_details=details,
    )
    try:
        winner.save()
    except NotUniqueError:
        raise Conflict("Winner choice already recorded for this registration number") from None

    return {
        "success": True,
        "data": {
            "message": "Winner choice saved successfully",
            "details": {
                "examTitle": winner.exam_title,
                "registrationNumber": winner.registration_number,
                "rank": winner.rank,
                "selectedOption": winner.selected_option,
                "dateRecorded": winner.date_created,
                **(details or {}),
            },
        },
    }


@router.get("/winners")
def list_winners() -> dict:
    """ADMIN: Winners grouped by exam title, best rank first."""
    winners: list[WinnerChoice] = WinnerChoice.objects.order_by("exam_title", "rank")
    grouped: dict[str, list[dict]] = {}
    for winner in winners:
        grouped.setdefault(winner.exam_title, []).append(winner.to_output(exclude=["metadata"]))
    if not grouped:
        raise NotFound("No winners data found")
    return {"success": True, "data": {"message": "Winners data retrieved successfully", "winners": grouped}}


@router.put("/winners/status")
def update_winner_status(body: WinnerStatusBody) -> dict:
    """ADMIN: Move a winner choice through its fulfilment states."""
    if body.status not in WinnerStatus.values():
        raise InvalidFormat(f"Invalid status. Must be one of: {', '.join(WinnerStatus.values())}")
    updated = WinnerChoice.objects(
        exam_title=body.exam_title,
        registration_number=body.registration_number,
    ).update_one(set__status=body.status)
    if not updated:
        raise NotFound("Winner choice not found")
    return {"success": True, "message": "Winner status updated successfully"}
