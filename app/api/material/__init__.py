import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.models.material import ExamQA, Syllabus
from app.utils.base import MissingField, NotFound


logger = logging.getLogger(__name__)

router = APIRouter()


class SyllabusBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_title: str | None = Field(default=None, alias="examTitle")
    syllabus_link: str | None = Field(default=None, alias="syllabusLink")


class ExamQABody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_title: str | None = Field(default=None, alias="examTitle")
    qa_link: str | None = Field(default=None, alias="qaLink")


def _output(document: Syllabus | ExamQA) -> dict:
    data = document.to_output(exclude=["metadata", "created_at", "updated_at"])
    data["uploadedAt"] = document.created_at.isoformat()
    data["updatedAt"] = document.updated_at.isoformat()
    return data


def _get_syllabus(syllabus_id: str) -> Syllabus:
    syllabus: Syllabus | None = Syllabus.find_by_id(syllabus_id)
    if not syllabus:
        raise NotFound("Syllabus not found")
    return syllabus


def _require_syllabus_fields(body: SyllabusBody) -> None:
    if not body.exam_title or not body.syllabus_link:
        raise MissingField("Missing required fields. Please provide exam title and syllabus link")


@router.post("/syllabus")
def create_syllabus(body: SyllabusBody) -> dict:
    """ADMIN: Publish a syllabus link for an exam."""
    _require_syllabus_fields(body)
    syllabus = Syllabus(exam_title=body.exam_title, link=body.syllabus_link)
    syllabus.save()
    logger.info("Published syllabus %s for %s", syllabus.id, syllabus.exam_title)
    return {"message": "Syllabus saved successfully", "data": _output(syllabus)}


@router.get("/syllabus")
def list_syllabi() -> dict:
    """PUBLIC: Every published syllabus, newest first."""
    syllabi: list[Syllabus] = Syllabus.objects.order_by("-created_at")
    data = [_output(s) for s in syllabi]
    message = "Syllabus fetched successfully" if data else "No syllabus found"
    return {"message": message, "data": data}


@router.put("/syllabus/{syllabus_id}")
def update_syllabus(syllabus_id: str, body: SyllabusBody) -> dict:
    _require_syllabus_fields(body)
    syllabus = _get_syllabus(syllabus_id)
    syllabus.exam_title = body.exam_title
    syllabus.link = body.syllabus_link
    syllabus.save()
    return {"message": "Syllabus updated successfully", "data": _output(syllabus)}


@router.delete("/syllabus/{syllabus_id}")
def delete_syllabus(syllabus_id: str) -> dict:
    _get_syllabus(syllabus_id).delete()
    return {"message": "Syllabus deleted successfully"}


@router.post("/exam-qa")
def create_exam_qa(body: ExamQABody) -> dict:
    """ADMIN: Publish the answer-key document of an exam."""
    if not body.exam_title or not body.qa_link:
        raise MissingField("Missing required fields. Please provide exam title and Q&A link.")
    qa = ExamQA(exam_title=body.exam_title, link=body.qa_link)
    qa.save()
    return {"message": "Exam Q&A saved successfully", "data": _output(qa)}


@router.get("/exam-qa")
def list_exam_qa() -> dict:
    """PUBLIC: Published answer keys, newest first."""
    entries: list[ExamQA] = ExamQA.objects.order_by("-created_at")
    if not entries:
        raise NotFound("No Q&A data found")
    return {"message": "Q&A data retrieved successfully", "data": [_output(qa) for qa in entries]}
