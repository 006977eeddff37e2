from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_answer_ingestion
from app.services.answers import AnswerIn, AnswerIngestion


router = APIRouter()


class AnswersBody(BaseModel):
    answers: list[AnswerIn]


class CompleteExamBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    candidate_id: str | None = Field(default=None, alias="candidateId")
    exam_name: str | None = Field(default=None, alias="examName")
    answers: list[AnswerIn]


@router.post("/save-answer")
def save_answer(body: AnswerIn, ingestion: AnswerIngestion = Depends(get_answer_ingestion)) -> dict:
    """Upsert a single answer."""
    ingestion.save_answer(body)
    return {"success": True, "message": "Answer saved successfully"}


@router.post("/save-all-answers")
def save_all_answers(body: AnswersBody, ingestion: AnswerIngestion = Depends(get_answer_ingestion)) -> dict:
    """Upsert a batch of answers, possibly for several candidates."""
    report = ingestion.save_all_answers(body.answers)
    response = {"success": True, "message": "All answers saved successfully", "savedCount": report.saved_count}
    if report.unknown_candidates:
        response["unknownCandidates"] = report.unknown_candidates
    return response


@router.post("/timeout-save-answers")
def timeout_save_answers(body: AnswersBody, ingestion: AnswerIngestion = Depends(get_answer_ingestion)) -> dict:
    """Persist only the attempted answers when the exam clock runs out."""
    report = ingestion.timeout_save_answers(body.answers)
    if report.saved_count == 0 and not report.unknown_candidates:
        return {"success": True, "message": "No attempted answers to save", "savedCount": 0}
    response = {"success": True, "message": "Attempted answers saved successfully", "savedCount": report.saved_count}
    if report.unknown_candidates:
        response["unknownCandidates"] = report.unknown_candidates
    return response


@router.post("/complete-exam")
def complete_exam(body: CompleteExamBody, ingestion: AnswerIngestion = Depends(get_answer_ingestion)) -> dict:
    """Record final answers and mark the candidate submitted, atomically."""
    metadata = ingestion.complete_exam(body.candidate_id, body.exam_name, body.answers)
    return {
        "success": True,
        "message": "Exam completed and answers submitted successfully",
        "metadata": metadata,
    }


@router.get("/candidate-answers/{registration_id}")
def candidate_answers(registration_id: str, ingestion: AnswerIngestion = Depends(get_answer_ingestion)) -> dict:
    return {"success": True, "data": ingestion.candidate_answers(registration_id)}
