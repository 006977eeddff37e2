from fastapi import APIRouter, Depends

from app.api.deps import get_results_service
from app.services.results import ResultsService


router = APIRouter()


@router.get("/today-exam-results")
def today_exam_results(service: ResultsService = Depends(get_results_service)) -> dict:
    """Score today's exam, materialize every candidate's result and return them."""
    return {"success": True, **service.score_today()}


@router.get("/all-exam-results")
def all_exam_results(service: ResultsService = Depends(get_results_service)) -> dict:
    """Read back every materialized result grouped by exam."""
    payload = service.all_results()
    if not payload["data"]:
        return {"success": True, "message": "No exam results found", **payload}
    return {"success": True, "message": "Exam results fetched successfully", **payload}
