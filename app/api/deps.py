from functools import lru_cache

from fastapi import Depends

from app.connections.redis import get_redis
from app.services.answers import AnswerIngestion
from app.services.payment import RazorpayGateway
from app.services.results import ResultsService
from app.stores import (
    CandidateStore,
    ExamStore,
    MongoCandidateStore,
    MongoExamStore,
    RedisResultStore,
    ResultStore,
)
from app.utils.config import settings


def get_candidate_store() -> CandidateStore:
    return MongoCandidateStore()


def get_exam_store() -> ExamStore:
    return MongoExamStore()


def get_result_store() -> ResultStore:
    return RedisResultStore(get_redis(), prefix=settings.results_key_prefix)


def get_answer_ingestion(store: CandidateStore = Depends(get_candidate_store)) -> AnswerIngestion:
    return AnswerIngestion(store)


def get_results_service(
    exam_store: ExamStore = Depends(get_exam_store),
    candidate_store: CandidateStore = Depends(get_candidate_store),
    result_store: ResultStore = Depends(get_result_store),
) -> ResultsService:
    return ResultsService(exam_store, candidate_store, result_store)


@lru_cache(maxsize=1)
def get_payment_gateway() -> RazorpayGateway:
    """One gateway, and so one HTTP session, per process."""
    return RazorpayGateway(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        base_url=settings.razorpay_base_url,
        timeout=settings.razorpay_timeout_seconds,
    )


def close_payment_gateway() -> None:
    if get_payment_gateway.cache_info().currsize:
        get_payment_gateway().close()
        get_payment_gateway.cache_clear()
