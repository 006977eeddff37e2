from datetime import date

import pytest

from app.services.answers import AnswerIn, AnswerIngestion
from app.services.results import ResultsService
from app.utils.base import NotFound
from tests.fakes import InMemoryCandidateStore, InMemoryExamStore, InMemoryResultStore, make_candidate


TODAY = date(2026, 10, 19)


def _answer(reg, order, answer, skipped=False):
    return AnswerIn.model_validate({
        "registrationNumber": reg,
        "questionId": str(order),
        "answer": answer,
        "examName": "Math101",
        "order": order,
        "skipped": skipped,
    })


@pytest.fixture
def exam_store():
    store = InMemoryExamStore()
    store.add_exam("Math101", TODAY, [1, 0, 2])
    store.add_exam("History", date(2026, 10, 20), [3])
    return store


@pytest.fixture
def candidate_store():
    return InMemoryCandidateStore(
        make_candidate("REG1", used=True),
        make_candidate("REG2"),
        make_candidate("REG9", exam="History"),
    )


def test_score_today_materializes_every_candidate(exam_store, candidate_store):
    AnswerIngestion(candidate_store).save_all_answers([
        _answer("REG1", 1, 1),
        _answer("REG1", 2, 2),
        _answer("REG1", 3, None, skipped=True),
    ])
    result_store = InMemoryResultStore()

    payload = ResultsService(exam_store, candidate_store, result_store).score_today(TODAY)

    assert payload["examDetails"]["examName"] == "Math101"
    by_reg = {r["registrationNumber"]: r for r in payload["results"]}
    assert set(by_reg) == {"REG1", "REG2"}
    assert (by_reg["REG1"]["correctAnswers"], by_reg["REG1"]["skippedQuestions"], by_reg["REG1"]["wrongAnswers"]) == (1, 1, 1)
    assert by_reg["REG1"]["used"] is True
    assert (by_reg["REG2"]["correctAnswers"], by_reg["REG2"]["skippedQuestions"], by_reg["REG2"]["wrongAnswers"]) == (0, 3, 0)
    assert payload["summary"] == {"succeeded": 2, "failed": []}

    stored = result_store.all()["Math101"]
    assert stored["REG1"]["totalQuestions"] == 3
    assert "timestamp" in stored["REG1"]


def test_score_today_without_exam(exam_store, candidate_store):
    service = ResultsService(exam_store, candidate_store, InMemoryResultStore())

    with pytest.raises(NotFound):
        service.score_today(date(2026, 1, 1))


def test_rescoring_overwrites_snapshot(exam_store, candidate_store):
    result_store = InMemoryResultStore()
    service = ResultsService(exam_store, candidate_store, result_store)

    service.score_today(TODAY)
    AnswerIngestion(candidate_store).save_answer(_answer("REG2", 1, 1))
    service.score_today(TODAY)

    stored = result_store.all()["Math101"]
    assert len(stored) == 2
    assert stored["REG2"]["correctAnswers"] == 1
    assert stored["REG2"]["skippedQuestions"] == 2


def test_one_failing_candidate_does_not_stop_the_rest(exam_store, candidate_store):
    result_store = InMemoryResultStore(fail_for={"REG1"})

    payload = ResultsService(exam_store, candidate_store, result_store).score_today(TODAY)

    assert payload["summary"] == {"succeeded": 1, "failed": ["REG1"]}
    assert [r["registrationNumber"] for r in payload["results"]] == ["REG2"]
    assert set(result_store.all()["Math101"]) == {"REG2"}


def test_all_results_flattens_groups(exam_store, candidate_store):
    result_store = InMemoryResultStore()
    result_store.put("History", "REG9", {"correctAnswers": 1})
    ResultsService(exam_store, candidate_store, result_store).score_today(TODAY)

    payload = ResultsService(exam_store, candidate_store, result_store).all_results()

    assert payload["metadata"] == {"totalExams": 2, "totalCandidates": 3}
    groups = {g["examId"]: g["candidates"] for g in payload["data"]}
    assert groups["History"] == [{"registrationId": "REG9", "correctAnswers": 1}]
    assert {c["registrationId"] for c in groups["Math101"]} == {"REG1", "REG2"}


def test_all_results_when_empty(exam_store, candidate_store):
    payload = ResultsService(exam_store, candidate_store, InMemoryResultStore()).all_results()

    assert payload == {"data": [], "metadata": {"totalExams": 0, "totalCandidates": 0}}
