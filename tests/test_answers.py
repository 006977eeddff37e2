import pytest

from app.services.answers import AnswerIn, AnswerIngestion, normalize_question_id
from app.utils.base import InvalidFormat, MissingField, NotFound
from tests.fakes import InMemoryCandidateStore, make_candidate


def _entry(**fields):
    payload = {"registrationNumber": "REG1", "questionId": "1", "answer": 1, "examName": "Math101", "order": 1}
    payload.update(fields)
    return AnswerIn.model_validate(payload)


@pytest.fixture
def store():
    return InMemoryCandidateStore(make_candidate("REG1"), make_candidate("REG2"))


@pytest.fixture
def ingestion(store):
    return AnswerIngestion(store)


@pytest.mark.parametrize("raw, expected", [("5", "Q5"), ("Q5", "Q5"), (5, "Q5"), (" 7 ", "Q7")])
def test_normalize_question_id(raw, expected):
    assert normalize_question_id(raw) == expected


def test_normalize_rejects_path_characters():
    with pytest.raises(InvalidFormat):
        normalize_question_id("a.b")


def test_prefixed_and_bare_ids_share_a_slot(ingestion, store):
    ingestion.save_answer(_entry(questionId="5", answer=1))
    ingestion.save_answer(_entry(questionId="Q5", answer=3))

    answers = store.get("REG1")["answers"]
    assert list(answers) == ["Q5"]
    assert answers["Q5"]["answer"] == 3


def test_individual_save_accepts_zero(ingestion, store):
    ingestion.save_answer(_entry(answer=0))

    stored = store.get("REG1")["answers"]["Q1"]
    assert stored["answer"] == 0
    assert stored["skipped"] is False
    assert stored["submittedVia"] == "individual"


@pytest.mark.parametrize("missing", ["registrationNumber", "questionId", "answer", "examName"])
def test_individual_save_requires_fields(ingestion, store, missing):
    payload = {"registrationNumber": "REG1", "questionId": "1", "answer": 1, "examName": "Math101"}
    payload.pop(missing)

    with pytest.raises(MissingField):
        ingestion.save_answer(AnswerIn.model_validate(payload))
    assert store.writes == []


def test_individual_save_for_unknown_candidate(ingestion):
    with pytest.raises(NotFound):
        ingestion.save_answer(_entry(registrationNumber="REG404"))


def test_skipped_answer_is_stored_as_null(ingestion, store):
    ingestion.save_answer(_entry(answer=2, skipped=True))

    stored = store.get("REG1")["answers"]["Q1"]
    assert stored["answer"] is None
    assert stored["skipped"] is True


def test_string_answers_are_parsed(ingestion, store):
    ingestion.save_answer(_entry(answer="3"))

    assert store.get("REG1")["answers"]["Q1"]["answer"] == 3


def test_unparseable_answer_writes_nothing(ingestion, store):
    entries = [_entry(questionId="1", answer=1), _entry(questionId="2", answer="abc")]

    with pytest.raises(InvalidFormat):
        ingestion.save_all_answers(entries)
    assert store.writes == []


def test_same_payload_twice_is_one_record(ingestion, store):
    ingestion.save_answer(_entry())
    first = store.get("REG1")["answers"]
    ingestion.save_answer(_entry())
    second = store.get("REG1")["answers"]

    assert len(second) == 1
    assert {k: v for k, v in second["Q1"].items() if k != "timestamp"} == \
        {k: v for k, v in first["Q1"].items() if k != "timestamp"}


def test_last_write_wins_across_paths(ingestion, store):
    ingestion.save_answer(_entry(answer=1))
    ingestion.timeout_save_answers([_entry(answer=2)])

    stored = store.get("REG1")["answers"]["Q1"]
    assert stored["answer"] == 2
    assert stored["submittedVia"] == "timeout"


@pytest.mark.parametrize("payload", [[], None])
def test_bulk_save_rejects_empty_or_missing(ingestion, payload):
    with pytest.raises(InvalidFormat):
        ingestion.save_all_answers(payload)


def test_bulk_save_spans_candidates(ingestion, store):
    report = ingestion.save_all_answers([
        _entry(registrationNumber="REG1", questionId="1", order=1),
        _entry(registrationNumber="REG2", questionId="Q1", order=1, skipped=True, answer=None),
        _entry(registrationNumber="REG1", questionId="2", order=2, answer=0),
    ])

    assert report.saved_count == 3
    assert set(store.get("REG1")["answers"]) == {"Q1", "Q2"}
    assert store.get("REG2")["answers"]["Q1"]["skipped"] is True


def test_bulk_save_reports_unknown_candidates(ingestion):
    report = ingestion.save_all_answers([_entry(), _entry(registrationNumber="REG404")])

    assert report.saved_count == 1
    assert report.unknown_candidates == ["REG404"]


def test_timeout_save_keeps_only_attempted(ingestion, store):
    report = ingestion.timeout_save_answers([
        _entry(questionId="1", order=1, answer=2),
        _entry(questionId="2", order=2, answer=None),
        _entry(questionId="3", order=3, answer=1, skipped=True),
        _entry(questionId="4", order=4, answer=0),
    ])

    assert report.saved_count == 2
    assert set(store.get("REG1")["answers"]) == {"Q1", "Q4"}
    assert all(a["submittedVia"] == "timeout" for a in store.get("REG1")["answers"].values())


def test_timeout_save_with_nothing_attempted(ingestion, store):
    report = ingestion.timeout_save_answers([_entry(answer=None), _entry(skipped=True)])

    assert report.saved_count == 0
    assert store.writes == []


def test_timeout_save_requires_a_list(ingestion):
    with pytest.raises(InvalidFormat):
        ingestion.timeout_save_answers(None)


def test_complete_exam_marks_submitted_with_answers(ingestion, store):
    metadata = ingestion.complete_exam("REG1", "Math101", [
        _entry(questionId="1", order=1, answer=1),
        _entry(questionId="2", order=2, answer=None, skipped=True),
    ])

    candidate = store.get("REG1")
    assert candidate["submitted"] is True
    assert candidate["examCompletedAt"] == metadata["submittedAt"]
    assert {a["submittedVia"] for a in candidate["answers"].values()} == {"completion"}
    assert metadata["totalAnswers"] == 2
    assert metadata["skippedCount"] == 1
    assert len(store.writes) == 1


def test_complete_exam_unknown_candidate_writes_nothing(ingestion, store):
    with pytest.raises(NotFound):
        ingestion.complete_exam("REG404", "Math101", [_entry()])
    assert store.writes == []


@pytest.mark.parametrize("candidate_id, exam_name", [(None, "Math101"), ("REG1", None)])
def test_complete_exam_requires_identity(ingestion, candidate_id, exam_name):
    with pytest.raises(MissingField):
        ingestion.complete_exam(candidate_id, exam_name, [])


def test_candidate_answers_sorted_by_order(ingestion):
    ingestion.save_all_answers([
        _entry(questionId="3", order=3, answer=2),
        _entry(questionId="1", order=1, answer=0),
        _entry(questionId="2", order=2, answer=None, skipped=True),
    ])

    data = ingestion.candidate_answers("REG1")

    assert [a["questionId"] for a in data["answers"]] == ["Q1", "Q2", "Q3"]
    assert data["metadata"] == {"totalAnswers": 3, "skippedCount": 1, "submittedAnswers": 2}
    assert data["candidateDetails"]["exam"] == "Math101"


def test_candidate_answers_missing(ingestion):
    with pytest.raises(NotFound):
        ingestion.candidate_answers("REG2")
    with pytest.raises(NotFound):
        ingestion.candidate_answers("REG404")


def test_individual_save_without_answer_key_is_missing_even_when_skipped(ingestion, store):
    entry = AnswerIn.model_validate(
        {"registrationNumber": "REG1", "questionId": "1", "examName": "Math101", "skipped": True}
    )

    with pytest.raises(MissingField) as info:
        ingestion.save_answer(entry)
    assert info.value.details == "answer"
    assert store.writes == []


def test_individual_save_stores_explicit_null_as_unanswered(ingestion, store):
    ingestion.save_answer(_entry(answer=None))

    stored = store.get("REG1")["answers"]["Q1"]
    assert stored["answer"] is None
    assert stored["skipped"] is False


def test_complete_exam_with_blank_answer_still_submits(ingestion, store):
    metadata = ingestion.complete_exam("REG1", "Math101", [
        _entry(questionId="1", order=1, answer=2),
        _entry(questionId="2", order=2, answer=None),
    ])

    candidate = store.get("REG1")
    assert candidate["submitted"] is True
    assert candidate["answers"]["Q1"]["answer"] == 2
    assert candidate["answers"]["Q2"]["answer"] is None
    assert candidate["answers"]["Q2"]["skipped"] is False
    assert metadata["totalAnswers"] == 2


def test_timeout_save_shares_slot_with_prefixed_id(ingestion, store):
    ingestion.save_answer(_entry(questionId="Q5", answer=1))
    ingestion.timeout_save_answers([_entry(questionId="5", answer=3)])

    answers = store.get("REG1")["answers"]
    assert list(answers) == ["Q5"]
    assert answers["Q5"]["answer"] == 3
    assert answers["Q5"]["submittedVia"] == "timeout"


def test_completion_shares_slot_with_bare_id(ingestion, store):
    ingestion.timeout_save_answers([_entry(questionId="Q5", answer=1)])
    ingestion.complete_exam("REG1", "Math101", [_entry(questionId="5", answer=2)])

    answers = store.get("REG1")["answers"]
    assert list(answers) == ["Q5"]
    assert answers["Q5"]["answer"] == 2
    assert answers["Q5"]["submittedVia"] == "completion"


def test_bulk_save_shares_slot_with_prefixed_id(ingestion, store):
    ingestion.save_all_answers([_entry(questionId="5", answer=0), _entry(questionId="Q5", answer=3)])

    answers = store.get("REG1")["answers"]
    assert list(answers) == ["Q5"]
    assert answers["Q5"]["answer"] == 3
