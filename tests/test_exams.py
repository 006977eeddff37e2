import json
from datetime import date

import pytest

import app.connections.redis as redis_connection
from app.api.exam import today_exam_events
from app.models.exam import Exam
from app.services import exams as exam_service
from app.utils.base import Conflict


TODAY = date.today().isoformat()


def _payload(event):
    assert event.startswith("data: ")
    return json.loads(event[len("data: "):])


def _question(title, correct=0):
    return exam_service.add_question(title, "Pick one", ["a", "b", "c", "d"], correct)


def test_unscheduled_exam_has_no_stored_date(mongo, redis_client):
    _question("Physics")
    _question("Chemistry")

    collection = Exam._get_collection()
    for title in ("Physics", "Chemistry"):
        assert "date" not in collection.find_one({"_id": title})


def test_scheduling_keeps_dates_unique(mongo, redis_client):
    _question("Physics")
    exam_service.schedule_exam("Physics", TODAY, "10:00 AM", "11:00 AM", 10, 0)

    with pytest.raises(Conflict):
        exam_service.schedule_exam("Chemistry", TODAY, "1:00 PM", "2:00 PM", 10, 0)
    assert Exam._get_collection().find_one({"_id": "Physics"})["date"] is not None


def test_today_exams_sorted_by_start_time(mongo, redis_client):
    exam_service.schedule_exam("Morning", TODAY, "9:00 AM", "10:00 AM", 10, 0)
    exam_service.schedule_exam("Elsewhen", "2030-01-01", "8:00 AM", "9:00 AM", 10, 0)

    assert [e["id"] for e in exam_service.today_exams()] == ["Morning"]


def test_today_exam_events_follow_schedule_changes(mongo, redis_client):
    events = today_exam_events(poll_seconds=0.05)
    try:
        assert _payload(next(events)) == {"success": True, "data": []}

        exam_service.schedule_exam("Math101", TODAY, "10:00 AM", "11:00 AM", 3, 99)
        second = _payload(next(events))
    finally:
        events.close()

    assert second["success"] is True
    assert [(e["id"], e["startTime"]) for e in second["data"]] == [("Math101", "10:00 AM")]


def test_today_exam_events_poll_without_redis(mongo, monkeypatch):
    monkeypatch.setattr(redis_connection, "_redis_client", None)
    events = today_exam_events(poll_seconds=0.01)
    try:
        assert _payload(next(events))["data"] == []
        Exam(title="Math101", date=date.today(), start_time="10:00 AM", end_time="11:00 AM").save()
        assert [e["id"] for e in _payload(next(events))["data"]] == ["Math101"]
    finally:
        events.close()
