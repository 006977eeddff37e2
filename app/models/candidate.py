from mongoengine import BooleanField, DateTimeField, EmbeddedDocumentField, IntField, MapField, StringField

from app.models.base import BaseDocument, BaseEmbeddedDocument
from app.utils.base import Provenance


class Answer(BaseEmbeddedDocument):
    """Embedded: a candidate's answer to one question.

    Stored under ``answers.<questionId>`` on the candidate, so every write for
    the same (candidate, question) pair lands on the same key.
    """
    answer = IntField(required=False, null=True)
    skipped = BooleanField(required=True, null=False, default=False)
    order = IntField(required=False, null=True)
    exam_name = StringField(required=False, null=True, db_field="examName")
    timestamp = StringField(required=False, null=True)
    submitted_via = StringField(required=False, null=True, choices=Provenance.values(), db_field="submittedVia")


class Candidate(BaseDocument):
    """Registered exam-taker.

    Fields:
    - registration_number (str, pk): ``REG<epoch millis>``
    - personal fields, exam (title of the exam) and its schedule snapshot
    - used (bool): set once the session starts
    - submitted (bool): set once final answers are recorded
    - answers (map[str, Answer])
    """
    registration_number = StringField(primary_key=True)
    candidate_name = StringField(required=True, null=False, db_field="candidateName")
    gender = StringField(required=True, null=False)
    dob = StringField(required=True, null=False)
    district = StringField(required=True, null=False)
    pincode = StringField(required=True, null=False)
    state = StringField(required=True, null=False)
    email = StringField(required=False, null=False, default="")
    phone = StringField(required=True, null=False)
    exam = StringField(required=True, null=False)
    exam_date = StringField(required=True, null=False, db_field="examDate")
    exam_start_time = StringField(required=True, null=False, db_field="examStartTime")
    exam_end_time = StringField(required=True, null=False, db_field="examEndTime")
    photo_url = StringField(required=False, null=True, db_field="photoUrl")

    used = BooleanField(required=True, null=False, default=False)
    submitted = BooleanField(required=True, null=False, default=False)
    started_at = DateTimeField(required=False, null=True, db_field="startedAt")
    exam_completed_at = StringField(required=False, null=True, db_field="examCompletedAt")
    answers = MapField(EmbeddedDocumentField(Answer), default=dict)

    meta = {
        "collection": "candidates",
        "indexes": [
            {"fields": ["exam"]},
        ],
    }
