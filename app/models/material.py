from mongoengine import StringField

from app.models.base import BaseDocument


class Syllabus(BaseDocument):
    """Study material link (PDF or video) published for an exam."""
    exam_title = StringField(required=True, null=False, db_field="examTitle")
    link = StringField(required=True, null=False, db_field="syllabusLink")

    meta = {
        "collection": "syllabi",
        "ordering": ["-created_at"],
        "indexes": [
            {"fields": ["exam_title"]},
        ],
    }


class ExamQA(BaseDocument):
    """Published answer-key document for a past exam."""
    exam_title = StringField(required=True, null=False, db_field="examTitle")
    link = StringField(required=True, null=False, db_field="qaLink")

    meta = {
        "collection": "exam_qa",
        "ordering": ["-created_at"],
        "indexes": [
            {"fields": ["exam_title"]},
        ],
    }
