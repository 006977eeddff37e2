from mongoengine import DictField, IntField, StringField

from app.models.base import BaseDocument
from app.utils.base import WinnerOption, WinnerStatus


class WinnerChoice(BaseDocument):
    """Prize choice recorded by a ranked candidate; one per (exam, candidate)."""
    exam_title = StringField(required=True, null=False, db_field="examTitle")
    registration_number = StringField(required=True, null=False, db_field="registrationNumber")
    rank = IntField(required=True, null=False, min_value=1)
    selected_option = StringField(required=True, null=False, choices=WinnerOption.values(), db_field="selectedOption")
    status = StringField(required=True, null=False, default=WinnerStatus.PENDING.value, choices=WinnerStatus.values())
    date_created = StringField(required=False, null=True, db_field="dateCreated")
    candidate_details = DictField(required=False, null=True, db_field="candidateDetails")

    meta = {
        "collection": "winners",
        "indexes": [
            {"fields": ["exam_title", "registration_number"], "unique": True},
        ],
    }
