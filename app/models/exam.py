from mongoengine import DateField, FloatField, IntField, StringField

from app.models.base import BaseDocument


class Exam(BaseDocument):
    """Exam document, keyed by its human-assigned title.

    Fields:
    - title (str, pk)
    - date (date|None): scheduled calendar date; at most one exam per date,
      left out of the stored document until scheduled
    - start_time/end_time (str|None): 12-hour clock, e.g. "1:45 PM"
    - marks (int|None), price (float|None)
    """
    title = StringField(primary_key=True)
    date = DateField(required=False)
    start_time = StringField(required=False, null=True, db_field="startTime")
    end_time = StringField(required=False, null=True, db_field="endTime")
    marks = IntField(required=False, null=True, min_value=0)
    price = FloatField(required=False, null=True, min_value=0)

    meta = {
        "collection": "exams",
        "indexes": [
            {"fields": ["date"], "unique": True, "sparse": True},
        ],
    }

    def schedule(self) -> dict:
        """Schedule view used by scoring and the today-exams stream."""
        return {
            "id": self.title,
            "date": self.date.isoformat() if self.date else None,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "marks": self.marks,
            "price": self.price,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
