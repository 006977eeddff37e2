from mongoengine import IntField, ListField, StringField, ValidationError

from app.models.base import BaseDocument


OPTION_COUNT = 4


class Question(BaseDocument):
    """Multiple-choice question belonging to one exam.

    Fields:
    - exam (str): title of the owning exam
    - text (str), options (list[str], exactly 4)
    - correct_answer (int 0-3)
    - order (int): 1-based position, never renumbered on delete
    - image (str|None): data URL or storage URL
    """
    exam = StringField(required=True, null=False)
    text = StringField(required=True, null=False, db_field="question")
    options = ListField(StringField(), required=True, null=False)
    correct_answer = IntField(required=True, null=False, min_value=0, max_value=OPTION_COUNT - 1, db_field="correctAnswer")
    order = IntField(required=True, null=False, min_value=1)
    image = StringField(required=False, null=True)

    meta = {
        "collection": "questions",
        "indexes": [
            {"fields": ["exam", "order"]},
        ],
    }

    def validate(self, clean=True):
        super().validate(clean)
        if len(self.options or []) != OPTION_COUNT:
            raise ValidationError(f"Exactly {OPTION_COUNT} options are required")
