from mongoengine import StringField

from app.models.base import BaseDocument


class Notification(BaseDocument):
    """Admin notice shown to candidates."""
    message = StringField(required=True, null=False)

    meta = {
        "collection": "notifications",
        "ordering": ["-created_at"],
    }
