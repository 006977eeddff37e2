from mongoengine import StringField

from app.models.base import BaseDocument


class Concern(BaseDocument):
    """Issue raised by a candidate, optionally with a screenshot.

    Fields:
    - text (str): the concern as typed by the candidate
    - photo_url (str|None): inline ``data:image/...`` URL
    """
    text = StringField(required=True, null=False, db_field="concernText")
    photo_url = StringField(required=False, null=True, db_field="photoUrl")

    meta = {
        "collection": "concerns",
        "ordering": ["-created_at"],
    }
