import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.models.base import utcnow
from app.models.concern import Concern
from app.utils.base import InvalidFormat, MissingField, NotFound


logger = logging.getLogger(__name__)

router = APIRouter()

PHOTO_PREFIX = "data:image/"


class ConcernBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    concern: str | None = None
    photo: str | None = Field(default=None, description="Inline data:image/... URL")


def _output(concern: Concern) -> dict:
    return {
        "id": str(concern.id),
        "concernText": concern.text,
        "photoUrl": concern.photo_url,
        "createdAt": concern.created_at.isoformat(),
    }


@router.post("/concern", status_code=201)
def create_concern(body: ConcernBody) -> dict:
    """PUBLIC: Raise a concern, optionally with a screenshot."""
    if not body.concern:
        raise MissingField("Concern text is required")
    if body.photo and not body.photo.startswith(PHOTO_PREFIX):
        raise InvalidFormat("Photo must be an inline image data URL")

    concern = Concern(text=body.concern, photo_url=body.photo or None)
    concern.save()
    logger.info("Concern %s submitted", concern.id)
    return {"message": "Concern submitted successfully", "concernData": _output(concern)}


@router.get("/concerns")
def list_concerns() -> dict:
    """ADMIN: Every concern, newest first."""
    concerns: list[Concern] = Concern.objects.order_by("-created_at")
    if not concerns:
        raise NotFound("No concerns found")
    return {"concerns": [_output(c) for c in concerns]}


@router.delete("/concerns/{concern_id}")
def delete_concern(concern_id: str) -> dict:
    concern: Concern | None = Concern.find_by_id(concern_id)
    if not concern:
        raise NotFound("Concern not found")
    concern.delete()
    return {"message": "Concern deleted successfully", "deletedAt": utcnow().isoformat()}
