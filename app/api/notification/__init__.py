from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.models.base import utcnow
from app.models.notification import Notification
from app.utils.base import InvalidFormat, MissingField, NotFound


router = APIRouter()


class NotificationBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")


def _get_notification(notification_id: str) -> Notification:
    notification: Notification | None = Notification.find_by_id(notification_id)
    if not notification:
        raise NotFound("Notification not found")
    return notification


def _output(notification: Notification) -> dict:
    return {
        "id": str(notification.id),
        "message": notification.message,
        "createdAt": notification.created_at.isoformat(),
        "updatedAt": notification.updated_at.isoformat(),
    }


@router.get("/notifications")
def list_notifications() -> dict:
    """PUBLIC: Notifications, newest first."""
    notifications: list[Notification] = Notification.objects.order_by("-created_at")
    return {"notifications": [_output(n) for n in notifications]}


@router.post("/notifications")
def create_notification(body: NotificationBody) -> dict:
    """ADMIN: Publish a notification."""
    if not body.message:
        raise MissingField("Missing required fields. Please provide a message")
    notification = Notification(message=body.message)
    if body.created_at:
        try:
            notification.created_at = datetime.fromisoformat(body.created_at)
        except ValueError:
            raise InvalidFormat("Invalid createdAt timestamp", details=body.created_at) from None
    notification.save()
    return {"message": "Notification saved successfully", "data": _output(notification)}


@router.put("/notifications/{notification_id}")
def update_notification(notification_id: str, body: NotificationBody) -> dict:
    if not body.message:
        raise MissingField("Missing required fields. Please provide a message")
    notification = _get_notification(notification_id)
    notification.message = body.message
    notification.save()
    return {"message": "Notification updated successfully", "data": _output(notification)}


@router.delete("/notifications/{notification_id}")
def delete_notification(notification_id: str) -> dict:
    _get_notification(notification_id).delete()
    return {"message": "Notification deleted successfully", "deletedAt": utcnow().isoformat()}
