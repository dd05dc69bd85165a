"""
Notification Schemas

NotificationEvent is the wire format carried on the notification stream:

    {"userId": 12, "message": "...", "redirectLink": "/etudiant/modules"}
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationEvent(BaseModel):
    """Event published for the notification consumer."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    message: str = Field(..., min_length=1)
    redirect_link: str = Field("/", alias="redirectLink", max_length=500)

    def to_payload(self) -> str:
        """Serialise to the JSON text stored in the stream entry."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_payload(cls, payload: str | bytes) -> "NotificationEvent":
        return cls.model_validate_json(payload)


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    message: str
    redirect_link: str
    read: bool
    created_at: datetime


class NotificationCreate(BaseModel):
    """Admin request to create a notification row directly."""

    user_id: int
    message: str = Field(..., min_length=1, max_length=2000)
    redirect_link: str = Field("/", max_length=500)


class NotificationBroadcast(BaseModel):
    """Admin request to publish one message to several users."""

    user_ids: list[int] = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=2000)
    redirect_link: str = Field("/", max_length=500)


class NotificationBroadcastResponse(BaseModel):
    requested: int
    published: int
