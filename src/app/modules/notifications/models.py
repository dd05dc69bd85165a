"""
Notification Models

In-app notifications, written by the notification consumer from events on
the notification stream.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class Notification(BaseModel):
    """
    A notification addressed to one user.

    ``read`` only ever goes from False to True.
    """

    __tablename__ = "notifications"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    redirect_link: Mapped[str] = mapped_column(String(500), nullable=False, default="/")
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, read={self.read})>"
