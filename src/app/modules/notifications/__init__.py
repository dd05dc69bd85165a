"""Notifications module - event stream producer, consumer and read API."""

from app.modules.notifications.models import Notification
from app.modules.notifications.producer import notify_users, send_notification_event
from app.modules.notifications.schemas import NotificationEvent

__all__ = ["Notification", "NotificationEvent", "notify_users", "send_notification_event"]
