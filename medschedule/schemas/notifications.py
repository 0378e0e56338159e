"""Notification schemas."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import Field

from medschedule.schemas.base import CamelModel


class NotificationType(str, Enum):
    """Notification type enumeration."""

    APPOINTMENT_NEW = "appointment_new"
    APPOINTMENT_CONFIRMED = "appointment_confirmed"
    APPOINTMENT_CANCELLED = "appointment_cancelled"
    APPOINTMENT_REMINDER = "appointment_reminder"


class Notification(CamelModel):
    """Stored notification record."""

    id: str
    recipient_id: str
    type: NotificationType
    title: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    read: bool = False
    appointment_id: str | None = None
