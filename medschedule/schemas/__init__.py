"""Record and value schemas."""

from medschedule.schemas.appointments import (
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    Statistics,
    StatusPercentages,
)
from medschedule.schemas.notifications import Notification, NotificationType
from medschedule.schemas.users import CurrentUser, Doctor, UserProfile, UserRole

__all__ = [
    "Appointment",
    "AppointmentCreate",
    "AppointmentStatus",
    "CurrentUser",
    "Doctor",
    "Notification",
    "NotificationType",
    "Statistics",
    "StatusPercentages",
    "UserProfile",
    "UserRole",
]
