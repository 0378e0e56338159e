"""Per-role dashboard snapshots."""

from pydantic import Field

from medschedule.schemas.appointments import Appointment, Statistics
from medschedule.schemas.base import CamelModel
from medschedule.schemas.notifications import Notification
from medschedule.schemas.users import UserProfile


class AppointmentListView(CamelModel):
    """Appointments visible to a patient or doctor."""

    appointments: list[Appointment]


class AdminDashboardView(CamelModel):
    """Everything the admin dashboard renders."""

    appointments: list[Appointment]
    users: list[UserProfile]
    statistics: Statistics
    top_specialties: list[tuple[str, int]] = Field(default_factory=list)


class NotificationListView(CamelModel):
    """A recipient's notifications, newest first."""

    notifications: list[Notification]
    unread_count: int
