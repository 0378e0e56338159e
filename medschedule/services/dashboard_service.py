"""Role dashboards orchestrating the appointment, notification and statistics services."""

import structlog

from medschedule.core.exceptions import ForbiddenError
from medschedule.schemas.appointments import Appointment, AppointmentStatus
from medschedule.schemas.dashboards import (
    AdminDashboardView,
    AppointmentListView,
    NotificationListView,
)
from medschedule.schemas.users import CurrentUser, UserRole
from medschedule.services.appointment_service import AppointmentService
from medschedule.services.notification_service import NotificationService
from medschedule.services.statistics_service import StatisticsService, top_specialties
from medschedule.services.user_service import UserService

logger = structlog.get_logger(__name__)


def require_role(current_user: CurrentUser, *roles: UserRole) -> CurrentUser:
    """
    Ensure current user has one of the given roles.

    Raises:
        ForbiddenError: If the role does not match
    """
    if current_user.role not in roles:
        raise ForbiddenError(
            f"{current_user.role.value.capitalize()} cannot open this dashboard",
        )
    return current_user


class PatientDashboard:
    """Patient's own appointments."""

    def __init__(self, current_user: CurrentUser, appointment_service: AppointmentService):
        """
        Initialize dashboard for a patient.

        Raises:
            ForbiddenError: If the user is not a patient
        """
        self.current_user = require_role(current_user, UserRole.PATIENT)
        self.appointment_service = appointment_service

    async def refresh(self) -> AppointmentListView:
        """Reload the patient's appointments."""
        appointments = await self.appointment_service.list_visible(self.current_user)
        return AppointmentListView(appointments=appointments)


class _StatusActionsMixin:
    current_user: CurrentUser
    appointment_service: AppointmentService

    async def confirm(self, appointment_id: str) -> Appointment:
        """Confirm a pending appointment."""
        return await self.appointment_service.update_status(
            appointment_id, AppointmentStatus.CONFIRMED, self.current_user
        )

    async def cancel(self, appointment_id: str) -> Appointment:
        """Cancel a pending appointment."""
        return await self.appointment_service.update_status(
            appointment_id, AppointmentStatus.CANCELLED, self.current_user
        )


class DoctorDashboard(_StatusActionsMixin):
    """Appointments assigned to the doctor, with confirm and cancel actions."""

    def __init__(self, current_user: CurrentUser, appointment_service: AppointmentService):
        """
        Initialize dashboard for a doctor.

        Raises:
            ForbiddenError: If the user is not a doctor
        """
        self.current_user = require_role(current_user, UserRole.DOCTOR)
        self.appointment_service = appointment_service

    async def refresh(self) -> AppointmentListView:
        """Reload appointments assigned to the doctor."""
        appointments = await self.appointment_service.list_visible(self.current_user)
        return AppointmentListView(appointments=appointments)


class AdminDashboard(_StatusActionsMixin):
    """All appointments, registered users and general statistics."""

    def __init__(
        self,
        current_user: CurrentUser,
        appointment_service: AppointmentService,
        statistics_service: StatisticsService,
        user_service: UserService,
    ):
        """
        Initialize dashboard for an admin.

        Raises:
            ForbiddenError: If the user is not an admin
        """
        self.current_user = require_role(current_user, UserRole.ADMIN)
        self.appointment_service = appointment_service
        self.statistics_service = statistics_service
        self.user_service = user_service

    async def refresh(self) -> AdminDashboardView:
        """
        Reload appointments, users and statistics.

        Returns:
            Admin dashboard snapshot
        """
        appointments = await self.appointment_service.list_visible(self.current_user)
        users = await self.user_service.list_users()
        statistics = await self.statistics_service.get_general_statistics()

        logger.debug("admin_dashboard_refreshed", appointments=len(appointments), users=len(users))
        return AdminDashboardView(
            appointments=appointments,
            users=users,
            statistics=statistics,
            top_specialties=top_specialties(statistics),
        )


class NotificationsDashboard:
    """Any user's notification inbox."""

    def __init__(self, current_user: CurrentUser, notification_service: NotificationService):
        """Initialize inbox for the current user."""
        self.current_user = current_user
        self.notification_service = notification_service

    async def refresh(self) -> NotificationListView:
        """
        Reload the inbox.

        Returns:
            Notifications newest first with the unread count
        """
        notifications = await self.notification_service.list_for_recipient(self.current_user.id)
        return NotificationListView(
            notifications=self.notification_service.sort_by_recency(notifications),
            unread_count=sum(1 for notification in notifications if not notification.read),
        )

    async def mark_as_read(self, notification_id: str) -> None:
        """Mark one of the user's notifications as read; other IDs are ignored."""
        await self.notification_service.mark_as_read(
            notification_id, recipient_id=self.current_user.id
        )

    async def mark_all_as_read(self) -> int:
        """Mark all of the user's notifications as read."""
        return await self.notification_service.mark_all_as_read(self.current_user.id)

    async def delete(self, notification_id: str) -> bool:
        """
        Delete one of the user's notifications.

        Returns:
            True if deleted, False if absent or addressed to someone else
        """
        return await self.notification_service.delete(
            notification_id, recipient_id=self.current_user.id
        )
