"""Notification service for appointment events."""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import uuid4

import structlog

from medschedule.core.exceptions import InvalidTransitionError
from medschedule.core.record_store import NOTIFICATIONS_KEY, JsonCollection, RecordStore
from medschedule.schemas.appointments import Appointment, AppointmentStatus
from medschedule.schemas.notifications import Notification, NotificationType

logger = structlog.get_logger(__name__)

STATUS_NOTIFICATION_TYPES = {
    AppointmentStatus.CONFIRMED: NotificationType.APPOINTMENT_CONFIRMED,
    AppointmentStatus.CANCELLED: NotificationType.APPOINTMENT_CANCELLED,
}


class NotificationService:
    """Service owning the notification collection."""

    def __init__(self, store: RecordStore, key_prefix: str | None = None):
        """Initialize service with record store."""
        self.notifications = JsonCollection(
            store, NOTIFICATIONS_KEY, Notification, key_prefix=key_prefix
        )

    async def _append(self, notification: Notification) -> Notification:
        async with self.notifications.lock:
            records = await self.notifications.load()
            records.append(notification)
            await self.notifications.save(records)

        logger.info(
            "notification_created",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            notification_type=notification.type.value,
        )
        return notification

    @staticmethod
    def _build(
        recipient_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        appointment: Appointment,
    ) -> Notification:
        return Notification(
            id=uuid4().hex,
            recipient_id=recipient_id,
            type=notification_type,
            title=title,
            message=message,
            created_at=datetime.now(UTC),
            read=False,
            appointment_id=appointment.id,
        )

    async def notify_new_appointment(
        self,
        doctor_id: str,
        appointment: Appointment,
    ) -> Notification:
        """
        Notify a doctor about a newly booked appointment.

        Args:
            doctor_id: Recipient doctor ID
            appointment: Created appointment

        Returns:
            Stored notification
        """
        patient = appointment.patient_name or "A patient"
        notification = self._build(
            recipient_id=doctor_id,
            notification_type=NotificationType.APPOINTMENT_NEW,
            title="New appointment",
            message=(
                f"{patient} booked an appointment for {appointment.date} at {appointment.time}"
            ),
            appointment=appointment,
        )
        return await self._append(notification)

    async def notify_status_change(
        self,
        appointment: Appointment,
        new_status: AppointmentStatus | str,
    ) -> Notification:
        """
        Notify the patient that an appointment was confirmed or cancelled.

        Args:
            appointment: Appointment whose status changed
            new_status: Status it moved to

        Returns:
            Stored notification

        Raises:
            InvalidTransitionError: If new_status is not confirmed or cancelled
        """
        requested = getattr(new_status, "value", new_status)
        try:
            status = AppointmentStatus(new_status)
            notification_type = STATUS_NOTIFICATION_TYPES[status]
        except (ValueError, KeyError):
            raise InvalidTransitionError(
                f"No notification for status '{requested}'",
                current_status=appointment.status.value,
                target_status=requested,
            ) from None

        doctor = appointment.doctor_name or "your doctor"
        status_messages = {
            AppointmentStatus.CONFIRMED: (
                "Appointment confirmed",
                f"Your appointment with {doctor} on {appointment.date} "
                f"at {appointment.time} has been confirmed",
            ),
            AppointmentStatus.CANCELLED: (
                "Appointment cancelled",
                f"Your appointment with {doctor} on {appointment.date} "
                f"at {appointment.time} has been cancelled",
            ),
        }
        title, message = status_messages[status]

        notification = self._build(
            recipient_id=appointment.patient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            appointment=appointment,
        )
        return await self._append(notification)

    async def notify_appointment_reminder(self, appointment: Appointment) -> Notification:
        """
        Remind the patient of a confirmed appointment.

        Raises:
            InvalidTransitionError: If the appointment is not confirmed
        """
        if appointment.status != AppointmentStatus.CONFIRMED:
            raise InvalidTransitionError(
                "Reminders are only sent for confirmed appointments",
                current_status=appointment.status.value,
            )

        doctor = appointment.doctor_name or "your doctor"
        notification = self._build(
            recipient_id=appointment.patient_id,
            notification_type=NotificationType.APPOINTMENT_REMINDER,
            title="Appointment reminder",
            message=f"Reminder: appointment with {doctor} on {appointment.date} at {appointment.time}",
            appointment=appointment,
        )
        return await self._append(notification)

    async def list_for_recipient(self, recipient_id: str) -> list[Notification]:
        """List a recipient's notifications in insertion order."""
        records = await self.notifications.load()
        return [record for record in records if record.recipient_id == recipient_id]

    @staticmethod
    def sort_by_recency(notifications: Iterable[Notification]) -> list[Notification]:
        """Return notifications newest first, later insertions first on equal timestamps."""
        ranked = sorted(
            enumerate(notifications),
            key=lambda item: (item[1].created_at, item[0]),
            reverse=True,
        )
        return [record for _, record in ranked]

    async def count_unread(self, recipient_id: str) -> int:
        """Count unread notifications for a recipient."""
        records = await self.list_for_recipient(recipient_id)
        return sum(1 for record in records if not record.read)

    @staticmethod
    def _matches(record: Notification, notification_id: str, recipient_id: str | None) -> bool:
        if record.id != notification_id:
            return False
        return recipient_id is None or record.recipient_id == recipient_id

    async def mark_as_read(self, notification_id: str, recipient_id: str | None = None) -> None:
        """
        Mark a notification as read.

        Unknown or already-read IDs leave the collection untouched.

        Args:
            notification_id: Notification ID
            recipient_id: When given, only a notification addressed to this
                recipient is affected
        """
        async with self.notifications.lock:
            records = await self.notifications.load()
            for index, record in enumerate(records):
                if self._matches(record, notification_id, recipient_id):
                    if record.read:
                        return
                    records[index] = record.model_copy(update={"read": True})
                    await self.notifications.save(records)
                    logger.info("notification_marked_read", notification_id=notification_id)
                    return

        logger.debug(
            "notification_not_found",
            notification_id=notification_id,
            recipient_id=recipient_id,
        )

    async def mark_all_as_read(self, recipient_id: str) -> int:
        """
        Mark every notification addressed to a recipient as read.

        Returns:
            Number of notifications changed
        """
        async with self.notifications.lock:
            records = await self.notifications.load()
            changed = 0
            for index, record in enumerate(records):
                if record.recipient_id == recipient_id and not record.read:
                    records[index] = record.model_copy(update={"read": True})
                    changed += 1

            if changed:
                await self.notifications.save(records)

        logger.info("notifications_marked_read", recipient_id=recipient_id, count=changed)
        return changed

    async def delete(self, notification_id: str, recipient_id: str | None = None) -> bool:
        """
        Delete a notification.

        Args:
            notification_id: Notification ID
            recipient_id: When given, only a notification addressed to this
                recipient is deleted

        Returns:
            True if deleted, False if not found
        """
        async with self.notifications.lock:
            records = await self.notifications.load()
            remaining = [
                record
                for record in records
                if not self._matches(record, notification_id, recipient_id)
            ]
            if len(remaining) == len(records):
                return False
            await self.notifications.save(remaining)

        logger.info("notification_deleted", notification_id=notification_id)
        return True
