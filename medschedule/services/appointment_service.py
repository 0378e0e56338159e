"""Appointment service for business logic."""

from collections.abc import Iterable
from uuid import uuid4

import structlog

from medschedule.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from medschedule.core.record_store import APPOINTMENTS_KEY, JsonCollection, RecordStore
from medschedule.schemas.appointments import Appointment, AppointmentCreate, AppointmentStatus
from medschedule.schemas.users import CurrentUser, UserRole
from medschedule.services.notification_service import NotificationService
from medschedule.services.user_service import UserService

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("date", "time", "doctor_id")


def visible_appointments(
    appointments: Iterable[Appointment],
    role: UserRole | str,
    viewer_id: str,
) -> list[Appointment]:
    """
    Filter appointments down to what a viewer may see.

    Patients see their own, doctors see those assigned to them, admins see all.
    Relative order is preserved.
    """
    role = UserRole(role)
    if role == UserRole.ADMIN:
        return list(appointments)
    if role == UserRole.DOCTOR:
        return [appointment for appointment in appointments if appointment.doctor_id == viewer_id]
    return [appointment for appointment in appointments if appointment.patient_id == viewer_id]


class AppointmentService:
    """Service owning the appointment collection."""

    def __init__(
        self,
        store: RecordStore,
        notification_service: NotificationService,
        user_service: UserService | None = None,
        key_prefix: str | None = None,
    ):
        """Initialize service with record store and collaborators."""
        self.appointments = JsonCollection(
            store, APPOINTMENTS_KEY, Appointment, key_prefix=key_prefix
        )
        self.notification_service = notification_service
        self.user_service = user_service or UserService(store, key_prefix=key_prefix)

    async def create(
        self,
        current_user: CurrentUser,
        data: AppointmentCreate,
    ) -> Appointment:
        """
        Book a new appointment for the current user.

        Args:
            current_user: Patient booking the appointment
            data: Appointment creation data

        Returns:
            Created appointment, always pending

        Raises:
            ValidationError: If date, time or doctor is missing
        """
        missing = [field for field in REQUIRED_FIELDS if not getattr(data, field).strip()]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
            )

        doctor_id = data.doctor_id.strip()
        doctor = self.user_service.get_doctor(doctor_id)
        doctor_name = doctor.name if doctor else (data.doctor_name or "")
        specialty = doctor.specialty if doctor else (data.specialty or "")

        appointment = Appointment(
            id=uuid4().hex,
            patient_id=current_user.id,
            patient_name=current_user.name,
            doctor_id=doctor_id,
            doctor_name=doctor_name,
            date=data.date.strip(),
            time=data.time.strip(),
            specialty=specialty,
            status=AppointmentStatus.PENDING,
        )

        async with self.appointments.lock:
            previous = await self.appointments.raw()
            records = self.appointments.decode(previous)
            await self.appointments.save([*records, appointment])
            try:
                await self.notification_service.notify_new_appointment(doctor_id, appointment)
            except BaseException:
                # Also covers cancellation mid-write
                await self.appointments.restore(previous)
                raise

        logger.info(
            "appointment_created",
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
        )
        return appointment

    async def get(self, appointment_id: str) -> Appointment:
        """
        Get appointment by ID.

        Raises:
            NotFoundError: If appointment not found
        """
        for appointment in await self.appointments.load():
            if appointment.id == appointment_id:
                return appointment
        raise NotFoundError(f"Appointment '{appointment_id}' not found")

    async def list_all(self) -> list[Appointment]:
        """List every appointment in storage order."""
        return await self.appointments.load()

    async def refresh(self) -> list[Appointment]:
        """Re-read the stored collection."""
        return await self.list_all()

    async def list_for_patient(self, patient_id: str) -> list[Appointment]:
        """List a patient's appointments in storage order."""
        return visible_appointments(await self.list_all(), UserRole.PATIENT, patient_id)

    async def list_for_doctor(self, doctor_id: str) -> list[Appointment]:
        """List appointments assigned to a doctor in storage order."""
        return visible_appointments(await self.list_all(), UserRole.DOCTOR, doctor_id)

    async def list_visible(self, current_user: CurrentUser) -> list[Appointment]:
        """List the appointments visible to the current user's role."""
        return visible_appointments(await self.list_all(), current_user.role, current_user.id)

    async def update_status(
        self,
        appointment_id: str,
        new_status: AppointmentStatus | str,
        actor: CurrentUser,
    ) -> Appointment:
        """
        Confirm or cancel a pending appointment.

        Args:
            appointment_id: Appointment ID
            new_status: Target status, confirmed or cancelled
            actor: User performing the change

        Returns:
            Updated appointment

        Raises:
            NotFoundError: If appointment not found
            InvalidTransitionError: If the appointment is not pending or the
                target status is not confirmed or cancelled
        """
        async with self.appointments.lock:
            previous = await self.appointments.raw()
            records = self.appointments.decode(previous)
            index = next(
                (i for i, record in enumerate(records) if record.id == appointment_id),
                None,
            )
            if index is None:
                raise NotFoundError(f"Appointment '{appointment_id}' not found")

            current = records[index]
            requested = getattr(new_status, "value", new_status)
            try:
                target = AppointmentStatus(new_status)
            except ValueError:
                target = None

            if target is None or not target.is_terminal:
                raise InvalidTransitionError(
                    f"Cannot change status to '{requested}'",
                    current_status=current.status.value,
                    target_status=requested,
                )
            if current.status.is_terminal:
                raise InvalidTransitionError(
                    f"Appointment is already {current.status.value}",
                    current_status=current.status.value,
                    target_status=target.value,
                )

            updated = current.model_copy(update={"status": target})
            await self.appointments.save([*records[:index], updated, *records[index + 1 :]])
            try:
                await self.notification_service.notify_status_change(updated, target)
            except BaseException:
                await self.appointments.restore(previous)
                raise

        logger.info(
            "appointment_status_updated",
            appointment_id=appointment_id,
            old_status=current.status.value,
            new_status=target.value,
            actor_id=actor.id,
            actor_role=actor.role.value,
        )
        return updated
