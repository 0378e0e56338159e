"""Statistics derived from the appointment collection."""

from collections.abc import Sequence

import structlog

from medschedule.schemas.appointments import (
    Appointment,
    AppointmentStatus,
    Statistics,
    StatusPercentages,
)
from medschedule.services.appointment_service import AppointmentService

logger = structlog.get_logger(__name__)


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return count / total * 100


def compute_statistics(appointments: Sequence[Appointment]) -> Statistics:
    """
    Compute aggregate figures for a collection of appointments.

    Args:
        appointments: Full appointment collection, left unmodified

    Returns:
        Counts per status, status percentages, distinct patients and doctors,
        and appointment counts per specialty
    """
    total = len(appointments)
    by_status = {status: 0 for status in AppointmentStatus}
    specialties: dict[str, int] = {}
    patients = set()
    doctors = set()

    for appointment in appointments:
        by_status[appointment.status] += 1
        specialties[appointment.specialty] = specialties.get(appointment.specialty, 0) + 1
        patients.add(appointment.patient_id)
        doctors.add(appointment.doctor_id)

    return Statistics(
        total_appointments=total,
        pending_appointments=by_status[AppointmentStatus.PENDING],
        confirmed_appointments=by_status[AppointmentStatus.CONFIRMED],
        cancelled_appointments=by_status[AppointmentStatus.CANCELLED],
        status_percentages=StatusPercentages(
            pending=_percentage(by_status[AppointmentStatus.PENDING], total),
            confirmed=_percentage(by_status[AppointmentStatus.CONFIRMED], total),
            cancelled=_percentage(by_status[AppointmentStatus.CANCELLED], total),
        ),
        total_patients=len(patients),
        total_doctors=len(doctors),
        specialties=specialties,
    )


def top_specialties(statistics: Statistics, limit: int = 3) -> list[tuple[str, int]]:
    """Most booked specialties, highest count first."""
    ranked = sorted(statistics.specialties.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


class StatisticsService:
    """Read-only aggregation over the appointment collection."""

    def __init__(self, appointment_service: AppointmentService):
        """Initialize service with the appointment source."""
        self.appointment_service = appointment_service

    async def get_general_statistics(self) -> Statistics:
        """Recompute statistics from the current appointment collection."""
        appointments = await self.appointment_service.list_all()
        statistics = compute_statistics(appointments)

        logger.debug(
            "statistics_computed",
            total_appointments=statistics.total_appointments,
            total_patients=statistics.total_patients,
            total_doctors=statistics.total_doctors,
        )
        return statistics
