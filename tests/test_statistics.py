"""Tests for statistics aggregation."""

import pytest

from medschedule.schemas.appointments import Appointment, AppointmentCreate, AppointmentStatus
from medschedule.services.statistics_service import compute_statistics, top_specialties


def make_appointment(
    appointment_id: str,
    status: AppointmentStatus = AppointmentStatus.PENDING,
    patient_id: str = "p1",
    doctor_id: str = "d1",
    specialty: str = "Cardiologia",
) -> Appointment:
    return Appointment(
        id=appointment_id,
        patient_id=patient_id,
        doctor_id=doctor_id,
        date="20/11/2026",
        time="09:00",
        specialty=specialty,
        status=status,
    )


def test_empty_collection() -> None:
    """Test an empty collection yields zeros rather than NaN."""
    statistics = compute_statistics([])

    assert statistics.total_appointments == 0
    assert statistics.status_percentages.pending == 0
    assert statistics.status_percentages.confirmed == 0
    assert statistics.status_percentages.cancelled == 0
    assert statistics.total_patients == 0
    assert statistics.total_doctors == 0
    assert statistics.specialties == {}


def test_status_counts_and_percentages() -> None:
    """Test counts and percentages per status."""
    appointments = [
        make_appointment("1", AppointmentStatus.CONFIRMED),
        make_appointment("2", AppointmentStatus.CANCELLED),
        make_appointment("3"),
        make_appointment("4"),
    ]

    statistics = compute_statistics(appointments)

    assert statistics.total_appointments == 4
    assert statistics.confirmed_appointments == 1
    assert statistics.cancelled_appointments == 1
    assert statistics.pending_appointments == 2
    assert statistics.status_percentages.confirmed == 25.0
    assert statistics.status_percentages.cancelled == 25.0
    assert statistics.status_percentages.pending == 50.0


def test_distinct_participants_and_specialties() -> None:
    """Test distinct patient and doctor counts and specialty grouping."""
    appointments = [
        make_appointment("1", patient_id="p1", doctor_id="d1", specialty="Cardiologia"),
        make_appointment("2", patient_id="p2", doctor_id="d1", specialty="Cardiologia"),
        make_appointment("3", patient_id="p1", doctor_id="d2", specialty="Pediatria"),
    ]
    snapshot = [appointment.model_copy() for appointment in appointments]

    statistics = compute_statistics(appointments)

    assert statistics.total_patients == 2
    assert statistics.total_doctors == 2
    assert statistics.specialties == {"Cardiologia": 2, "Pediatria": 1}
    assert appointments == snapshot


def test_top_specialties() -> None:
    """Test specialties rank by count, then name."""
    appointments = [
        make_appointment("1", specialty="Pediatria"),
        make_appointment("2", specialty="Ortopedia"),
        make_appointment("3", specialty="Ortopedia"),
        make_appointment("4", specialty="Cardiologia"),
        make_appointment("5", specialty="Dermatologia"),
    ]

    statistics = compute_statistics(appointments)

    assert top_specialties(statistics) == [
        ("Ortopedia", 2),
        ("Cardiologia", 1),
        ("Dermatologia", 1),
    ]
    assert top_specialties(statistics, limit=1) == [("Ortopedia", 2)]


@pytest.mark.asyncio
async def test_general_statistics_follow_collection(services, patient_user, admin_user) -> None:
    """Test statistics are recomputed from the stored collection on each call."""
    assert (await services.statistics.get_general_statistics()).total_appointments == 0

    first = await services.appointments.create(
        patient_user, AppointmentCreate(doctor_id="1", date="20/11/2026", time="09:00")
    )
    await services.appointments.create(
        patient_user, AppointmentCreate(doctor_id="2", date="21/11/2026", time="10:00")
    )
    await services.appointments.update_status(first.id, "confirmed", admin_user)

    statistics = await services.statistics.get_general_statistics()

    assert statistics.total_appointments == 2
    assert statistics.confirmed_appointments == 1
    assert statistics.status_percentages.confirmed == 50.0
    assert statistics.total_patients == 1
    assert statistics.total_doctors == 2
    assert statistics.specialties == {"Cardiologia": 1, "Pediatria": 1}
