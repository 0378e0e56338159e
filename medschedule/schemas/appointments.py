"""Appointment schemas."""

from enum import Enum

from pydantic import Field

from medschedule.schemas.base import CamelModel


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is permitted."""
        return self is not AppointmentStatus.PENDING


class AppointmentCreate(CamelModel):
    """Input for booking a new appointment."""

    doctor_id: str = ""
    date: str = ""
    time: str = ""
    doctor_name: str | None = None
    specialty: str | None = None


class Appointment(CamelModel):
    """Stored appointment record."""

    id: str
    patient_id: str
    patient_name: str = ""
    doctor_id: str
    doctor_name: str = ""
    date: str
    time: str
    specialty: str = ""
    status: AppointmentStatus = AppointmentStatus.PENDING


class StatusPercentages(CamelModel):
    """Share of each status in the appointment collection, 0-100."""

    pending: float = 0.0
    confirmed: float = 0.0
    cancelled: float = 0.0


class Statistics(CamelModel):
    """Aggregate figures derived from the appointment collection."""

    total_appointments: int = 0
    pending_appointments: int = 0
    confirmed_appointments: int = 0
    cancelled_appointments: int = 0
    status_percentages: StatusPercentages = Field(default_factory=StatusPercentages)
    total_patients: int = 0
    total_doctors: int = 0
    specialties: dict[str, int] = Field(default_factory=dict)
