"""User and doctor schemas."""

from enum import Enum

from pydantic import ConfigDict, Field

from medschedule.schemas.base import CamelModel


class UserRole(str, Enum):
    """User role enumeration."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class CurrentUser(CamelModel):
    """Authenticated user handed in by the auth collaborator."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    email: str = ""
    role: UserRole


class UserProfile(CamelModel):
    """User profile record stored under the users key."""

    id: str
    name: str
    email: str
    role: UserRole
    specialty: str | None = None
    image: str | None = None


class Doctor(CamelModel):
    """Doctor entry of the static booking catalog."""

    id: str
    name: str
    specialty: str
    image: str | None = None
