"""User directory and doctor catalog."""

import structlog

from medschedule.core.record_store import USERS_KEY, JsonCollection, RecordStore
from medschedule.schemas.users import Doctor, UserProfile, UserRole

logger = structlog.get_logger(__name__)

# Doctors available for booking
DOCTOR_CATALOG: tuple[Doctor, ...] = (
    Doctor(
        id="1",
        name="Dr. João Silva",
        specialty="Cardiologia",
        image="https://randomuser.me/api/portraits/men/1.jpg",
    ),
    Doctor(
        id="2",
        name="Dra. Maria Santos",
        specialty="Pediatria",
        image="https://randomuser.me/api/portraits/women/1.jpg",
    ),
    Doctor(
        id="3",
        name="Dr. Pedro Oliveira",
        specialty="Ortopedia",
        image="https://randomuser.me/api/portraits/men/2.jpg",
    ),
    Doctor(
        id="4",
        name="Dra. Ana Costa",
        specialty="Dermatologia",
        image="https://randomuser.me/api/portraits/women/2.jpg",
    ),
    Doctor(
        id="5",
        name="Dr. Carlos Mendes",
        specialty="Oftalmologia",
        image="https://randomuser.me/api/portraits/men/3.jpg",
    ),
)


class UserService:
    """Read-only access to user profiles and the doctor catalog."""

    def __init__(
        self,
        store: RecordStore,
        doctors: tuple[Doctor, ...] = DOCTOR_CATALOG,
        key_prefix: str | None = None,
    ):
        """Initialize service with record store and doctor catalog."""
        self.users = JsonCollection(store, USERS_KEY, UserProfile, key_prefix=key_prefix)
        self.doctors = doctors

    def list_doctors(self) -> list[Doctor]:
        """List bookable doctors."""
        return list(self.doctors)

    def get_doctor(self, doctor_id: str) -> Doctor | None:
        """Get catalog doctor by ID, or None when unknown."""
        for doctor in self.doctors:
            if doctor.id == doctor_id:
                return doctor
        return None

    async def list_users(self, role: UserRole | None = None) -> list[UserProfile]:
        """
        List stored user profiles.

        Args:
            role: Optional role filter

        Returns:
            Profiles in storage order
        """
        profiles = await self.users.load()
        if role is not None:
            profiles = [profile for profile in profiles if profile.role == role]

        logger.debug("users_listed", role=role.value if role else None, count=len(profiles))
        return profiles
