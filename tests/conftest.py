import asyncio

import pytest
import pytest_asyncio

from medschedule.config import Settings
from medschedule.core.exceptions import StoreError
from medschedule.core.record_store import InMemoryRecordStore, RedisRecordStore
from medschedule.dependencies import Services, build_services
from medschedule.schemas.appointments import Appointment, AppointmentCreate
from medschedule.schemas.users import CurrentUser, UserRole


class FailingRecordStore(InMemoryRecordStore):
    """In-memory store whose writes to one collection fail on demand."""

    def __init__(self, fail_suffix: str):
        super().__init__()
        self.fail_suffix = fail_suffix
        self.failing = False

    async def set(self, key: str, value: str) -> None:
        if self.failing and key.endswith(self.fail_suffix):
            raise StoreError("Storage unavailable", key=key)
        await super().set(key, value)


class YieldingRecordStore(InMemoryRecordStore):
    """In-memory store that hands control to the event loop on every call."""

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)

    async def delete(self, key: str) -> None:
        await asyncio.sleep(0)
        await super().delete(key)


class FakeRedis:
    """Minimal async Redis client over a dict, yielding on every command."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        await asyncio.sleep(0)
        self.data[key] = value
        return True

    async def delete(self, key: str) -> int:
        await asyncio.sleep(0)
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def yielding_services(app_settings: Settings) -> Services:
    """Services on a store that yields between reads and writes."""
    return build_services(store=YieldingRecordStore(), settings=app_settings)


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Shared fake Redis client."""
    return FakeRedis()


@pytest.fixture
def make_redis_services(fake_redis: FakeRedis, app_settings: Settings):
    """Build independent service containers, each with its own store on one Redis client."""

    def _make() -> Services:
        return build_services(store=RedisRecordStore(fake_redis), settings=app_settings)

    return _make


@pytest.fixture
def make_failing_services(app_settings: Settings):
    """Build services on a store whose writes to one collection can be made to fail."""

    def _make(fail_suffix: str) -> tuple[FailingRecordStore, Services]:
        store = FailingRecordStore(fail_suffix)
        return store, build_services(store=store, settings=app_settings)

    return _make


@pytest.fixture
def app_settings() -> Settings:
    """Settings pinned to the in-memory backend."""
    return Settings(STORAGE_BACKEND="memory", STORAGE_KEY_PREFIX="@MedicalApp:")


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Fresh in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def services(store: InMemoryRecordStore, app_settings: Settings) -> Services:
    """Services wired onto the in-memory store."""
    return build_services(store=store, settings=app_settings)


@pytest.fixture
def patient_user() -> CurrentUser:
    return CurrentUser(id="p1", name="Paula Patient", email="paula@example.com", role=UserRole.PATIENT)


@pytest.fixture
def other_patient_user() -> CurrentUser:
    return CurrentUser(id="p2", name="Otto Patient", email="otto@example.com", role=UserRole.PATIENT)


@pytest.fixture
def doctor_user() -> CurrentUser:
    return CurrentUser(id="1", name="Dr. João Silva", email="joao@example.com", role=UserRole.DOCTOR)


@pytest.fixture
def admin_user() -> CurrentUser:
    return CurrentUser(id="a1", name="Admin User", email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def sample_appointment_data() -> AppointmentCreate:
    """Booking with catalog doctor 1."""
    return AppointmentCreate(doctor_id="1", date="20/11/2026", time="09:00")


@pytest_asyncio.fixture
async def pending_appointment(
    services: Services,
    patient_user: CurrentUser,
    sample_appointment_data: AppointmentCreate,
) -> Appointment:
    """Appointment booked by patient p1 with doctor 1."""
    return await services.appointments.create(patient_user, sample_appointment_data)
