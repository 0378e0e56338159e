"""Service wiring from settings."""

from dataclasses import dataclass

from medschedule.config import Settings, settings as default_settings
from medschedule.core.record_store import (
    InMemoryRecordStore,
    RecordStore,
    RedisRecordStore,
    get_redis_client,
)
from medschedule.schemas.users import CurrentUser
from medschedule.services.appointment_service import AppointmentService
from medschedule.services.dashboard_service import (
    AdminDashboard,
    DoctorDashboard,
    NotificationsDashboard,
    PatientDashboard,
)
from medschedule.services.notification_service import NotificationService
from medschedule.services.statistics_service import StatisticsService
from medschedule.services.user_service import UserService


def get_record_store(settings: Settings | None = None) -> RecordStore:
    """Build the record store selected by STORAGE_BACKEND."""
    settings = settings or default_settings
    if settings.storage_backend == "redis":
        return RedisRecordStore(get_redis_client(settings))
    return InMemoryRecordStore()


@dataclass
class Services:
    """Services sharing one record store."""

    store: RecordStore
    users: UserService
    notifications: NotificationService
    appointments: AppointmentService
    statistics: StatisticsService

    def patient_dashboard(self, current_user: CurrentUser) -> PatientDashboard:
        return PatientDashboard(current_user, self.appointments)

    def doctor_dashboard(self, current_user: CurrentUser) -> DoctorDashboard:
        return DoctorDashboard(current_user, self.appointments)

    def admin_dashboard(self, current_user: CurrentUser) -> AdminDashboard:
        return AdminDashboard(current_user, self.appointments, self.statistics, self.users)

    def notifications_dashboard(self, current_user: CurrentUser) -> NotificationsDashboard:
        return NotificationsDashboard(current_user, self.notifications)


def build_services(
    store: RecordStore | None = None,
    settings: Settings | None = None,
) -> Services:
    """
    Wire every service onto one record store.

    Args:
        store: Record store to use, built from settings when omitted
        settings: Settings providing backend and key prefix

    Returns:
        Wired services
    """
    settings = settings or default_settings
    store = store if store is not None else get_record_store(settings)
    prefix = settings.storage_key_prefix

    users = UserService(store, key_prefix=prefix)
    notifications = NotificationService(store, key_prefix=prefix)
    appointments = AppointmentService(store, notifications, users, key_prefix=prefix)
    statistics = StatisticsService(appointments)

    return Services(
        store=store,
        users=users,
        notifications=notifications,
        appointments=appointments,
        statistics=statistics,
    )
