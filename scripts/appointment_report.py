#!/usr/bin/env python3
"""
Print appointment statistics from the configured record store.

Usage:
    python scripts/appointment_report.py
    python scripts/appointment_report.py --user-id 1 --role doctor

Environment Variables:
    STORAGE_BACKEND: memory or redis (default: memory)
    STORAGE_KEY_PREFIX: Key namespace (default: @MedicalApp:)
    REDIS_HOST / REDIS_PORT: Redis connection when STORAGE_BACKEND=redis
"""

import argparse
import asyncio
import json
import sys

import dotenv

dotenv.load_dotenv()

from medschedule.config import get_settings  # noqa: E402
from medschedule.core.exceptions import StoreError  # noqa: E402
from medschedule.core.logging import configure_logging  # noqa: E402
from medschedule.core.record_store import close_redis_connection  # noqa: E402
from medschedule.dependencies import build_services  # noqa: E402
from medschedule.schemas.users import CurrentUser, UserRole  # noqa: E402
from medschedule.services.statistics_service import top_specialties  # noqa: E402


async def build_report(user_id: str | None, role: str | None, limit: int) -> dict:
    """Collect statistics and, when a viewer is given, their visible appointments."""
    services = build_services(settings=get_settings())
    try:
        statistics = await services.statistics.get_general_statistics()
        report = {
            "statistics": statistics.model_dump(mode="json", by_alias=True),
            "topSpecialties": top_specialties(statistics, limit=limit),
        }

        if user_id and role:
            viewer = CurrentUser(id=user_id, role=UserRole(role))
            appointments = await services.appointments.list_visible(viewer)
            report["appointments"] = [
                appointment.model_dump(mode="json", by_alias=True) for appointment in appointments
            ]

        return report
    finally:
        await close_redis_connection()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print appointment statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # General statistics
  python appointment_report.py

  # Appointments visible to doctor 1
  python appointment_report.py --user-id 1 --role doctor

  # Against Redis
  export STORAGE_BACKEND=redis
  python appointment_report.py --top 5
        """,
    )

    parser.add_argument("--user-id", type=str, help="Viewer ID for the role-scoped listing")
    parser.add_argument(
        "--role",
        type=str,
        choices=[role.value for role in UserRole],
        help="Viewer role for the role-scoped listing",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=3,
        help="Number of specialties to rank (default: 3)",
    )

    args = parser.parse_args()

    if bool(args.user_id) != bool(args.role):
        parser.error("--user-id and --role must be given together")

    configure_logging()

    try:
        report = asyncio.run(build_report(args.user_id, args.role, args.top))
    except StoreError as e:
        print(f"Store Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(report, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
