from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .activities.file_activity_repository import FileActivityRepository
from .activities.mongo_activity_repository import MongoActivityRepository
from .activities.repository import ActivityRepository
from .activities.service import ActivityService
from .attendance.file_attendance_repository import FileAttendanceRepository
from .attendance.mongo_attendance_repository import MongoAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.file_store import JsonFileStore
from .database.mongo import MongoConfig, MongoConnection
from .enrollments.file_enrollment_repository import FileEnrollmentRepository
from .enrollments.mongo_enrollment_repository import MongoEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import EnrollmentService
from .notifications.log_notifier import LogNotifier
from .notifications.notifier import Notifier
from .notifications.smtp_notifier import SmtpConfig, SmtpNotifier
from .panel.service import PanelService
from .registrations.file_registration_repository import FileRegistrationRepository
from .registrations.mongo_registration_repository import MongoRegistrationRepository
from .registrations.repository import RegistrationRepository
from .registrations.service import RegistrationService
from .reports.file_report_repository import FileImpactReportRepository
from .reports.mongo_report_repository import MongoImpactReportRepository
from .reports.repository import ImpactReportRepository
from .reports.service import ImpactReportService
from .scoring.service import ScoringService
from .users.file_user_repository import FileUserRepository
from .users.guards import Guards
from .users.mongo_user_repository import MongoUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("mongo", "file")


@dataclass(frozen=True)
class Container:
    backend: str
    mongo: Optional[MongoConnection]
    notifier: Notifier

    users_repo: UserRepository
    activities_repo: ActivityRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    reports_repo: ImpactReportRepository
    registrations_repo: RegistrationRepository

    guards: Guards
    auth_service: AuthService
    user_service: UserService
    activity_service: ActivityService
    enrollment_service: EnrollmentService
    attendance_service: AttendanceService
    scoring_service: ScoringService
    report_service: ImpactReportService
    registration_service: RegistrationService
    panel_service: PanelService


def build_notifier(settings: dict[str, Any]) -> Notifier:
    host = settings.get("SMTP_HOST") or ""
    if not host or not settings.get("SMTP_USER") or not settings.get("SMTP_PASS"):
        logger.warning("Email service not configured. Notifications will be skipped.")
        return LogNotifier()
    return SmtpNotifier(
        SmtpConfig(
            host=str(host),
            port=int(settings.get("SMTP_PORT") or 587),
            user=str(settings["SMTP_USER"]),
            password=str(settings["SMTP_PASS"]),
            sender=str(settings.get("SMTP_FROM") or "noreply@ulsconnect.dev"),
            admin_email=str(settings.get("ADMIN_EMAIL") or "admin@ulsconnect.dev"),
            app_url=str(settings.get("APP_URL") or "http://localhost:3000"),
        )
    )


def build_container(
    *,
    settings: dict[str, Any],
    mongo: Optional[MongoConnection] = None,
    notifier: Optional[Notifier] = None,
) -> Container:
    """Wire repositories and services for the configured storage backend.

    The backend is chosen once here; services only see repository protocols.
    """

    backend = str(settings.get("STORAGE_BACKEND") or "file").lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; use one of {STORAGE_BACKENDS}")

    if backend == "mongo":
        mongo = mongo or MongoConnection(
            MongoConfig(uri=str(settings["MONGO_URI"]), database=str(settings["MONGO_DB"]))
        )
        users_repo = MongoUserRepository(mongo)
        activities_repo = MongoActivityRepository(mongo)
        enrollments_repo = MongoEnrollmentRepository(mongo)
        attendance_repo = MongoAttendanceRepository(mongo)
        reports_repo = MongoImpactReportRepository(mongo)
        registrations_repo = MongoRegistrationRepository(mongo)
    else:
        store = JsonFileStore(settings["DATA_FILE"])
        users_repo = FileUserRepository(store)
        activities_repo = FileActivityRepository(store)
        enrollments_repo = FileEnrollmentRepository(store)
        attendance_repo = FileAttendanceRepository(store)
        reports_repo = FileImpactReportRepository(store)
        registrations_repo = FileRegistrationRepository(store)
    logger.info("storage backend: %s", backend)

    notifier = notifier or build_notifier(settings)

    user_service = UserService(users_repo)
    report_service = ImpactReportService(reports_repo, activities_repo, enrollments_repo, attendance_repo, users_repo)

    return Container(
        backend=backend,
        mongo=mongo if backend == "mongo" else None,
        notifier=notifier,
        users_repo=users_repo,
        activities_repo=activities_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        reports_repo=reports_repo,
        registrations_repo=registrations_repo,
        guards=Guards(users_repo),
        auth_service=AuthService(users_repo),
        user_service=user_service,
        activity_service=ActivityService(activities_repo, enrollments_repo, attendance_repo),
        enrollment_service=EnrollmentService(enrollments_repo, activities_repo, users_repo, notifier),
        attendance_service=AttendanceService(attendance_repo, enrollments_repo, activities_repo),
        scoring_service=ScoringService(users_repo, attendance_repo),
        report_service=report_service,
        registration_service=RegistrationService(registrations_repo, users_repo, user_service, notifier),
        panel_service=PanelService(
            activities_repo,
            enrollments_repo,
            attendance_repo,
            users_repo,
            report_service,
        ),
    )
