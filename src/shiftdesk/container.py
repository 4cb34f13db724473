from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.postgres_absence_repository import PostgresAbsenceRepository
from .absences.service import AbsenceService
from .auth.controller import Guards
from .auth.gateway import HostedAuthGateway
from .auth.service import IdentityService
from .checkins.factory import CheckinWindowFactory
from .checkins.postgres_checkin_repository import PostgresCheckinRepository
from .checkins.service import CheckinService
from .database.connection import DBConfig, DatabaseConnection
from .hours.calculator.standard_calculator import StandardHoursCalculator
from .hours.postgres_attestation_repository import PostgresAttestationRepository
from .hours.service import MonthlyHoursService
from .leaves.postgres_leave_repository import PostgresLeaveBalanceRepository, PostgresLeaveRepository
from .leaves.service import LeaveBalanceService, LeaveService
from .notifications.postgres_push_repository import PostgresPushSubscriptionRepository
from .notifications.sender import WebPushSender
from .notifications.service import NotificationService
from .replacements.postgres_replacement_repository import PostgresReplacementRepository
from .replacements.service import ReplacementService
from .shifts.postgres_shift_repository import PostgresShiftRepository
from .shifts.service import ShiftPlannerService
from .team.service import TeamEventsService
from .users.postgres_profile_repository import PostgresProfileRepository
from .users.service import SellerAdminService, SupervisorAdminService


@dataclass(frozen=True)
class Container:
    guards: Guards

    identity_service: IdentityService
    seller_admin_service: SellerAdminService
    supervisor_admin_service: SupervisorAdminService
    shift_planner_service: ShiftPlannerService
    absence_service: AbsenceService
    replacement_service: ReplacementService
    leave_service: LeaveService
    leave_balance_service: LeaveBalanceService
    team_events_service: TeamEventsService
    checkin_service: CheckinService
    monthly_hours_service: MonthlyHoursService
    notification_service: NotificationService


def assemble(
    *,
    gateway,
    profiles,
    shifts,
    absences,
    replacements,
    leaves,
    balances,
    checkins,
    attestations,
    push_subscriptions,
    push_sender=None,
    admin_emails=(),
    checkin_secret: str = "",
    cron_secret: str = "",
    vapid_public_key: str = "",
) -> Container:
    """Wire services on top of already-built repositories (Postgres or in-memory)."""
    calculator = StandardHoursCalculator()
    identity_service = IdentityService(gateway, profiles, admin_emails=admin_emails)
    notification_service = NotificationService(push_subscriptions, push_sender, public_key=vapid_public_key)

    return Container(
        guards=Guards(identity_service),
        identity_service=identity_service,
        seller_admin_service=SellerAdminService(profiles, gateway),
        supervisor_admin_service=SupervisorAdminService(profiles, gateway),
        shift_planner_service=ShiftPlannerService(shifts, profiles, absences, checkins, calculator),
        absence_service=AbsenceService(absences, replacements, profiles, notification_service),
        replacement_service=ReplacementService(replacements, absences, shifts, profiles),
        leave_service=LeaveService(leaves, profiles, notification_service),
        leave_balance_service=LeaveBalanceService(balances, leaves, profiles),
        team_events_service=TeamEventsService(absences, leaves, profiles),
        checkin_service=CheckinService(
            checkins,
            shifts,
            absences,
            leaves,
            profiles,
            gateway,
            window_factory=CheckinWindowFactory(),
            secret=checkin_secret,
        ),
        monthly_hours_service=MonthlyHoursService(
            attestations, shifts, profiles, calculator=calculator, cron_secret=cron_secret
        ),
        notification_service=notification_service,
    )


def build_container(*, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    gateway = HostedAuthGateway(
        getattr(settings, "AUTH_URL"),
        getattr(settings, "AUTH_ANON_KEY"),
        getattr(settings, "AUTH_SERVICE_KEY"),
        timeout=float(getattr(settings, "AUTH_TIMEOUT", 10)),
    )

    private_key = getattr(settings, "VAPID_PRIVATE_KEY", "")
    public_key = getattr(settings, "VAPID_PUBLIC_KEY", "")
    push_sender: Optional[WebPushSender] = None
    if private_key and public_key:
        push_sender = WebPushSender(private_key=private_key, subject=getattr(settings, "VAPID_SUBJECT"))

    return assemble(
        gateway=gateway,
        profiles=PostgresProfileRepository(conn),
        shifts=PostgresShiftRepository(conn),
        absences=PostgresAbsenceRepository(conn),
        replacements=PostgresReplacementRepository(conn),
        leaves=PostgresLeaveRepository(conn),
        balances=PostgresLeaveBalanceRepository(conn),
        checkins=PostgresCheckinRepository(conn),
        attestations=PostgresAttestationRepository(conn),
        push_subscriptions=PostgresPushSubscriptionRepository(conn),
        push_sender=push_sender,
        admin_emails=getattr(settings, "ADMIN_EMAILS", []),
        checkin_secret=getattr(settings, "CHECKIN_CODE_SECRET", ""),
        cron_secret=getattr(settings, "CRON_SECRET", ""),
        vapid_public_key=public_key,
    )
