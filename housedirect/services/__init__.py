"""Services for the HouseDirect backend."""

from housedirect.services.audit import AuditService
from housedirect.services.jobs import JobsService
from housedirect.services.notifications import (
    DeliveryResult,
    EmailService,
    NotificationDispatcher,
    get_email_service,
)
from housedirect.services.verification import VerificationService
from housedirect.services.reports import ReportService
from housedirect.services.leads import LeadService
from housedirect.services.reminders import VerificationReminderService
from housedirect.services.users import UserAdminService
from housedirect.services.messages import AdminMessageService

__all__ = [
    "AuditService",
    "JobsService",
    "DeliveryResult",
    "EmailService",
    "NotificationDispatcher",
    "get_email_service",
    "VerificationService",
    "ReportService",
    "LeadService",
    "VerificationReminderService",
    "UserAdminService",
    "AdminMessageService",
]
