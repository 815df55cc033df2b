"""SQLAlchemy models for the HouseDirect backend."""

from housedirect.models.user import Profile
from housedirect.models.agent import Agent
from housedirect.models.property import Property
from housedirect.models.verification import VerificationRequest
from housedirect.models.report import Report
from housedirect.models.lead import Lead, LeadActivity, LeadNote
from housedirect.models.message import Message
from housedirect.models.audit import AuditLog
from housedirect.models.jobs import JobsOutbox

__all__ = [
    "Profile",
    "Agent",
    "Property",
    "VerificationRequest",
    "Report",
    "Lead",
    "LeadActivity",
    "LeadNote",
    "Message",
    "AuditLog",
    "JobsOutbox",
]
