"""Enumeration types for the HouseDirect domain model."""

from enum import Enum

from sqlalchemy import Enum as SQLEnum


def db_enum(enum_cls: type[Enum]) -> SQLEnum:
    """Column type storing enum *values* (lowercase strings) rather than names."""
    return SQLEnum(
        enum_cls,
        name=enum_cls.__name__.lower(),
        values_callable=lambda members: [m.value for m in members],
    )


class UserType(str, Enum):
    """Role of a profile on the marketplace."""
    BUYER = "buyer"
    SELLER = "seller"
    AGENT = "agent"
    ADMIN = "admin"


class EntityVerificationStatus(str, Enum):
    """verification_status carried by agents and properties."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class VerificationEntityType(str, Enum):
    """What a verification request is about."""
    AGENT = "agent"
    PROPERTY = "property"


class VerificationStatus(str, Enum):
    """Status of a submitted verification document."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportEntityType(str, Enum):
    """What a user report (dispute) targets."""
    PROPERTY = "property"
    AGENT = "agent"
    USER = "user"


class ReportStatus(str, Enum):
    """Admin review status of a report."""
    NEW = "new"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class LeadStatus(str, Enum):
    """Sales pipeline stage of a lead."""
    NEW = "new"
    CONTACTED = "contacted"
    VIEWING_SCHEDULED = "viewing_scheduled"
    VIEWING_COMPLETED = "viewing_completed"
    OFFER_MADE = "offer_made"
    NEGOTIATING = "negotiating"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"
    NURTURING = "nurturing"


class LeadPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class LeadInterestType(str, Enum):
    BUY = "buy"
    RENT = "rent"
    LEASE = "lease"
    SELL = "sell"


class LeadSource(str, Enum):
    """How the lead reached the agent."""
    PROPERTY_INQUIRY = "property_inquiry"
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL_MEDIA = "social_media"
    WALK_IN = "walk_in"
    PHONE = "phone"
    OTHER = "other"


class LeadActivityType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    VIEWING = "viewing"
    MESSAGE = "message"
    NOTE = "note"
    OFFER = "offer"
    CONTRACT = "contract"
    OTHER = "other"


class LeadActivityStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    VERIFICATION_SUBMITTED = "verification_submitted"
    VERIFICATION_APPROVED = "verification_approved"
    VERIFICATION_REJECTED = "verification_rejected"
    REPORT_CREATED = "report_created"
    REPORT_STATUS_CHANGED = "report_status_changed"
    USER_UPDATED = "user_updated"
    ADMIN_MESSAGE_EMAILED = "admin_message_emailed"


class JobStatus(str, Enum):
    """Status of async job in outbox."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"
