"""Tests for verification submission and admin decisions."""

import uuid

import pytest
from sqlalchemy import event, func, select

from housedirect.core.errors import (
    EntityMissingError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from housedirect.models import Agent, AuditLog, JobsOutbox, Profile, VerificationRequest
from housedirect.models.enums import (
    AuditAction,
    EntityVerificationStatus,
    JobStatus,
    UserType,
    VerificationEntityType,
    VerificationStatus,
)
from housedirect.services.entity_ref import AgentRef, PropertyRef
from housedirect.services.verification import VerificationService
from tests.utils.factories import (
    create_admin,
    create_agent,
    create_profile,
    create_property,
    create_verification,
)


async def _count(db, model, *criteria) -> int:
    return await db.scalar(select(func.count()).select_from(model).where(*criteria))


@pytest.mark.unit
async def test_approve_agent_marks_agent_verified_and_emails_owner(db, email_service):
    """Approving sets both statuses, records the reviewer and sends one email."""
    admin = await create_admin(db)
    agent = await create_agent(db)
    verification = await create_verification(db, agent)

    outcome = await VerificationService(db, email_service).approve(
        verification.id, admin.id, "Licence checked"
    )

    assert outcome.email_sent is True
    assert outcome.verification.status == VerificationStatus.APPROVED
    assert outcome.verification.reviewed_by == admin.id
    assert outcome.verification.reviewed_at is not None
    assert outcome.verification.reviewer.full_name == "Ada Admin"

    await db.refresh(agent)
    assert agent.verification_status == EntityVerificationStatus.VERIFIED

    assert len(email_service.sent) == 1
    owner_email = (await db.get(Profile, agent.user_id)).email
    assert email_service.sent[0]["to"] == owner_email
    assert email_service.sent[0]["subject"] == "Verification Approved - Agent Account"

    audit = (
        await db.execute(select(AuditLog).where(AuditLog.resource_id == verification.id))
    ).scalar_one()
    assert audit.action == AuditAction.VERIFICATION_APPROVED
    assert audit.user_id == admin.id

    job = (
        await db.execute(
            select(JobsOutbox).where(
                JobsOutbox.unique_scope == f"notify:verification:{verification.id}:approved"
            )
        )
    ).scalar_one()
    assert job.status == JobStatus.COMPLETED
    assert job.attempts == 1


@pytest.mark.unit
async def test_reject_property_with_reason(db, email_service):
    """Rejecting a listing stores the reason and emails it to the listing owner."""
    admin = await create_admin(db)
    seller = await create_profile(db, UserType.SELLER)
    listing = await create_property(db, owner=seller)
    verification = await create_verification(db, listing)

    outcome = await VerificationService(db, email_service).reject(
        verification.id, admin.id, "Expired ID document"
    )

    assert outcome.verification.status == VerificationStatus.REJECTED
    assert outcome.verification.review_notes == "Expired ID document"
    await db.refresh(listing)
    assert listing.verification_status == EntityVerificationStatus.REJECTED

    assert len(email_service.sent) == 1
    sent = email_service.sent[0]
    assert sent["to"] == seller.email
    assert sent["subject"] == "Verification Rejected - Property Listing"
    assert "Expired ID document" in sent["html"]


@pytest.mark.unit
async def test_second_decision_is_rejected_and_keeps_first(db, email_service):
    """A decided request cannot be decided again; the first decision stands."""
    admin = await create_admin(db)
    other_admin = await create_admin(db, full_name="Second Admin")
    agent = await create_agent(db)
    verification = await create_verification(db, agent)
    service = VerificationService(db, email_service)

    await service.approve(verification.id, admin.id, "Looks good")
    admin_id = admin.id

    with pytest.raises(InvalidTransitionError) as exc_info:
        await service.reject(verification.id, other_admin.id, "Changed my mind entirely")

    assert exc_info.value.extra == {
        "current_status": "approved",
        "requested_status": "rejected",
    }
    await db.refresh(verification)
    await db.refresh(agent)
    assert verification.status == VerificationStatus.APPROVED
    assert verification.reviewed_by == admin_id
    assert verification.review_notes == "Looks good"
    assert agent.verification_status == EntityVerificationStatus.VERIFIED
    assert len(email_service.sent) == 1


@pytest.mark.unit
async def test_decision_on_unknown_request(db, email_service):
    admin = await create_admin(db)

    with pytest.raises(NotFoundError):
        await VerificationService(db, email_service).approve(uuid.uuid4(), admin.id)


@pytest.mark.unit
async def test_decision_when_entity_was_deleted(db, email_service):
    """A request whose agent is gone is refused and nothing is written."""
    admin = await create_admin(db)
    verification = VerificationRequest(
        entity_type=VerificationEntityType.AGENT,
        entity_id=uuid.uuid4(),
        document_type="government_id",
        document_url="https://files.housedirect.test/id.png",
        status=VerificationStatus.PENDING,
    )
    db.add(verification)
    await db.commit()

    with pytest.raises(EntityMissingError) as exc_info:
        await VerificationService(db, email_service).approve(verification.id, admin.id)

    assert exc_info.value.status_code == 409
    assert exc_info.value.extra["entity_type"] == "agent"
    await db.refresh(verification)
    assert verification.status == VerificationStatus.PENDING
    assert verification.reviewed_by is None
    assert await _count(db, JobsOutbox) == 0
    assert await _count(db, AuditLog) == 0
    assert email_service.sent == []


@pytest.mark.unit
async def test_failed_entity_update_leaves_nothing_behind(db, email_service):
    """If writing the agent fails, the request stays pending and no job or audit row exists."""
    admin = await create_admin(db)
    agent = await create_agent(db)
    verification = await create_verification(db, agent)

    def fail_agent_write(session, flush_context, instances):
        if any(isinstance(obj, Agent) for obj in session.dirty):
            raise RuntimeError("agents table is read-only")

    event.listen(db.sync_session, "before_flush", fail_agent_write)
    try:
        with pytest.raises(RuntimeError):
            await VerificationService(db, email_service).approve(verification.id, admin.id)
    finally:
        event.remove(db.sync_session, "before_flush", fail_agent_write)

    await db.refresh(verification)
    await db.refresh(agent)
    assert verification.status == VerificationStatus.PENDING
    assert verification.reviewed_by is None
    assert agent.verification_status == EntityVerificationStatus.PENDING
    assert await _count(db, JobsOutbox) == 0
    assert await _count(db, AuditLog) == 0
    assert email_service.sent == []


@pytest.mark.unit
async def test_email_failure_does_not_undo_decision(db, email_service):
    """The decision commits even when SMTP fails; the job stays queued with the error."""
    admin = await create_admin(db)
    agent = await create_agent(db)
    verification = await create_verification(db, agent)
    email_service.fail_with("535 Authentication failed")

    outcome = await VerificationService(db, email_service).approve(verification.id, admin.id)

    assert outcome.email_sent is False
    assert outcome.verification.status == VerificationStatus.APPROVED
    await db.refresh(agent)
    assert agent.verification_status == EntityVerificationStatus.VERIFIED

    job = (await db.execute(select(JobsOutbox))).scalar_one()
    assert job.status == JobStatus.PENDING
    assert job.attempts == 1
    assert job.last_error == "535 Authentication failed"


@pytest.mark.unit
async def test_submit_for_own_listing(db, email_service):
    seller = await create_profile(db, UserType.SELLER)
    listing = await create_property(db, owner=seller)

    outcome = await VerificationService(db, email_service).submit(
        PropertyRef(listing.id), "title_deed", "https://files.housedirect.test/deed.pdf", seller.id
    )

    assert outcome.verification.status == VerificationStatus.PENDING
    assert outcome.verification.entity_type == VerificationEntityType.PROPERTY
    assert outcome.verification.submitted_by == seller.id
    assert outcome.email_sent is True
    assert email_service.sent[0]["subject"] == "Document Submitted for Verification"
    assert await _count(
        db, AuditLog, AuditLog.action == AuditAction.VERIFICATION_SUBMITTED
    ) == 1


@pytest.mark.unit
async def test_submit_for_someone_elses_agent_account(db, email_service):
    agent = await create_agent(db)
    intruder = await create_profile(db, UserType.AGENT)

    with pytest.raises(ForbiddenError):
        await VerificationService(db, email_service).submit(
            AgentRef(agent.id), "licence", "https://files.housedirect.test/l.pdf", intruder.id
        )

    assert await _count(db, VerificationRequest) == 0


@pytest.mark.unit
async def test_list_requests_filters_by_status(db, email_service):
    admin = await create_admin(db)
    pending = await create_verification(db, await create_agent(db))
    decided = await create_verification(db, await create_agent(db))
    service = VerificationService(db, email_service)
    await service.approve(decided.id, admin.id)

    assert [v.id for v in await service.list_pending()] == [pending.id]
    assert {v.id for v in await service.list_requests("all")} == {pending.id, decided.id}
    assert [v.id for v in await service.list_requests("approved")] == [decided.id]
