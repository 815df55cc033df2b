"""Tests for admin user management and conversation emails."""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from housedirect.core.errors import HouseDirectError, NotFoundError
from housedirect.models import AuditLog
from housedirect.models.enums import AuditAction, UserType
from housedirect.schemas.user import UserUpdate
from housedirect.services.messages import AdminMessageService
from housedirect.services.users import UserAdminService
from tests.utils.factories import (
    create_admin,
    create_agent,
    create_message,
    create_profile,
    create_property,
)


@pytest.mark.unit
async def test_user_detail_counts_listings(db):
    seller = await create_profile(db, UserType.SELLER)
    await create_property(db, owner=seller)
    await create_property(db, owner=seller)

    detail = await UserAdminService(db).get_user(seller.id)

    assert detail.user.id == seller.id
    assert detail.properties_count == 2
    assert detail.agent_profile is None


@pytest.mark.unit
async def test_user_detail_includes_agent_account(db):
    agent = await create_agent(db)

    detail = await UserAdminService(db).get_user(agent.user_id)

    assert detail.agent_profile.id == agent.id


@pytest.mark.unit
async def test_update_user_only_touches_supplied_fields(db):
    admin = await create_admin(db)
    user = await create_profile(db, phone="08011112222")

    updated = await UserAdminService(db).update_user(
        user.id, UserUpdate(user_type=UserType.SELLER, is_verified=True), admin.id
    )

    assert updated.user_type == UserType.SELLER
    assert updated.is_verified is True
    assert updated.phone == "08011112222"
    audit = (
        await db.execute(select(AuditLog).where(AuditLog.action == AuditAction.USER_UPDATED))
    ).scalar_one()
    assert audit.details == {"user_type": "seller", "is_verified": True}


@pytest.mark.unit
async def test_update_unknown_user(db):
    admin = await create_admin(db)

    with pytest.raises(NotFoundError):
        await UserAdminService(db).update_user(uuid.uuid4(), UserUpdate(full_name="X"), admin.id)


@pytest.mark.unit
async def test_conversation_email_contains_transcript(db, email_service):
    admin = await create_admin(db)
    seller = await create_profile(db, UserType.SELLER, full_name="Kemi Lawal")
    listing = await create_property(db, owner=seller, title="Lekki Phase 1 Duplex")
    start = datetime(2026, 5, 4, 10, 0)
    await create_message(db, listing, admin, seller, "Please upload the survey plan.", created_at=start)
    reply = await create_message(
        db, listing, seller, admin, "Uploaded it this morning.", created_at=start + timedelta(hours=1)
    )

    result = await AdminMessageService(db, email_service).send_conversation_email(
        admin.id, seller.id, listing.id, reply.id
    )

    assert result.ok is True
    sent = email_service.sent[0]
    assert sent["to"] == seller.email
    assert sent["subject"] == "New Message from Admin - Lekki Phase 1 Duplex"
    html = sent["html"]
    assert html.index("Please upload the survey plan.") < html.index("Uploaded it this morning.")
    assert "Kemi Lawal" in html
    assert f"/messages?property={listing.id}" in html

    audit = (
        await db.execute(select(AuditLog).where(AuditLog.action == AuditAction.ADMIN_MESSAGE_EMAILED))
    ).scalar_one()
    assert audit.resource_id == reply.id


@pytest.mark.unit
async def test_conversation_email_failure_is_reported(db, email_service):
    admin = await create_admin(db)
    seller = await create_profile(db, UserType.SELLER)
    listing = await create_property(db, owner=seller)
    email_service.fail_with("Connection refused")

    with pytest.raises(HouseDirectError) as exc_info:
        await AdminMessageService(db, email_service).send_conversation_email(
            admin.id, seller.id, listing.id, uuid.uuid4()
        )

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Failed to send email notification"


@pytest.mark.unit
async def test_conversation_email_unknown_recipient(db, email_service):
    admin = await create_admin(db)
    listing = await create_property(db)

    with pytest.raises(NotFoundError) as exc_info:
        await AdminMessageService(db, email_service).send_conversation_email(
            admin.id, uuid.uuid4(), listing.id, uuid.uuid4()
        )

    assert exc_info.value.message == "Recipient not found"
