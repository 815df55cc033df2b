"""Tests for the admin verification endpoints."""

import uuid

import pytest

from housedirect.models import AuditLog, JobsOutbox
from housedirect.models.enums import EntityVerificationStatus, UserType, VerificationStatus
from tests.utils.factories import (
    create_admin,
    create_agent,
    create_profile,
    create_property,
    create_verification,
)
from tests.utils.queries import count_rows


@pytest.mark.api
async def test_approve_then_second_decision_conflicts(client, db, login, email_service):
    admin = login(await create_admin(db))
    agent = await create_agent(db)
    verification = await create_verification(db, agent)

    response = await client.post(
        "/v1/admin/verifications/approve",
        json={"verification_id": str(verification.id), "review_notes": "All documents valid"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["email_sent"] is True
    assert body["verification"]["status"] == "approved"
    assert body["verification"]["reviewed_by"] == str(admin.profile_id)
    assert body["verification"]["reviewer"]["full_name"] == "Ada Admin"

    await db.refresh(agent)
    assert agent.verification_status == EntityVerificationStatus.VERIFIED

    conflict = await client.post(
        "/v1/admin/verifications/reject",
        json={"verification_id": str(verification.id), "review_notes": "Second thoughts here"},
    )

    assert conflict.status_code == 409
    assert conflict.json()["current_status"] == "approved"
    assert len(email_service.sent) == 1


@pytest.mark.api
async def test_reject_requires_notes(client, db, login):
    login(await create_admin(db))
    verification = await create_verification(db, await create_agent(db))

    response = await client.post(
        "/v1/admin/verifications/reject",
        json={"verification_id": str(verification.id)},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    assert body["details"][0]["path"] == "review_notes"

    await db.refresh(verification)
    assert verification.status == VerificationStatus.PENDING
    assert verification.reviewed_by is None
    assert await count_rows(db, JobsOutbox) == 0
    assert await count_rows(db, AuditLog) == 0


@pytest.mark.api
async def test_reject_with_short_notes(client, db, login):
    login(await create_admin(db))
    verification = await create_verification(db, await create_agent(db))

    response = await client.post(
        "/v1/admin/verifications/reject",
        json={"verification_id": str(verification.id), "review_notes": "blurry"},
    )

    assert response.status_code == 400


@pytest.mark.api
async def test_approve_unknown_request(client, db, login):
    login(await create_admin(db))

    response = await client.post(
        "/v1/admin/verifications/approve",
        json={"verification_id": str(uuid.uuid4())},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Verification not found"}


@pytest.mark.api
async def test_list_filters_by_status(client, db, login):
    login(await create_admin(db))
    pending = await create_verification(db, await create_agent(db))
    listing = await create_property(db)
    await create_verification(db, listing, status=VerificationStatus.REJECTED, review_notes="Unreadable scan")

    all_response = await client.get("/v1/admin/verifications", params={"status": "all"})
    pending_response = await client.get("/v1/admin/verifications/pending")
    bad_filter = await client.get("/v1/admin/verifications", params={"status": "archived"})

    assert len(all_response.json()["verifications"]) == 2
    assert [v["id"] for v in pending_response.json()["verifications"]] == [str(pending.id)]
    assert bad_filter.status_code == 400


@pytest.mark.api
async def test_seller_submits_listing_document(client, db, login, email_service):
    seller = await create_profile(db, UserType.SELLER)
    login(seller)
    listing = await create_property(db, owner=seller)

    response = await client.post(
        "/v1/verifications",
        json={
            "entity_type": "property",
            "entity_id": str(listing.id),
            "document_type": "title_deed",
            "document_url": "https://files.housedirect.test/deed.pdf",
        },
    )

    assert response.status_code == 201
    assert response.json()["verification"]["status"] == "pending"
    assert email_service.sent[0]["subject"] == "Document Submitted for Verification"
