"""Tests for report endpoints and admin dashboard counters."""

import pytest

from housedirect.models.enums import EntityVerificationStatus, ReportEntityType, ReportStatus, UserType
from tests.utils.factories import (
    create_admin,
    create_agent,
    create_profile,
    create_property,
    create_report,
    create_verification,
)

REPORT_BODY = {
    "reason": "Suspected scam listing",
    "description": "The seller asked for a deposit before any viewing was possible.",
}


@pytest.mark.api
async def test_submit_report_and_duplicate(client, db, login):
    login(await create_profile(db))
    listing = await create_property(db)
    payload = {"entity_type": "property", "entity_id": str(listing.id), **REPORT_BODY}

    created = await client.post("/v1/reports", json=payload)
    duplicate = await client.post("/v1/reports", json=payload)

    assert created.status_code == 201
    report_id = created.json()["report"]["id"]
    assert created.json()["report"]["status"] == "new"
    assert duplicate.status_code == 400
    assert duplicate.json() == {
        "error": "You have already reported this entity",
        "report_id": report_id,
    }

    mine = await client.get("/v1/reports/my-reports")
    assert [r["id"] for r in mine.json()["reports"]] == [report_id]


@pytest.mark.api
async def test_report_description_too_short(client, db, login):
    login(await create_profile(db))
    listing = await create_property(db)

    response = await client.post(
        "/v1/reports",
        json={
            "entity_type": "property",
            "entity_id": str(listing.id),
            "reason": "Suspected scam listing",
            "description": "Too short",
        },
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["path"] == "description"


@pytest.mark.api
async def test_admin_resolves_report(client, db, login, email_service):
    admin = login(await create_admin(db))
    reporter = await create_profile(db)
    report = await create_report(db, reporter, ReportEntityType.AGENT, (await create_agent(db)).id)

    response = await client.patch(
        f"/v1/admin/reports/{report.id}",
        json={"status": "resolved", "admin_notes": "Agent warned"},
    )

    assert response.status_code == 200
    body = response.json()["report"]
    assert body["status"] == "resolved"
    assert body["reviewed_by"] == str(admin.profile_id)
    assert body["admin_notes"] == "Agent warned"
    assert email_service.sent == []

    reopen = await client.patch(f"/v1/admin/reports/{report.id}", json={"status": "new"})
    assert reopen.status_code == 409


@pytest.mark.api
async def test_dashboard_stats(client, db, login):
    login(await create_admin(db))
    await create_agent(db, verification_status=EntityVerificationStatus.VERIFIED)
    pending_agent = await create_agent(db)
    await create_verification(db, pending_agent)
    seller = await create_profile(db, UserType.SELLER)
    listing = await create_property(
        db, owner=seller, verification_status=EntityVerificationStatus.VERIFIED
    )
    await create_property(db, owner=seller, is_active=False)
    await create_report(db, seller, ReportEntityType.PROPERTY, listing.id)
    await create_report(
        db, seller, ReportEntityType.AGENT, pending_agent.id, status=ReportStatus.DISMISSED
    )

    response = await client.get("/v1/admin/stats")

    assert response.status_code == 200
    assert response.json()["stats"] == {
        "totalUsers": 4,
        "totalProperties": 2,
        "totalAgents": 2,
        "pendingVerifications": 1,
        "pendingReports": 1,
        "activeProperties": 1,
        "verifiedAgents": 1,
        "verifiedProperties": 1,
    }
