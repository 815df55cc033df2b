"""Tests for the lead CRM endpoints."""

import uuid

import pytest

from housedirect.models.enums import LeadStatus
from tests.utils.factories import create_agent, create_lead, create_property


async def _login_agent(db, login):
    agent = await create_agent(db)
    await db.refresh(agent, ["user"])
    login(agent.user)
    return agent


@pytest.mark.api
async def test_create_and_list_leads(client, db, login):
    await _login_agent(db, login)

    created = await client.post(
        "/v1/leads",
        json={
            "name": "Femi Ade",
            "email": "femi@example.com",
            "budget_min": "20000000",
            "budget_max": "35000000",
            "source": "website",
        },
    )
    listed = await client.get("/v1/leads", params={"status": "new"})

    assert created.status_code == 201
    assert created.json()["status"] == "new"
    assert [lead["name"] for lead in listed.json()] == ["Femi Ade"]


@pytest.mark.api
async def test_budget_range_is_validated(client, db, login):
    await _login_agent(db, login)

    response = await client.post(
        "/v1/leads",
        json={
            "name": "Femi Ade",
            "email": "femi@example.com",
            "budget_min": "50000000",
            "budget_max": "10000000",
        },
    )

    assert response.status_code == 400


@pytest.mark.api
async def test_inquiry_dedupes_by_email_and_property(client, db, login):
    agent = await _login_agent(db, login)
    listing = await create_property(db, agent_id=agent.id)
    payload = {
        "message_id": str(uuid.uuid4()),
        "property_id": str(listing.id),
        "sender_name": "Ifeoma N.",
        "sender_email": "ifeoma@example.com",
    }

    first = await client.post("/v1/leads/from-inquiry", json=payload)
    second = await client.post(
        "/v1/leads/from-inquiry", json={**payload, "message_id": str(uuid.uuid4())}
    )

    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert second.json()["lead"]["id"] == first.json()["lead"]["id"]
    assert first.json()["lead"]["property_title"] == listing.title

    detail = await client.get(f"/v1/leads/{first.json()['lead']['id']}")
    assert len(detail.json()["activities"]) == 2


@pytest.mark.api
async def test_status_update_and_counts(client, db, login):
    agent = await _login_agent(db, login)
    lead = await create_lead(db, agent)

    won = await client.patch(f"/v1/leads/{lead.id}/status", json={"status": "closed_won"})
    reopen = await client.patch(f"/v1/leads/{lead.id}/status", json={"status": "negotiating"})
    counts = await client.get("/v1/leads/counts")

    assert won.status_code == 200
    assert won.json()["closed_at"] is not None
    assert reopen.status_code == 409
    assert counts.json()["closed_won"] == 1
    assert counts.json()["all"] == 1


@pytest.mark.api
async def test_another_agents_lead_is_not_found(client, db, login):
    await _login_agent(db, login)
    stranger_lead = await create_lead(db, await create_agent(db), status=LeadStatus.CONTACTED)

    detail = await client.get(f"/v1/leads/{stranger_lead.id}")
    note = await client.post(f"/v1/leads/{stranger_lead.id}/notes", json={"note": "Hello"})

    assert detail.status_code == 404
    assert detail.json() == {"error": "Lead not found"}
    assert note.status_code == 404


@pytest.mark.api
async def test_add_activity_and_note(client, db, login):
    agent = await _login_agent(db, login)
    lead = await create_lead(db, agent)

    activity = await client.post(
        f"/v1/leads/{lead.id}/activities",
        json={"activity_type": "viewing", "scheduled_at": "2026-11-01T10:00:00"},
    )
    note = await client.post(f"/v1/leads/{lead.id}/notes", json={"note": "Wants a garden"})

    assert activity.status_code == 201
    assert activity.json()["status"] == "scheduled"
    assert note.status_code == 201
    assert note.json()["note"] == "Wants a garden"
