"""Lead CRM router for agents."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_agent, AuthenticatedUser
from housedirect.schemas.lead import (
    LeadCreate,
    LeadFromInquiry,
    LeadStatusUpdate,
    LeadActivityCreate,
    LeadNoteCreate,
    LeadResponse,
    LeadActivityResponse,
    LeadNoteResponse,
    LeadDetailResponse,
)
from housedirect.services.leads import LeadService

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("", response_model=list[LeadResponse])
async def list_leads(
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        pattern="^(all|new|contacted|viewing_scheduled|viewing_completed|offer_made|negotiating|closed_won|closed_lost|nurturing)$",
    ),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    """The agent's leads, newest first; search matches name, email or phone."""
    return await LeadService(db).list_leads(current_user.agent_id, status_filter, search)


@router.get("/counts")
async def lead_status_counts(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    return await LeadService(db).status_counts(current_user.agent_id)


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def create_lead(
    data: LeadCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    return await LeadService(db).create(current_user.agent_id, data)


@router.post("/from-inquiry")
async def create_lead_from_inquiry(
    data: LeadFromInquiry,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    """Create a lead from a property inquiry, or log the message on the existing lead."""
    lead, created = await LeadService(db).create_from_inquiry(current_user.agent_id, data)
    return {
        "success": True,
        "created": created,
        "lead": LeadResponse.model_validate(lead),
    }


@router.get("/{lead_id}", response_model=LeadDetailResponse)
async def get_lead(
    lead_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    detail = await LeadService(db).get_detail(current_user.agent_id, lead_id)
    return LeadDetailResponse(
        lead=LeadResponse.model_validate(detail.lead),
        activities=[LeadActivityResponse.model_validate(a) for a in detail.activities],
        notes=[LeadNoteResponse.model_validate(n) for n in detail.notes],
    )


@router.patch("/{lead_id}/status", response_model=LeadResponse)
async def update_lead_status(
    lead_id: UUID,
    data: LeadStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    return await LeadService(db).update_status(current_user.agent_id, lead_id, data.status)


@router.post(
    "/{lead_id}/activities",
    response_model=LeadActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_lead_activity(
    lead_id: UUID,
    data: LeadActivityCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    return await LeadService(db).add_activity(current_user.agent_id, lead_id, data)


@router.post(
    "/{lead_id}/notes",
    response_model=LeadNoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_lead_note(
    lead_id: UUID,
    data: LeadNoteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_agent),
):
    return await LeadService(db).add_note(current_user.agent_id, lead_id, data)
