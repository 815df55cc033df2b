"""Admin verification review router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_admin, AuthenticatedUser
from housedirect.schemas.verification import (
    VerificationApprove,
    VerificationReject,
    VerificationResponse,
    VerificationListResponse,
    VerificationDecisionResponse,
)
from housedirect.services.notifications import EmailService, get_email_service
from housedirect.services.verification import VerificationService

router = APIRouter(prefix="/admin/verifications", tags=["admin", "verifications"])


@router.get("", response_model=VerificationListResponse)
async def list_verifications(
    status: Optional[str] = Query(
        None, pattern="^(all|pending|approved|rejected)$", description="Filter by status"
    ),
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """List verification requests, newest first, with reviewer details."""
    service = VerificationService(db, email_service)
    verifications = await service.list_requests(status)
    return {"verifications": verifications}


@router.get("/pending", response_model=VerificationListResponse)
async def list_pending_verifications(
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    service = VerificationService(db, email_service)
    return {"verifications": await service.list_pending()}


@router.post("/approve", response_model=VerificationDecisionResponse)
async def approve_verification(
    data: VerificationApprove,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Approve a pending request and mark its agent or property verified."""
    service = VerificationService(db, email_service)
    outcome = await service.approve(
        data.verification_id, current_user.profile_id, data.review_notes
    )
    return VerificationDecisionResponse(
        message="Verification approved",
        verification=VerificationResponse.model_validate(outcome.verification),
        email_sent=outcome.email_sent,
    )


@router.post("/reject", response_model=VerificationDecisionResponse)
async def reject_verification(
    data: VerificationReject,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Reject a pending request; review notes are sent to the owner."""
    service = VerificationService(db, email_service)
    outcome = await service.reject(
        data.verification_id, current_user.profile_id, data.review_notes
    )
    return VerificationDecisionResponse(
        message="Verification rejected",
        verification=VerificationResponse.model_validate(outcome.verification),
        email_sent=outcome.email_sent,
    )
