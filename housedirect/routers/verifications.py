"""Document submission for agents and sellers."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_verification_submitter, AuthenticatedUser
from housedirect.schemas.verification import VerificationSubmit, VerificationResponse
from housedirect.services.entity_ref import entity_ref_from
from housedirect.services.notifications import EmailService, get_email_service
from housedirect.services.verification import VerificationService

router = APIRouter(prefix="/verifications", tags=["verifications"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_verification(
    data: VerificationSubmit,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_verification_submitter),
):
    """Submit a document for review of the caller's agent account or listing."""
    service = VerificationService(db, email_service)
    outcome = await service.submit(
        entity_ref_from(data.entity_type, data.entity_id),
        data.document_type,
        data.document_url,
        current_user.profile_id,
    )
    return {
        "success": True,
        "message": "Document submitted for verification",
        "verification": VerificationResponse.model_validate(outcome.verification),
        "email_sent": outcome.email_sent,
    }
