"""Report submission router for signed-in users."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import get_current_user, AuthenticatedUser
from housedirect.schemas.report import ReportCreate, ReportResponse
from housedirect.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(
    data: ReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Report a property, agent or user. One report per target per user."""
    report = await ReportService(db).create(
        current_user.profile_id,
        data.entity_type,
        data.entity_id,
        data.reason,
        data.description,
    )
    return {
        "success": True,
        "message": "Report submitted successfully",
        "report": ReportResponse.model_validate(report),
    }


@router.get("/my-reports")
async def list_my_reports(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    reports = await ReportService(db).list_for_reporter(current_user.profile_id)
    return {"reports": [ReportResponse.model_validate(r) for r in reports]}


@router.get("/{report_id}")
async def get_my_report(
    report_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    report = await ReportService(db).get_for_reporter(report_id, current_user.profile_id)
    return {"report": ReportResponse.model_validate(report)}
