"""Admin report review router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_admin, AuthenticatedUser
from housedirect.schemas.report import ReportResponse, ReportStatusUpdate
from housedirect.services.reports import ReportService

router = APIRouter(prefix="/admin/reports", tags=["admin", "reports"])


@router.get("")
async def list_reports(
    status: Optional[str] = Query(
        None, pattern="^(all|new|investigating|resolved|dismissed)$"
    ),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    reports = await ReportService(db).list_reports(status, limit)
    return {"reports": [ReportResponse.model_validate(r) for r in reports]}


@router.get("/{report_id}")
async def get_report(
    report_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    report = await ReportService(db).get(report_id)
    return {"report": ReportResponse.model_validate(report)}


@router.patch("/{report_id}")
async def update_report_status(
    report_id: UUID,
    data: ReportStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Move a report through new -> investigating -> resolved/dismissed."""
    report = await ReportService(db).set_status(
        report_id, data.status, current_user.profile_id, data.admin_notes
    )
    return {
        "success": True,
        "message": "Report updated",
        "report": ReportResponse.model_validate(report),
    }
