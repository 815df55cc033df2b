"""Admin dashboard router - aggregate platform counters."""

from fastapi import APIRouter, Depends
from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_admin, AuthenticatedUser
from housedirect.models.agent import Agent
from housedirect.models.property import Property
from housedirect.models.report import Report
from housedirect.models.user import Profile
from housedirect.models.verification import VerificationRequest
from housedirect.models.enums import (
    EntityVerificationStatus,
    ReportStatus,
    VerificationStatus,
)
from housedirect.schemas.user import DashboardStats

router = APIRouter(prefix="/admin", tags=["admin", "dashboard"])


@router.get("/stats")
async def get_admin_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Platform-wide counts for the admin dashboard.

    Returns:
    - users, agents and properties (total, active, verified)
    - verification requests awaiting review
    - reports not yet picked up (status ``new``)
    """
    total_users = await db.scalar(select(func.count(Profile.id)))

    prop_query = await db.execute(
        select(
            func.count(Property.id).label("total"),
            func.coalesce(func.sum(case((Property.is_active.is_(True), 1), else_=0)), 0).label("active"),
            func.coalesce(func.sum(case(
                (Property.verification_status == EntityVerificationStatus.VERIFIED, 1),
                else_=0,
            )), 0).label("verified"),
        )
    )
    prop_stats = prop_query.one()

    agent_query = await db.execute(
        select(
            func.count(Agent.id).label("total"),
            func.coalesce(func.sum(case(
                (Agent.verification_status == EntityVerificationStatus.VERIFIED, 1),
                else_=0,
            )), 0).label("verified"),
        )
    )
    agent_stats = agent_query.one()

    pending_verifications = await db.scalar(
        select(func.count(VerificationRequest.id)).where(
            VerificationRequest.status == VerificationStatus.PENDING
        )
    )
    pending_reports = await db.scalar(
        select(func.count(Report.id)).where(Report.status == ReportStatus.NEW)
    )

    stats = DashboardStats(
        totalUsers=total_users or 0,
        totalProperties=prop_stats.total or 0,
        totalAgents=agent_stats.total or 0,
        pendingVerifications=pending_verifications or 0,
        pendingReports=pending_reports or 0,
        activeProperties=int(prop_stats.active or 0),
        verifiedAgents=int(agent_stats.verified or 0),
        verifiedProperties=int(prop_stats.verified or 0),
    )
    return {"stats": stats}
