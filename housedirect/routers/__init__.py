"""API Routers for the HouseDirect backend."""

from housedirect.routers.admin_verifications import router as admin_verifications_router
from housedirect.routers.verifications import router as verifications_router
from housedirect.routers.admin_reports import router as admin_reports_router
from housedirect.routers.reports import router as reports_router
from housedirect.routers.admin_users import router as admin_users_router
from housedirect.routers.admin_stats import router as admin_stats_router
from housedirect.routers.admin_messages import router as admin_messages_router
from housedirect.routers.leads import router as leads_router
from housedirect.routers.scheduled import router as scheduled_router

__all__ = [
    "admin_verifications_router",
    "verifications_router",
    "admin_reports_router",
    "reports_router",
    "admin_users_router",
    "admin_stats_router",
    "admin_messages_router",
    "leads_router",
    "scheduled_router",
]
