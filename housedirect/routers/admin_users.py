"""Admin user management router."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_admin, AuthenticatedUser
from housedirect.schemas.user import (
    AgentProfileResponse,
    UserDetailResponse,
    UserResponse,
    UserUpdate,
)
from housedirect.services.users import UserAdminService

router = APIRouter(prefix="/admin/users", tags=["admin", "users"])


@router.get("")
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    users = await UserAdminService(db).list_users()
    return {"users": [UserResponse.model_validate(u) for u in users]}


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Profile with listing count and agent account."""
    detail = await UserAdminService(db).get_user(user_id)
    return UserDetailResponse(
        user=UserResponse.model_validate(detail.user),
        properties_count=detail.properties_count,
        agent_profile=(
            AgentProfileResponse.model_validate(detail.agent_profile)
            if detail.agent_profile
            else None
        ),
    )


@router.patch("/{user_id}")
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    profile = await UserAdminService(db).update_user(user_id, data, current_user.profile_id)
    return {
        "success": True,
        "message": "User updated",
        "user": UserResponse.model_validate(profile),
    }
