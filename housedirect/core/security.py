"""Firebase JWT verification and role dependencies."""

import hmac
from typing import Any, Optional
from uuid import UUID

import firebase_admin
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.config import get_settings
from housedirect.core.database import get_db
from housedirect.core.errors import UnauthorizedError
from housedirect.models.enums import UserType

settings = get_settings()

security = HTTPBearer(auto_error=False)


def _ensure_firebase_app() -> None:
    """Initialize the Firebase Admin SDK on first use."""
    if firebase_admin._apps:
        return
    options = {"projectId": settings.firebase_project_id}
    if settings.google_application_credentials:
        cred = credentials.Certificate(settings.google_application_credentials)
        firebase_admin.initialize_app(cred, options)
    else:
        firebase_admin.initialize_app(options=options)


class AuthenticatedUser:
    """Represents an authenticated user from Firebase JWT."""

    def __init__(
        self,
        uid: str,
        email: Optional[str] = None,
        email_verified: bool = False,
        claims: Optional[dict[str, Any]] = None,
    ):
        self.uid = uid
        self.email = email
        self.email_verified = email_verified
        self.claims = claims or {}
        self.profile_id: Optional[UUID] = None
        self.user_type: Optional[UserType] = None
        self.full_name: Optional[str] = None
        self.agent_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_firebase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Verify Firebase JWT and return authenticated user.

    This dependency never mints tokens, it only verifies tokens issued by Firebase.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    _ensure_firebase_app()

    try:
        decoded_token = auth.verify_id_token(credentials.credentials)
    except auth.ExpiredIdTokenError:
        raise _unauthorized("Token has expired")
    except auth.InvalidIdTokenError:
        raise _unauthorized("Invalid authentication token")
    except Exception as e:
        raise _unauthorized(f"Token verification failed: {str(e)}")

    return AuthenticatedUser(
        uid=decoded_token["uid"],
        email=decoded_token.get("email"),
        email_verified=decoded_token.get("email_verified", False),
        claims=decoded_token,
    )


async def get_current_user(
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Attach the caller's profile (id, role, name) to the verified identity."""
    from housedirect.models.user import Profile

    result = await db.execute(
        select(Profile).where(Profile.firebase_uid == auth_user.uid)
    )
    profile = result.scalar_one_or_none()

    if not profile:
        raise _unauthorized("User profile not found")

    auth_user.profile_id = profile.id
    auth_user.user_type = profile.user_type
    auth_user.full_name = profile.full_name
    auth_user.email = auth_user.email or profile.email
    return auth_user


def require_admin(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Require the caller to be a platform admin."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def require_agent(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Require the caller to own an agent account; sets ``agent_id``."""
    from housedirect.models.agent import Agent

    result = await db.execute(
        select(Agent.id).where(Agent.user_id == current_user.profile_id)
    )
    agent_id = result.scalar_one_or_none()

    if agent_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Agent profile required",
        )
    current_user.agent_id = agent_id
    return current_user


def require_verification_submitter(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Only agents and sellers submit verification documents."""
    if current_user.user_type not in (UserType.AGENT, UserType.SELLER):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only agents and sellers can submit verification documents",
        )
    return current_user


def verify_cron_secret(
    x_cron_secret: Optional[str] = Header(default=None),
) -> None:
    """Guard for scheduler-triggered endpoints."""
    expected = get_settings().cron_secret
    if not expected or not x_cron_secret or not hmac.compare_digest(x_cron_secret, expected):
        raise UnauthorizedError("Unauthorized")
