"""Authentication dependencies for validating bearer tokens."""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models import Role, UserProfile
from catalog.repositories import UserRepository
from catalog_api.dependencies import get_session
from catalog_api.errors import Forbidden, Unauthenticated
from catalog_api.security import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> UserProfile:
    """Resolve the bearer token to the user it was issued for."""

    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub")
    user = await UserRepository(session).get(user_id) if user_id else None
    if user is None:
        logger.warning(f"JWT refers to unknown user {user_id}")
        raise Unauthenticated("Not authorized, token failed")

    return UserProfile(id=user.id, username=user.username, email=user.email, role=user.role)


async def require_admin(user: UserProfile = Depends(get_current_user)) -> UserProfile:
    """Allow only admins through."""

    if user.role != Role.ADMIN.value:
        raise Forbidden("Not authorized as an admin")
    return user
