from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.services import authenticate
from app.core.config import settings
from app.db.session import get_db

# auto_error=False: a missing header must produce our 401 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Admin:
    """Resolve the authenticated admin from the `Authorization: Bearer <token>` header."""
    token = credentials.credentials if credentials else None
    return await authenticate(db, token)


async def get_resource_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[Admin]:
    """Gate for employee/attendance/enquiry routes.

    With REQUIRE_AUTH on this behaves like get_current_admin. With it off, anonymous
    requests pass through as None, but a token that is sent must still be valid.
    """
    if credentials is None and not settings.require_auth:
        return None
    token = credentials.credentials if credentials else None
    return await authenticate(db, token)
