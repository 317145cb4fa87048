import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.schemas import AdminSummary, LoginData, LoginRequest, RegisterRequest
from app.auth.security import create_access_token, decode_access_token, hash_password, verify_password
from app.core.exceptions import AuthError, ConflictError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ROLE = "Admin"
DEACTIVATED_MESSAGE = "Account is deactivated. Please contact administrator"


async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(func.lower(Admin.email) == email.strip().lower()))
    return result.scalar_one_or_none()


async def login_admin(db: AsyncSession, payload: LoginRequest) -> LoginData:
    if not payload.email or not payload.password:
        raise ValidationError("Please provide email and password")

    # 1. Find admin by email (case-insensitive)
    admin = await get_admin_by_email(db, payload.email)
    if not admin:
        logger.info("Login failed: unknown email %s", payload.email)
        raise AuthError("Invalid credentials")

    # 2. Check account status
    if not admin.is_active:
        logger.info("Login refused: admin %s is deactivated", admin.id)
        raise AuthError(DEACTIVATED_MESSAGE)

    # 3. Verify password hash
    if not verify_password(payload.password, admin.password_hash):
        logger.info("Login failed: bad password for %s", payload.email)
        raise AuthError("Invalid credentials")

    # 4. Record the login; a plain column write, nothing else is re-checked
    admin.last_login = datetime.utcnow()
    await db.commit()

    token = create_access_token(subject=str(admin.id))
    logger.info("Admin %s logged in", admin.id)
    return LoginData(token=token, admin=AdminSummary.model_validate(admin))


async def register_admin(db: AsyncSession, payload: RegisterRequest) -> AdminSummary:
    if await get_admin_by_email(db, payload.email):
        raise ConflictError("Admin with this email already exists")

    admin = Admin(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=(payload.role or "").strip() or DEFAULT_ADMIN_ROLE,
        is_active=True,
    )
    db.add(admin)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        await db.rollback()
        raise ConflictError("Admin with this email already exists")
    await db.refresh(admin)
    logger.info("Registered admin %s (%s)", admin.id, admin.email)
    return AdminSummary.model_validate(admin)


async def authenticate(db: AsyncSession, token: Optional[str]) -> Admin:
    """Resolve a bearer token to an active Admin or raise AuthError."""
    if not token:
        raise AuthError()

    claims = decode_access_token(token)
    if not claims:
        raise AuthError()

    try:
        admin_id = UUID(str(claims.get("sub")))
    except ValueError:
        raise AuthError()

    admin = await db.get(Admin, admin_id)
    if not admin:
        raise AuthError("Admin not found")
    if not admin.is_active:
        raise AuthError("Account is deactivated")
    return admin
