from fastapi import APIRouter, Depends
from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.auth.models import Admin
from app.auth.schemas import AdminProfile, AdminSummary, LoginData, LoginRequest, RegisterRequest
from app.auth.services import login_admin, register_admin
from app.core.schemas import Envelope
from app.db.session import get_db

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post(
    "/login",
    response_model=Envelope[LoginData],
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> Envelope[LoginData]:
    return Envelope(data=await login_admin(db, payload))


@router.post(
    "/register",
    response_model=Envelope[AdminSummary],
    status_code=http_status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> Envelope[AdminSummary]:
    return Envelope(data=await register_admin(db, payload))


@router.get("/me", response_model=Envelope[AdminProfile])
async def me(current_admin: Admin = Depends(get_current_admin)) -> Envelope[AdminProfile]:
    """Profile of the admin owning the bearer token."""
    return Envelope(data=AdminProfile.model_validate(current_admin))
