import os

# Settings are read at import time; give the app a throwaway configuration.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.core.models  # noqa: F401  (register every table on Base.metadata)
from app.auth.models import Admin
from app.auth.security import create_access_token, hash_password
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
ADMIN_PASSWORD = "StrongPass123"


@pytest.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory SQLite database per test. StaticPool keeps one shared connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and asserting on it directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def admin(db_session: AsyncSession) -> Admin:
    admin = Admin(
        name="Jane Admin",
        email="jane.admin@example.com",
        password_hash=hash_password(ADMIN_PASSWORD),
        role="Admin",
        is_active=True,
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture()
def auth_headers(admin: Admin) -> Dict[str, str]:
    token = create_access_token(subject=str(admin.id))
    return {"Authorization": f"Bearer {token}"}
