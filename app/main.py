import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.admin.router import router as admin_router
from app.api.attendance.router import router as attendance_router
from app.api.employees.router import router as employees_router
from app.api.enquiries.router import router as enquiries_router
from app.core.config import settings
from app.core.error_handlers import register_exception_handlers
from app.db.session import check_database_connection, engine, init_db

API_VERSION = "1.0.0"

logging.basicConfig(
    level=logging.DEBUG if settings.is_development else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting admin panel API (%s mode)", settings.environment)
    # Fail fast: no point serving requests without the store
    if not await check_database_connection():
        raise RuntimeError("Database connection failed")
    await init_db()

    yield

    await engine.dispose()
    logger.info("Admin panel API stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Admin Panel API", version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.is_development:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                "%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms
            )
            return response

    register_exception_handlers(app)

    # Routers
    app.include_router(admin_router)
    app.include_router(employees_router)
    app.include_router(attendance_router)
    app.include_router(enquiries_router)

    @app.get("/api/health", tags=["health"])
    async def health_check():
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/", tags=["health"])
    async def root():
        return {
            "success": True,
            "message": "Welcome to the Admin Panel API",
            "version": API_VERSION,
            "endpoints": {
                "admin": "/api/admin",
                "employees": "/api/employees",
                "attendance": "/api/attendance",
                "enquiries": "/api/enquiries",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port, reload=settings.is_development)
