from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    # No fallback secret: every deployment must provide its own.
    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_expire_days: int = Field(30, alias="JWT_EXPIRE_DAYS")

    port: int = Field(5000, alias="PORT")
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    # When true, employee/attendance/enquiry routes need a bearer token too (admin /me always does).
    require_auth: bool = Field(False, alias="REQUIRE_AUTH")
    cors_origins: List[str] = Field(["*"], alias="CORS_ORIGINS")

    admin_seed_name: str = Field("Admin User", alias="ADMIN_SEED_NAME")
    admin_seed_email: Optional[str] = Field(None, alias="ADMIN_SEED_EMAIL")
    admin_seed_password: Optional[str] = Field(None, alias="ADMIN_SEED_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


settings = Settings()
