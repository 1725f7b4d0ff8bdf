"""Application configuration."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    A single instance is created at import time, but every service takes the
    settings object it should use as a constructor argument so tests and
    multi-tenant deployments can supply their own keys.
    """

    # Database
    database_url: str = "sqlite:///./userhub.db"

    # Access tokens
    jwt_secret_key: str = "change-me-in-production"  # Generate with: openssl rand -hex 32
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "userhub"
    access_token_expire_minutes: int = 15

    # Refresh tokens
    refresh_token_expire_days: int = 7
    rotate_refresh_token: bool = True

    # Login policy
    require_verified_login: bool = False

    # Password hashing
    bcrypt_rounds: int = 10

    # Email verification tokens (hex AES key, 16/24/32 bytes)
    aes_key: str = "00112233445566778899aabb00112233445566778899aabb"
    verification_token_expire_hours: int = 24
    app_url: str = "http://localhost:3000"

    # Email (SendGrid)
    email_enabled: bool = False
    sendgrid_api_key: str = ""
    email_from_address: str = "no-reply@userhub.local"
    email_from_name: str = "UserHub"
    email_subject: str = "Verify Your Email - UserHub"

    # Uploads
    upload_dir: str = "assets"

    # Application
    log_level: str = "INFO"
    debug: bool = True

    # CORS
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        # Only one symmetric signing scheme is supported.
        if v != "HS256":
            raise ValueError("jwt_algorithm must be HS256")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


settings = Settings()
