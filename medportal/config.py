"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string (PostgreSQL in production)
        secret_key: Secret key used to sign session tokens
        algorithm: Algorithm used for JWT encoding (typically HS256)
        session_expire_days: Lifetime of a session token and its cookie
        bcrypt_rounds: bcrypt cost factor, never below 10
        environment: Deployment environment; "production" turns on Secure cookies
        cookie_name: Name of the session cookie

        # Frontend settings
        frontend_url: URL of the presentation layer
        cors_origins: Extra allowed CORS origins

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
        bootstrap_admin_name: Display name for the bootstrap admin
    """
    # Database settings
    database_url: str

    # Session token settings
    secret_key: str
    algorithm: str = "HS256"
    session_expire_days: int = 7
    bcrypt_rounds: int = Field(default=12, ge=10, le=31)

    environment: str = "development"
    cookie_name: str = "auth_token"

    # Frontend settings
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = []

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "Super Admin"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def session_max_age(self) -> int:
        """Cookie max-age in seconds."""
        return self.session_expire_days * 24 * 60 * 60


# Create settings instance
settings = Settings()
