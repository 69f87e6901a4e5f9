"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that work for local development

Collaborators:
  - api/main.py: reads settings for CORS, logging and store selection
  - container.py: reads settings to build hasher, token service and mailer
  - crosscutting/logger.py: log level, JSON mode and optional log file

Constraints:
  - No business logic — pure configuration
  - Production requires a strong JWT secret

Notes:
  - Singleton via lru_cache
  - Empty DATABASE_URL selects the in-memory user store
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = {"dev-secret", "changeme", "change-me", "password", "your-secret-key"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        log_level: Root level for the application logger (default: INFO)
        log_json: Emit JSON log lines (default: True)
        log_file: Optional path of a file sink (default: disabled)
        database_url: PostgreSQL connection string (empty = in-memory store)
        db_auto_create_schema: Create the users table on startup
        jwt_secret: Secret for signing access tokens
        jwt_access_ttl_minutes: Access token validity window (default: 24h)
        password_*: Argon2 cost parameters
        signup_auto_activate: Mark users created through signup as active
        smtp_*: Outbound mail transport (empty host = mail disabled)
        allowed_origins: Comma-separated CORS origins
    """

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: str = ""

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Database
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000
    db_auto_create_schema: bool = False

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_algorithm: str = "HS256"
    jwt_access_ttl_minutes: int = 24 * 60

    # Security - Password hashing (Argon2id)
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4

    # Signup
    signup_auto_activate: bool = True

    # Mail (SMTP)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = True
    smtp_timeout_seconds: float = 10.0
    mail_from_name: str = "Authgate"
    mail_from_email: str = "noreply@localhost"

    @field_validator("jwt_access_ttl_minutes")
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jwt_access_ttl_minutes must be greater than 0")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def algorithm_must_be_hmac(cls, v: str) -> str:
        algorithm = (v or "").strip().upper()
        if algorithm not in {"HS256", "HS384", "HS512"}:
            raise ValueError("jwt_algorithm must be one of HS256, HS384, HS512")
        return algorithm

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return level

    @model_validator(mode="after")
    def validate_pool_bounds(self):
        if self.db_pool_min_size < 0 or self.db_pool_max_size < 1:
            raise ValueError("db pool sizes must be min >= 0 and max >= 1")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in _INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def uses_database(self) -> bool:
        return bool(self.database_url.strip())

    def mail_enabled(self) -> bool:
        return bool(self.smtp_host.strip())

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
