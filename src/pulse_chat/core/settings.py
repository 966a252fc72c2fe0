"""Application settings and configuration.

This module defines all configuration options for the Pulse Chat service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Pulse Chat", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and session cookies
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_ttl_days: int = Field(default=30, alias="SESSION_TTL_DAYS")
    session_cookie_name: str = Field(default="auth-token", alias="SESSION_COOKIE_NAME")
    cookie_secure: bool = Field(default=False, alias="COOKIE_SECURE")

    # Database configuration
    database_url: str = Field(default="sqlite:///./pulse_chat.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Verification codes
    code_ttl_minutes: int = Field(default=10, alias="CODE_TTL_MINUTES")
    min_phone_digits: int = Field(default=10, alias="MIN_PHONE_DIGITS")

    # SMS gateway; codes are only logged when no gateway is configured
    sms_gateway_url: str | None = Field(default=None, alias="SMS_GATEWAY_URL")
    sms_gateway_token: str | None = Field(default=None, alias="SMS_GATEWAY_TOKEN")
    sms_timeout_seconds: float = Field(default=10.0, alias="SMS_TIMEOUT_SECONDS")

    # Media uploads
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    upload_url_prefix: str = Field(default="/uploads", alias="UPLOAD_URL_PREFIX")
    max_upload_mb: int = Field(default=50, alias="MAX_UPLOAD_MB")
    cloudinary_cloud_name: str | None = Field(default=None, alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = Field(default=None, alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(default=None, alias="CLOUDINARY_API_SECRET")
    cloudinary_folder: str = Field(default="pulse-chat/uploads", alias="CLOUDINARY_FOLDER")

    # Messaging limits
    conversation_page_size: int = Field(default=100, alias="CONVERSATION_PAGE_SIZE")
    user_search_limit: int = Field(default=50, alias="USER_SEARCH_LIMIT")

    # Websocket push for active conversations
    realtime_enabled: bool = Field(default=True, alias="REALTIME_ENABLED")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def cloudinary_enabled(self) -> bool:
        """Return True when every Cloudinary credential is configured."""
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    @property
    def max_upload_bytes(self) -> int:
        """Return the upload size ceiling in bytes."""
        return self.max_upload_mb * 1024 * 1024

    @property
    def session_max_age_seconds(self) -> int:
        """Return the cookie lifetime in seconds."""
        return self.session_ttl_days * 24 * 60 * 60


settings = Settings()  # type: ignore[call-arg]
