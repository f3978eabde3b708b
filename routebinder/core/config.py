"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from routebinder.core.config import get_settings

    settings = get_settings()
    timeout = settings.api_timeout
    login_path = settings.login_route

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from routebinder.core.enums import Environment


class OAuthClient(BaseModel):
    """Registered OAuth client allowed to call the token endpoint.

    Attributes:
        client_id: Public client identifier.
        client_secret: Shared client secret.
        grants: Grant types the client may use.
    """

    client_id: str
    client_secret: str
    grants: list[str] = Field(default_factory=lambda: ["password", "refresh_token"])


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Loads configuration from environment variables (case-insensitive).

    Configuration precedence:
        1. Environment variables
        2. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="routebinder",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # OAuth configuration
    access_token_lifetime: int = Field(
        default=7776000,
        description="Access token lifetime in seconds (default 90 days)",
    )
    refresh_token_lifetime: int = Field(
        default=1209600,
        description="Refresh token lifetime in seconds (default 14 days)",
    )
    login_route: str = Field(
        default="/oauth/token",
        description="Path of the OAuth token (login) endpoint",
    )
    allow_bearer_tokens_in_query_string: bool = Field(
        default=True,
        description="Accept bearer tokens from the access_token query parameter",
    )
    oauth_clients: list[OAuthClient] = Field(
        default_factory=lambda: [
            OAuthClient(client_id="CLI2", client_secret="client_secret_here"),
        ],
        description="OAuth clients as a JSON list of {client_id, client_secret, grants}",
    )
    bcrypt_rounds: int = Field(
        default=12,
        description="Number of bcrypt hashing rounds (10-14 recommended)",
    )

    # Dispatch configuration
    api_timeout: float = Field(
        default=30.0,
        description="Seconds a controller may run before the request fails with a timeout",
    )
    expose_error_details: bool = Field(
        default=False,
        description="Return raw exception messages for unrecognized errors (never in production)",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """
        Validate bcrypt rounds are within safe range.

        Args:
            v: Number of bcrypt rounds.

        Returns:
            int: Validated bcrypt rounds.

        Raises:
            ValueError: If rounds are not between 4 and 31.
        """
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator("api_timeout")
    @classmethod
    def validate_api_timeout(cls, v: float) -> float:
        """Reject non-positive dispatch timeouts."""
        if v <= 0:
            raise ValueError("api_timeout must be positive")
        return v

    @field_validator("access_token_lifetime", "refresh_token_lifetime")
    @classmethod
    def validate_lifetime(cls, v: int) -> int:
        """Reject non-positive token lifetimes."""
        if v <= 0:
            raise ValueError("token lifetimes must be positive")
        return v

    @field_validator("login_route")
    @classmethod
    def validate_login_route(cls, v: str) -> str:
        """
        Ensure the login route is an absolute path.

        Args:
            v: Route path.

        Returns:
            str: Route path without trailing slash.

        Raises:
            ValueError: If the path does not start with '/'.
        """
        if not v.startswith("/"):
            raise ValueError("login_route must start with '/'")
        return v.rstrip("/") or "/"

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
