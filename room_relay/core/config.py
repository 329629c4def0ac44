# room_relay/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime and cover:
    - Video provider credentials used to mint management/auth tokens
    - Upstream Resource API location and HTTP timeout
    - Pagination safety bound and guest role used for room-code enrichment
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Room Relay"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Log level for the room_relay loggers.")

    HMS_ACCESS_KEY: str | None = Field(
        default=None,
        description="Access key of the video provider workspace.",
    )
    HMS_APP_SECRET: str | None = Field(
        default=None,
        description="App secret used to sign management and auth tokens.",
    )
    HMS_API_BASE_URL: AnyHttpUrl = Field(
        default="https://api.100ms.live/v2",
        description="Base URL of the provider's Resource API.",
    )

    MANAGEMENT_TOKEN_TTL_SECONDS: int = Field(
        default=24 * 3600,
        description="Lifetime of the management token used for Resource API calls.",
    )
    AUTH_TOKEN_TTL_SECONDS: int = Field(
        default=24 * 3600,
        description="Lifetime of auth tokens handed to clients joining a room.",
    )
    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Transport timeout applied to every outbound Resource API call.",
    )

    SESSION_LIST_MAX_PAGES: int = Field(
        default=500,
        description=(
            "Upper bound on the number of full pages fetched when listing every "
            "session of a room. Exceeding it aborts the walk with an error."
        ),
    )
    GUEST_ROLE: str = Field(
        default="guest",
        description="Role whose room codes are attached to each room in /list-rooms.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Settings are read and validated only once per process.
    """
    return Settings()
