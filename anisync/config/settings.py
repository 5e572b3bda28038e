"""AniSync Configuration Settings."""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["AniSyncConfig", "LogLevel", "get_config"]


class BaseStrEnum(StrEnum):
    """Base class for string-based enumerations with a custom __repr__ method.

    Provides case-insensitive lookup functionality and consistent string
    representation for enumeration values.
    """

    @classmethod
    def _missing_(cls, value: object) -> "BaseStrEnum | None":
        """Handle case-insensitive lookup for enum values.

        Args:
            value: The value to look up in the enumeration

        Returns:
            BaseStrEnum | None: The matching enum member if found, None otherwise
        """
        value = value.lower() if isinstance(value, str) else value
        for member in cls:
            if member.lower() == value:
                return member
        return None

    def __repr__(self) -> str:
        """Return the string value of the enum member."""
        return self.value

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return repr(self)


class LogLevel(BaseStrEnum):
    """Enumeration of available logging levels.

    Note: SUCCESS is a custom level used by this application.
    """

    DEBUG = "DEBUG"  # Detailed information for debugging
    INFO = "INFO"  # General information about program execution
    SUCCESS = "SUCCESS"  # Successful operations (custom level)
    WARNING = "WARNING"  # Potential problems or issues
    ERROR = "ERROR"  # Error that prevented an operation
    CRITICAL = "CRITICAL"  # Error that prevents further program execution


class AniSyncConfig(BaseSettings):
    """Configuration manager for the AniSync client.

    Values are read from ``ANISYNC_``-prefixed environment variables or a
    ``.env`` file, optionally combined with parameters passed directly to the
    model.
    """

    anilist_token: SecretStr | None = Field(
        default=None, description="AniList access token used for authenticated calls"
    )
    api_url: str = Field(
        default="https://graphql.anilist.co", description="AniList GraphQL endpoint"
    )
    max_concurrent: int = Field(
        default=100, ge=1, description="Maximum number of in-flight AniList requests"
    )
    min_time: float = Field(
        default=0.6, ge=0, description="Minimum seconds between request starts"
    )
    sentinel_list: str = Field(
        default="Watched using Miru",
        min_length=1,
        description="Custom list that marks entries synced by this application",
    )
    notify_duration: int = Field(
        default=3000, ge=0, description="Notification display duration in ms"
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level for the application"
    )
    data_path: Path = Field(
        default=Path("./data"), description="Directory for logs and runtime data"
    )

    @model_validator(mode="after")
    def absolute_data_path(self) -> "AniSyncConfig":
        """Ensures data_path is an absolute path.

        Returns:
            AniSyncConfig: Self with a resolved data_path
        """
        self.data_path = Path(self.data_path).resolve()
        return self

    @property
    def token(self) -> str | None:
        """Return the raw AniList token, or None when no usable token is set."""
        if self.anilist_token is None:
            return None
        return self.anilist_token.get_secret_value().strip() or None

    def __str__(self) -> str:
        """Creates a human-readable representation of the configuration.

        Returns:
            str: Comma-separated key-value pairs with the token masked
        """
        return ", ".join(
            f"{key}: **********"
            if key == "anilist_token" and self.anilist_token
            else f"{key}: {getattr(self, key)}"
            for key in self.__class__.model_fields
        )

    model_config = SettingsConfigDict(
        env_prefix="ANISYNC_", env_file=".env", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_config() -> AniSyncConfig:
    """Get the singleton instance of AniSyncConfig.

    Returns:
        AniSyncConfig: The singleton configuration instance.
    """
    return AniSyncConfig()
