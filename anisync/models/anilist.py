"""AniList Models Module."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AniListBaseEnum(StrEnum):
    """Base enum for AniList models."""

    pass


class MediaFormat(AniListBaseEnum):
    """Enum representing media formats (TV, MOVIE, etc)."""

    TV = "TV"
    TV_SHORT = "TV_SHORT"
    MOVIE = "MOVIE"
    SPECIAL = "SPECIAL"
    OVA = "OVA"
    ONA = "ONA"
    MUSIC = "MUSIC"
    MANGA = "MANGA"
    NOVEL = "NOVEL"
    ONE_SHOT = "ONE_SHOT"


class MediaStatus(AniListBaseEnum):
    """Enum representing media status (FINISHED, RELEASING, etc)."""

    FINISHED = "FINISHED"
    RELEASING = "RELEASING"
    NOT_YET_RELEASED = "NOT_YET_RELEASED"
    CANCELLED = "CANCELLED"
    HIATUS = "HIATUS"


class MediaSeason(AniListBaseEnum):
    """Enum representing media seasons (WINTER, SPRING, etc)."""

    WINTER = "WINTER"
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    FALL = "FALL"


class MediaListStatus(AniListBaseEnum):
    """Enum representing status of a media list entry (CURRENT, COMPLETED, etc)."""

    CURRENT = "CURRENT"
    PLANNING = "PLANNING"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"
    PAUSED = "PAUSED"
    REPEATING = "REPEATING"


class AniListBaseModel(BaseModel):
    """Base class for all AniList models representing GraphQL objects.

    Fields are declared in snake_case and aliased to AniList's camelCase, so
    raw GraphQL JSON validates directly and dumps back to the wire format.
    """

    def model_dump(self, **kwargs) -> dict:
        """Convert the model to a dictionary, converting all keys to camelCase.

        Returns:
            dict: Dictionary representation of the model.
        """
        return super().model_dump(by_alias=True, **kwargs)

    def __repr__(self) -> str:
        """Return string representation of the model."""
        fields = " : ".join(
            [f"{k}={v}" for k, v in self.model_dump().items() if v is not None]
        )
        return f"<{fields}>"

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class MediaTitle(AniListBaseModel):
    """Model representing media titles in various languages."""

    romaji: str | None = None
    english: str | None = None
    native: str | None = None
    user_preferred: str | None = None

    def __str__(self) -> str:
        """Return the first available title or an empty string.

        Returns:
            str: A title or an empty string.
        """
        return self.user_preferred or self.english or self.romaji or self.native or ""


class MediaCoverImage(AniListBaseModel):
    """Model representing a media cover image."""

    extra_large: str | None = None
    large: str | None = None
    medium: str | None = None
    color: str | None = None


class NextAiringEpisode(AniListBaseModel):
    """Model representing the next episode scheduled to air."""

    episode: int | None = None
    time_until_airing: int | None = None


class CustomListMembership(AniListBaseModel):
    """Model representing an entry's membership of one custom list."""

    name: str
    enabled: bool = False


class MediaList(AniListBaseModel):
    """Model representing the viewer's list entry for a media."""

    id: int | None = None
    status: MediaListStatus | None = None
    progress: int | None = None
    repeat: int | None = None
    score: float | None = None
    custom_lists: list[CustomListMembership] | None = None

    def enabled_custom_lists(self) -> list[str]:
        """Return the names of the custom lists this entry belongs to.

        Returns:
            list[str]: Custom list names whose membership flag is set.
        """
        return [cl.name for cl in self.custom_lists or [] if cl.enabled]

    def __str__(self) -> str:
        """Return string representation of the MediaList entry."""
        return (
            f"(status={self.status}, progress={self.progress}, "
            f"repeat={self.repeat}, custom_lists={self.enabled_custom_lists()})"
        )


class Media(AniListBaseModel):
    """Model representing a media entry with list information."""

    id: int
    format: MediaFormat | None = None
    status: MediaStatus | None = None
    season: MediaSeason | None = None
    season_year: int | None = None
    episodes: int | None = None
    duration: int | None = None
    average_score: int | None = None
    genres: list[str] | None = None
    synonyms: list[str] | None = None
    is_adult: bool | None = None
    title: MediaTitle | None = None
    cover_image: MediaCoverImage | None = None
    next_airing_episode: NextAiringEpisode | None = None
    media_list_entry: MediaList | None = None

    # Populated while ranking search results, never sent to AniList
    match_distance: int | None = Field(default=None, exclude=True)

    def __str__(self) -> str:
        """Return the preferred title followed by the AniList id."""
        return f"{self.title or ''} (anilist_id: {self.id})".strip()


class AnimeListOptions(AniListBaseModel):
    """Model representing the viewer's anime list options."""

    custom_lists: list[str] | None = None


class MediaListOptions(AniListBaseModel):
    """Model representing media list options for a user."""

    anime_list: AnimeListOptions | None = None


class UserAvatar(AniListBaseModel):
    """Model representing a user's avatar."""

    large: str | None = None
    medium: str | None = None


class User(AniListBaseModel):
    """Model representing an AniList user."""

    id: int
    name: str
    avatar: UserAvatar | None = None
    media_list_options: MediaListOptions | None = None

    def anime_custom_lists(self) -> list[str]:
        """Return the names of the user's anime custom lists.

        Returns:
            list[str]: Custom list names, empty when none are configured.
        """
        options = self.media_list_options
        if options is None or options.anime_list is None:
            return []
        return list(options.anime_list.custom_lists or [])
