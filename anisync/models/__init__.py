"""Models Initialization Module."""

from anisync.models.anilist import Media, MediaList, User
from anisync.models.request import (
    AniListResult,
    LocalPlaybackEvent,
    RequestDescriptor,
    RequestMethod,
)

__all__ = [
    "AniListResult",
    "LocalPlaybackEvent",
    "Media",
    "MediaList",
    "RequestDescriptor",
    "RequestMethod",
    "User",
]
