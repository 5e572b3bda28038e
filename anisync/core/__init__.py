"""Core Module Initialization."""

from anisync.core.anilist import AniListClient
from anisync.core.search import SearchResolver
from anisync.core.sync import ProgressSyncEngine
from anisync.core.viewer import ViewerBootstrap

from anisync.core.service import AniSyncService  # isort:skip

__all__ = [
    "AniListClient",
    "AniSyncService",
    "ProgressSyncEngine",
    "SearchResolver",
    "ViewerBootstrap",
]
