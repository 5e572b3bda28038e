"""Wiring of the AniSync components behind three entry points."""

from typing import Any

from anisync import log
from anisync.config.settings import AniSyncConfig, get_config
from anisync.core.anilist import AniListClient, CredentialProvider
from anisync.core.notify import Notifier
from anisync.core.search import Distance, SearchResolver
from anisync.core.sync import ProgressSyncEngine
from anisync.core.viewer import ViewerBootstrap
from anisync.models.anilist import User
from anisync.models.request import AniListResult, LocalPlaybackEvent, RequestDescriptor
from anisync.utils.rate_limiter import RateLimiter

__all__ = ["AniSyncService"]


class AniSyncService:
    """Facade exposing ``execute``, ``search`` and ``sync``.

    One service owns the process-wide rate limiter and the AniList client
    shared by the search resolver, the sync engine and the viewer bootstrap.
    """

    def __init__(
        self,
        config: AniSyncConfig | None = None,
        *,
        credential_provider: CredentialProvider | None = None,
        notifier: Notifier | None = None,
        distance: Distance | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config (AniSyncConfig | None): Configuration, the global one by default.
            credential_provider (CredentialProvider | None): Token source, the
                configured token by default.
            notifier (Notifier | None): Sink for user-visible errors.
            distance (Distance | None): Edit distance used to rank matches.
            rate_limiter (RateLimiter | None): Limiter to share, a new one built
                from the configuration by default.
        """
        self.config = config or get_config()
        self.rate_limiter = rate_limiter or RateLimiter(
            max_concurrent=self.config.max_concurrent,
            min_time=self.config.min_time,
        )
        self.client = AniListClient(
            rate_limiter=self.rate_limiter,
            credential_provider=credential_provider or (lambda: self.config.token),
            notifier=notifier,
            api_url=self.config.api_url,
            notify_duration=self.config.notify_duration,
        )
        self.resolver = SearchResolver(self.client, distance=distance)
        self.engine = ProgressSyncEngine(self.client, self.config.sentinel_list)
        self.bootstrap = ViewerBootstrap(self.client, self.config.sentinel_list)

    async def __aenter__(self) -> "AniSyncService":
        """Start the service when entering the async context."""
        await self.start()
        return self

    async def __aexit__(self, *_) -> None:
        """Close the service when leaving the async context."""
        await self.close()

    async def start(self) -> User | None:
        """Run the viewer bootstrap (once per service).

        Returns:
            User | None: The authenticated viewer, if any.
        """
        viewer = await self.bootstrap.run()
        if viewer is not None:
            log.success(f"AniSync started for AniList user $$'{viewer.name}'$$")
        return viewer

    async def close(self) -> None:
        """Release the HTTP session."""
        await self.client.close()

    async def execute(self, descriptor: RequestDescriptor) -> AniListResult:
        """Send an arbitrary request descriptor."""
        return await self.client.execute(descriptor)

    async def search(self, name: str, **params: Any) -> AniListResult:
        """Resolve ``name`` to its closest AniList media."""
        return await self.resolver.search(name, **params)

    async def sync(self, event: LocalPlaybackEvent) -> None:
        """Push a playback event to the viewer's list when warranted."""
        await self.engine.sync(event)
