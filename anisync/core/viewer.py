"""Startup bootstrap of the authenticated AniList viewer."""

import asyncio

from anisync import log
from anisync.core.anilist import AniListClient
from anisync.models.anilist import User
from anisync.models.request import RequestDescriptor, RequestMethod

__all__ = ["ViewerBootstrap"]


class ViewerBootstrap:
    """Fetches the viewer once and makes sure the sentinel custom list exists."""

    def __init__(self, client: AniListClient, sentinel: str) -> None:
        """Initialize the bootstrap.

        Args:
            client (AniListClient): Client holding the viewer cache.
            sentinel (str): Custom list name that must exist on the viewer.
        """
        self.client = client
        self.sentinel = sentinel
        self._task: asyncio.Task[User | None] | None = None

    async def run(self) -> User | None:
        """Run the bootstrap, sharing a single execution between all callers.

        A run that fails or finds no viewer is forgotten, so the next call
        starts a new one.

        Returns:
            User | None: The viewer, or None without a credential or on failure.
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._bootstrap())
        task = self._task

        try:
            viewer = await asyncio.shield(task)
        except Exception:
            self._forget(task)
            raise

        if viewer is None:
            self._forget(task)
        return viewer

    def _forget(self, task: asyncio.Task[User | None]) -> None:
        if self._task is task:
            self._task = None

    async def _bootstrap(self) -> User | None:
        if not self.client.token:
            log.debug("No AniList token configured, skipping viewer bootstrap")
            return None

        viewer = await self.client.get_viewer()
        if viewer is None:
            return None

        lists = viewer.anime_custom_lists()
        if self.sentinel not in lists:
            log.info(f"Creating the $$'{self.sentinel}'$$ custom list on AniList")
            await self.client.execute(
                RequestDescriptor.of(
                    RequestMethod.CUSTOM_LIST, lists=[*lists, self.sentinel]
                )
            )
        return viewer
