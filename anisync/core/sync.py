"""Reconciliation of local playback progress with the AniList watch list."""

import math

from anisync import log
from anisync.core.anilist import AniListClient
from anisync.models.anilist import (
    Media,
    MediaFormat,
    MediaListStatus,
    MediaStatus,
)
from anisync.models.request import (
    LocalPlaybackEvent,
    RequestDescriptor,
    RequestMethod,
)

__all__ = ["ProgressSyncEngine", "coerce_episode", "plan_entry_update"]

SYNCABLE_STATUSES = frozenset({MediaStatus.FINISHED, MediaStatus.RELEASING})


def coerce_episode(value: int | float | str | None) -> int | None:
    """Coerce a locally observed episode number to an integer.

    Args:
        value (int | float | str | None): Episode as detected locally.

    Returns:
        int | None: The episode number, or None if ``value`` is not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def is_single_episode(media: Media) -> bool:
    """Whether the media is treated as a single-episode release.

    Titles without a known episode count, and movies with exactly one
    episode, count as single-episode.
    """
    return not media.episodes or (
        media.format == MediaFormat.MOVIE and media.episodes == 1
    )


def plan_entry_update(
    media: Media | None, episode: int | str | None, sentinel: str
) -> RequestDescriptor | None:
    """Decide which list entry update, if any, a playback event warrants.

    Args:
        media (Media | None): The resolved AniList media, with its list entry.
        episode (int | str | None): The locally observed episode number.
        sentinel (str): Custom list that every synced entry is added to.

    Returns:
        RequestDescriptor | None: An ``Entry`` update, or None when the event
            must not touch the remote list.
    """
    if media is None or media.status not in SYNCABLE_STATUSES:
        return None

    single_episode = 1 if is_single_episode(media) else None
    observed = coerce_episode(episode) or single_episode

    next_airing = media.next_airing_episode
    expected = (
        (next_airing.episode if next_airing else None)
        or media.episodes
        or single_episode
    )

    # An episode past the known extent means the media was mis-resolved
    if not observed or not expected or expected < observed:
        return None

    entry = media.media_list_entry
    if entry is not None and (entry.progress or 0) > observed and not single_episode:
        return None

    status = MediaListStatus.CURRENT
    repeat = (entry.repeat if entry else None) or 0
    if observed == expected:
        status = MediaListStatus.COMPLETED
        if entry is not None and entry.status == MediaListStatus.REPEATING:
            repeat += 1

    lists = entry.enabled_custom_lists() if entry else []
    if sentinel not in lists:
        lists.append(sentinel)

    return RequestDescriptor.of(
        RequestMethod.ENTRY,
        id=media.id,
        status=status.value,
        episode=observed,
        repeat=repeat,
        lists=lists,
    )


class ProgressSyncEngine:
    """Pushes locally observed playback progress to the viewer's AniList list.

    Each sync issues at most one ``Entry`` request. Events failing any of the
    gates of ``plan_entry_update`` are dropped silently, and failed updates
    are only surfaced by the client's notifications, never retried here.
    """

    def __init__(self, client: AniListClient, sentinel: str) -> None:
        """Initialize the engine.

        Args:
            client (AniListClient): Client used to send the update.
            sentinel (str): Custom list that marks synced entries.
        """
        self.client = client
        self.sentinel = sentinel

    async def sync(self, event: LocalPlaybackEvent) -> None:
        """Update the remote list entry for a playback event when warranted.

        Args:
            event (LocalPlaybackEvent): The media and episode being played.
        """
        if event.media is None or not self.client.token:
            return

        descriptor = plan_entry_update(event.media, event.episode, self.sentinel)
        if descriptor is None:
            log.debug(
                f"Skipping sync of {event.media} $${{episode: {event.episode}}}$$"
            )
            return

        params = descriptor.params
        log.info(
            f"Syncing {event.media} $${{status: {params['status']}, "
            f"progress: {params['episode']}, repeat: {params['repeat']}}}$$"
        )
        result = await self.client.execute(descriptor)
        if result.ok:
            log.success(f"Synced {event.media}")
