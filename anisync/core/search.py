"""Best-match resolution of locally detected titles."""

from collections.abc import Callable, Iterable
from typing import Any

from rapidfuzz.distance import Levenshtein

from anisync import log
from anisync.core.anilist import AniListClient
from anisync.models.request import AniListResult, RequestDescriptor, RequestMethod

__all__ = ["Distance", "SearchResolver", "match_distance"]

Distance = Callable[[str, str], int]


def _raw_titles(media: dict[str, Any]) -> Iterable[str]:
    """Yield every title variant and synonym of a raw media object."""
    title = media.get("title")
    if isinstance(title, dict):
        yield from (t for t in title.values() if isinstance(t, str) and t)
    yield from (s for s in media.get("synonyms") or [] if isinstance(s, str) and s)


def match_distance(
    media: dict[str, Any], name: str, distance: Distance = Levenshtein.distance
) -> int | None:
    """Compute how far a media's closest title is from ``name``.

    The comparison is case-insensitive and empty titles are skipped.

    Args:
        media (dict[str, Any]): Raw AniList media object.
        name (str): The locally detected title.
        distance (Distance): Edit distance function.

    Returns:
        int | None: The minimum distance, or None if the media has no titles.
    """
    query = name.lower()
    distances = [distance(title.lower(), query) for title in _raw_titles(media)]
    return min(distances) if distances else None


class SearchResolver:
    """Resolves a display name to the single closest AniList media.

    AniList's own search ranking is unreliable for titles derived from file
    names, so every candidate of the first page is re-ranked locally by edit
    distance and only the closest one is kept.
    """

    def __init__(self, client: AniListClient, distance: Distance | None = None) -> None:
        """Initialize the resolver.

        Args:
            client (AniListClient): Client used to run the name search.
            distance (Distance | None): Edit distance function, Levenshtein by
                default.
        """
        self.client = client
        self.distance = distance or Levenshtein.distance

    async def search(self, name: str, **params: Any) -> AniListResult:
        """Search AniList by name and keep only the best match.

        Args:
            name (str): Title to look up.
            **params: Extra ``SearchName`` parameters (``status``, ``perPage``...).

        Returns:
            AniListResult: A single-item page holding the closest media, or the
                original result when AniList returned no candidates.
        """
        result = await self.client.execute(
            RequestDescriptor.of(RequestMethod.SEARCH_NAME, name=name, **params)
        )
        candidates = result.page_media_raw()
        if not candidates:
            log.debug(f"No AniList candidates for $$'{name}'$$")
            return result

        best: dict[str, Any] | None = None
        for media in candidates:
            media["matchDistance"] = match_distance(media, name, self.distance)
            if media["matchDistance"] is None:
                continue
            if best is None or media["matchDistance"] < best["matchDistance"]:
                best = media
        if best is None:
            best = candidates[0]

        log.debug(
            f"Resolved $$'{name}'$$ to AniList media "
            f"$${{anilist_id: {best.get('id')}, distance: {best['matchDistance']}}}$$ "
            f"out of {len(candidates)} candidate(s)"
        )
        return AniListResult(
            payload={"data": {"Page": {"media": [best]}}},
            status=result.status,
            errors=list(result.errors),
        )
