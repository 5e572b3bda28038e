"""Tests for best-match search resolution."""

import pytest

from anisync.core.search import SearchResolver, match_distance
from anisync.models.request import AniListResult
from tests.core.fakes import FakeAniListClient, json_response, page_payload


def media(media_id: int, *titles: str | None, synonyms=None) -> dict:
    """Build a raw media object with the given romaji/english/native titles."""
    keys = ("romaji", "english", "native", "userPreferred")
    return {
        "id": media_id,
        "title": dict(zip(keys, titles, strict=False)),
        "synonyms": synonyms or [],
        "status": "FINISHED",
        "episodes": 12,
    }


def test_match_distance_uses_closest_title_case_insensitively() -> None:
    """The distance is the minimum over every title and synonym."""
    frieren = media(
        1,
        "Sousou no Frieren",
        "Frieren: Beyond Journey's End",
        "葬送のフリーレン",
        synonyms=["FRIEREN"],
    )

    assert match_distance(frieren, "frieren") == 0
    assert match_distance(frieren, "Sousou no Frieren!") == 1


def test_match_distance_skips_empty_titles() -> None:
    """Missing and empty titles do not take part in the comparison."""
    record = media(2, None, "", synonyms=["", "abc"])

    assert match_distance(record, "abd") == 1


def test_match_distance_without_titles() -> None:
    """Media without any usable title has no distance."""
    assert match_distance({"id": 3, "title": None, "synonyms": None}, "x") is None


def test_match_distance_uses_given_distance() -> None:
    """A custom distance function is applied to lower-cased strings."""
    calls: list[tuple[str, str]] = []

    def distance(a: str, b: str) -> int:
        calls.append((a, b))
        return len(a)

    assert match_distance(media(4, "AB", "ABCD"), "Q", distance) == 2
    assert calls == [("ab", "q"), ("abcd", "q")]


@pytest.mark.asyncio
async def test_search_keeps_only_closest_candidate() -> None:
    """Only the lowest-distance media is returned, as a single-item page."""
    client = FakeAniListClient(
        [
            json_response(
                page_payload(
                    media(1, "Frieren Special"),
                    media(2, "Sousou no Frieren", synonyms=["Frieren"]),
                    media(3, "Something Else"),
                )
            )
        ]
    )

    result = await SearchResolver(client).search("frieren")

    assert result.ok
    assert client.bodies[0]["variables"]["search"] == "frieren"
    raw = result.page_media_raw()
    assert raw is not None and len(raw) == 1
    assert raw[0]["id"] == 2
    assert raw[0]["matchDistance"] == 0
    assert result.payload == {"data": {"Page": {"media": raw}}}

    (best,) = result.page_media()
    assert best.id == 2
    assert best.match_distance == 0


@pytest.mark.asyncio
async def test_search_breaks_ties_by_order() -> None:
    """The first candidate wins when distances are equal."""
    client = FakeAniListClient(
        [json_response(page_payload(media(10, "abcx"), media(11, "abcy")))]
    )

    result = await SearchResolver(client).search("abcz")

    assert [m.id for m in result.page_media()] == [10]


@pytest.mark.asyncio
async def test_search_ranks_untitled_media_last() -> None:
    """Media without titles never beat a titled candidate."""
    client = FakeAniListClient(
        [
            json_response(
                page_payload(
                    {"id": 20, "title": None, "synonyms": []},
                    media(21, "zzzzzzzz"),
                )
            )
        ]
    )

    result = await SearchResolver(client).search("a")

    assert [m.id for m in result.page_media()] == [21]


@pytest.mark.asyncio
async def test_search_passes_empty_page_through() -> None:
    """An empty page is returned unchanged."""
    client = FakeAniListClient([json_response(page_payload())])

    result = await SearchResolver(client).search("nothing")

    assert result.page_media() == []
    assert result.payload == page_payload()


@pytest.mark.asyncio
async def test_search_passes_failures_through() -> None:
    """A failed search is returned unchanged, error markers included."""
    client = FakeAniListClient(
        [json_response({"data": None, "errors": [{"message": "down"}]}, status=500)]
    )

    result = await SearchResolver(client).search("frieren")

    assert isinstance(result, AniListResult)
    assert not result.ok
    assert result.page_media() == []
    assert len(client.notifications.calls) == 1
