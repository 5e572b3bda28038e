"""Tests for the AniList models."""

from anisync.models.anilist import Media, MediaFormat, MediaList, User


def test_media_validates_camel_case_payload() -> None:
    """Raw AniList JSON validates into snake_case fields."""
    media = Media.model_validate(
        {
            "id": 1,
            "format": "MOVIE",
            "title": {"romaji": "Kimi no Na wa.", "english": "Your Name."},
            "nextAiringEpisode": {"episode": 2, "timeUntilAiring": 60},
            "unknownField": True,
        }
    )

    assert media.format is MediaFormat.MOVIE
    assert media.next_airing_episode is not None
    assert media.next_airing_episode.time_until_airing == 60
    assert str(media) == "Your Name. (anilist_id: 1)"


def test_match_distance_is_not_dumped() -> None:
    """The ranking distance stays local and dumps use camelCase keys."""
    media = Media(id=1, episodes=12, match_distance=3)

    dumped = media.model_dump()

    assert "matchDistance" not in dumped
    assert "match_distance" not in dumped
    assert dumped["episodes"] == 12
    assert "mediaListEntry" in dumped


def test_media_list_enabled_custom_lists() -> None:
    """Only custom lists with their membership flag set are reported."""
    entry = MediaList.model_validate(
        {
            "customLists": [
                {"name": "Favourites", "enabled": True},
                {"name": "Dropped Later", "enabled": False},
            ]
        }
    )

    assert entry.enabled_custom_lists() == ["Favourites"]
    assert MediaList().enabled_custom_lists() == []


def test_user_anime_custom_lists() -> None:
    """The viewer's anime custom lists default to an empty list."""
    user = User.model_validate(
        {
            "id": 7,
            "name": "tester",
            "mediaListOptions": {"animeList": {"customLists": ["A", "B"]}},
        }
    )

    assert user.anime_custom_lists() == ["A", "B"]
    assert User(id=8, name="other").anime_custom_lists() == []
