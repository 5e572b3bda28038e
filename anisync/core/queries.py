"""Static AniList GraphQL operation templates.

Each ``RequestMethod`` maps to exactly one ``OperationTemplate``. A template
declares the GraphQL document, the variables it sends, how descriptor
parameters are renamed into variables, its own default overrides, whether
the authenticated viewer's id has to be injected, and whether null
variables are left out.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from anisync.models.request import RequestMethod

__all__ = ["MEDIA_FIELDS", "TEMPLATES", "OperationTemplate", "get_template"]

MEDIA_FIELDS = """
id
title {
  romaji
  english
  native
  userPreferred
}
description(asHtml: false)
season
seasonYear
format
status
episodes
duration
averageScore
genres
coverImage {
  extraLarge
  medium
  color
}
countryOfOrigin
isAdult
bannerImage
synonyms
nextAiringEpisode {
  timeUntilAiring
  episode
}
trailer {
  id
  site
}
streamingEpisodes {
  title
  thumbnail
}
mediaListEntry {
  id
  progress
  repeat
  status
  customLists(asArray: true)
  score(format: POINT_10)
}
source
studios(isMain: true) {
  nodes {
    name
  }
}
airingSchedule(page: 1, perPage: 1, notYetAired: true) {
  nodes {
    episode
  }
}
relations {
  edges {
    relationType(version: 2)
    node {
      id
      title {
        userPreferred
      }
      coverImage {
        medium
      }
      type
      status
      format
      episodes
      startDate {
        year
        month
        day
      }
      endDate {
        year
        month
        day
      }
    }
  }
}
recommendations {
  edges {
    node {
      mediaRecommendation {
        id
        title {
          userPreferred
        }
        coverImage {
          medium
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class OperationTemplate:
    """Static description of one GraphQL operation."""

    query: str
    variables: tuple[str, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)
    viewer_variable: str | None = None
    # Null variables are left out so the mutation keeps the stored values
    omit_null: bool = False


TEMPLATES: Mapping[RequestMethod, OperationTemplate] = MappingProxyType(
    {
        RequestMethod.VIEWER: OperationTemplate(
            query="""
            query {
              Viewer {
                avatar {
                  medium
                }
                name
                id
                mediaListOptions {
                  animeList {
                    customLists
                  }
                }
              }
            }
            """,
        ),
        RequestMethod.SEARCH_NAME: OperationTemplate(
            query=f"""
            query ($page: Int, $perPage: Int, $sort: [MediaSort], $type: MediaType,
                   $search: String, $status: [MediaStatus]) {{
              Page(page: $page, perPage: $perPage) {{
                pageInfo {{
                  hasNextPage
                }}
                media(type: $type, search: $search, sort: $sort,
                      status_in: $status, isAdult: false) {{
                  {MEDIA_FIELDS}
                }}
              }}
            }}
            """,
            variables=("page", "perPage", "sort", "type", "search", "status"),
            aliases={"name": "search"},
        ),
        RequestMethod.SEARCH_ID_SINGLE: OperationTemplate(
            query=f"""
            query ($id: Int, $type: MediaType) {{
              Media(id: $id, type: $type) {{
                {MEDIA_FIELDS}
              }}
            }}
            """,
            variables=("id", "type"),
        ),
        RequestMethod.SEARCH_IDS: OperationTemplate(
            query=f"""
            query ($id: [Int], $type: MediaType, $page: Int, $perPage: Int) {{
              Page(page: $page, perPage: $perPage) {{
                pageInfo {{
                  hasNextPage
                }}
                media(id_in: $id, type: $type) {{
                  {MEDIA_FIELDS}
                }}
              }}
            }}
            """,
            variables=("id", "type", "page", "perPage"),
        ),
        RequestMethod.USER_LISTS: OperationTemplate(
            query=f"""
            query ($page: Int, $perPage: Int, $id: Int, $type: MediaType,
                   $status_in: [MediaListStatus]) {{
              Page(page: $page, perPage: $perPage) {{
                pageInfo {{
                  hasNextPage
                }}
                mediaList(userId: $id, type: $type, status_in: $status_in,
                          sort: UPDATED_TIME_DESC) {{
                  media {{
                    {MEDIA_FIELDS}
                  }}
                }}
              }}
            }}
            """,
            variables=("page", "perPage", "id", "type", "status_in"),
            viewer_variable="id",
        ),
        RequestMethod.SEARCH_ID_STATUS: OperationTemplate(
            query="""
            query ($id: Int, $mediaId: Int) {
              MediaList(userId: $id, mediaId: $mediaId) {
                status
                progress
                repeat
              }
            }
            """,
            variables=("id", "mediaId"),
            aliases={"id": "mediaId"},
            viewer_variable="id",
        ),
        RequestMethod.AIRING_SCHEDULE: OperationTemplate(
            query=f"""
            query ($page: Int, $perPage: Int, $from: Int, $to: Int) {{
              Page(page: $page, perPage: $perPage) {{
                pageInfo {{
                  hasNextPage
                }}
                airingSchedules(airingAt_greater: $from, airingAt_lesser: $to) {{
                  episode
                  timeUntilAiring
                  airingAt
                  media {{
                    {MEDIA_FIELDS}
                  }}
                }}
              }}
            }}
            """,
            variables=("page", "perPage", "from", "to"),
        ),
        RequestMethod.SEARCH: OperationTemplate(
            query=f"""
            query ($page: Int, $perPage: Int, $sort: [MediaSort], $type: MediaType,
                   $search: String, $status: MediaStatus, $season: MediaSeason,
                   $year: Int, $genre: String, $format: MediaFormat) {{
              Page(page: $page, perPage: $perPage) {{
                pageInfo {{
                  hasNextPage
                }}
                media(type: $type, search: $search, sort: $sort, status: $status,
                      season: $season, seasonYear: $year, genre: $genre,
                      format: $format) {{
                  {MEDIA_FIELDS}
                }}
              }}
            }}
            """,
            variables=(
                "page",
                "perPage",
                "sort",
                "type",
                "search",
                "status",
                "season",
                "year",
                "genre",
                "format",
            ),
            defaults={"sort": "SEARCH_MATCH"},
        ),
        RequestMethod.ENTRY: OperationTemplate(
            query="""
            mutation ($lists: [String], $id: Int, $status: MediaListStatus,
                      $episode: Int, $repeat: Int, $score: Int) {
              SaveMediaListEntry(mediaId: $id, status: $status, progress: $episode,
                                 repeat: $repeat, scoreRaw: $score,
                                 customLists: $lists) {
                id
                status
                progress
                repeat
              }
            }
            """,
            variables=("lists", "id", "status", "episode", "repeat", "score"),
            omit_null=True,
        ),
        RequestMethod.DELETE: OperationTemplate(
            query="""
            mutation ($id: Int) {
              DeleteMediaListEntry(id: $id) {
                deleted
              }
            }
            """,
            variables=("id",),
        ),
        RequestMethod.FOLLOWING: OperationTemplate(
            query="""
            query ($id: Int) {
              Page {
                pageInfo {
                  total
                  perPage
                  currentPage
                  lastPage
                  hasNextPage
                }
                mediaList(mediaId: $id, isFollowing: true, sort: UPDATED_TIME_DESC) {
                  id
                  status
                  score
                  progress
                  user {
                    id
                    name
                    avatar {
                      medium
                    }
                    mediaListOptions {
                      scoreFormat
                    }
                  }
                }
              }
            }
            """,
            variables=("id",),
        ),
        RequestMethod.CUSTOM_LIST: OperationTemplate(
            query="""
            mutation ($lists: [String]) {
              UpdateUser(animeListOptions: { customLists: $lists }) {
                id
              }
            }
            """,
            variables=("lists",),
        ),
    }
)


def get_template(method: RequestMethod) -> OperationTemplate:
    """Look up the template registered for ``method``.

    Raises:
        KeyError: If no template is registered for the method.
    """
    return TEMPLATES[method]
