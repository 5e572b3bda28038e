"""Request and result types exchanged with the AniList client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from anisync.exceptions import AniListError, UnknownOperationError
from anisync.models.anilist import Media

__all__ = [
    "AniListResult",
    "LocalPlaybackEvent",
    "RequestDescriptor",
    "RequestMethod",
]


class RequestMethod(StrEnum):
    """Symbolic names of every operation the client knows how to send."""

    VIEWER = "Viewer"
    SEARCH_NAME = "SearchName"
    SEARCH_ID_SINGLE = "SearchIDSingle"
    SEARCH_IDS = "SearchIDS"
    USER_LISTS = "UserLists"
    SEARCH_ID_STATUS = "SearchIDStatus"
    AIRING_SCHEDULE = "AiringSchedule"
    SEARCH = "Search"
    ENTRY = "Entry"
    DELETE = "Delete"
    FOLLOWING = "Following"
    CUSTOM_LIST = "CustomList"


@dataclass(frozen=True)
class RequestDescriptor:
    """An operation name plus its named parameters.

    Descriptors are immutable; ``params`` is exposed as a read-only mapping.
    """

    method: RequestMethod
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the method and freeze the parameters."""
        try:
            method = RequestMethod(self.method)
        except ValueError as e:
            raise UnknownOperationError(
                f"Unknown AniList operation '{self.method}'"
            ) from e
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def of(cls, method: RequestMethod | str, **params: Any) -> RequestDescriptor:
        """Build a descriptor from keyword parameters.

        Args:
            method (RequestMethod | str): Operation name, e.g. ``"SearchName"``.
            **params: Operation parameters.

        Returns:
            RequestDescriptor: The immutable descriptor.

        Raises:
            UnknownOperationError: If ``method`` is not a known operation.
        """
        return cls(method=method, params=params)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        """Return string representation of the descriptor."""
        return f"<RequestDescriptor {self.method.value} {dict(self.params)}>"


@dataclass
class AniListResult:
    """Best-effort outcome of a single AniList request.

    ``payload`` holds the parsed response body, which may be ``None`` or only
    partially populated when something went wrong. Failures are never raised;
    they are collected in ``errors`` instead.
    """

    payload: dict[str, Any] | None = None
    status: int | None = None
    errors: list[AniListError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the request completed without any recorded error."""
        return not self.errors

    @property
    def data(self) -> dict[str, Any]:
        """The ``data`` object of the payload, or an empty dict."""
        if not isinstance(self.payload, dict):
            return {}
        return self.payload.get("data") or {}

    def page_media_raw(self) -> list[dict[str, Any]] | None:
        """Return the raw ``data.Page.media`` list, or None if there is no page."""
        page = self.data.get("Page")
        if not isinstance(page, dict):
            return None
        media = page.get("media")
        return media if isinstance(media, list) else None

    def page_media(self) -> list[Media]:
        """Return ``data.Page.media`` validated as Media models.

        Returns:
            list[Media]: The media of the page, empty when there is no page.
        """
        return [Media.model_validate(m) for m in self.page_media_raw() or []]


@dataclass
class LocalPlaybackEvent:
    """A locally detected media together with the episode being played."""

    media: Media | None
    episode: int | str | None = None
