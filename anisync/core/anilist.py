"""AniList Client."""

import asyncio
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import aiohttp
from pydantic import ValidationError

from anisync import __version__, log
from anisync.core.notify import LogNotifier, Notifier, Severity
from anisync.core.queries import OperationTemplate, get_template
from anisync.exceptions import (
    AniListError,
    MalformedResponseError,
    ProviderError,
    RequestCancelledError,
    ThrottledError,
    TransportError,
    UnknownOperationError,
)
from anisync.models.anilist import User
from anisync.models.request import AniListResult, RequestDescriptor, RequestMethod
from anisync.utils.rate_limiter import RateLimiter

__all__ = ["AniListClient", "CredentialProvider", "RawResponse"]

CredentialProvider = Callable[[], str | None]

# Window covered by an AiringSchedule request, in seconds
AIRING_WINDOW = 7 * 24 * 60 * 60

WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class RawResponse:
    """Status line and body of an HTTP response."""

    status: int
    reason: str | None
    text: str

    @property
    def ok(self) -> bool:
        """Whether the status is a 2xx/3xx success status."""
        return self.status < 400


def status_reason(status: int | None) -> str:
    """Return the standard reason phrase for an HTTP status code."""
    if status is None:
        return "Network Error"
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown Status"


class AniListClient:
    """Client for sending symbolic requests to the AniList GraphQL API.

    Every request is described by a ``RequestDescriptor``, translated into a
    GraphQL document plus variables from a static template, and sent through a
    shared ``RateLimiter``. Failures never propagate to the caller: provider
    and transport errors are logged, reported to the notifier and returned as
    markers on the ``AniListResult``.
    """

    API_URL = "https://graphql.anilist.co"
    NOTIFY_TITLE = "Search Failed"

    DEFAULT_VARIABLES: dict[str, Any] = {
        "type": "ANIME",
        "sort": "TRENDING_DESC",
        "page": 1,
        "perPage": 30,
        "status_in": ["CURRENT", "PLANNING"],
        "chunk": 1,
        "perChunk": 30,
    }

    def __init__(
        self,
        rate_limiter: RateLimiter,
        credential_provider: CredentialProvider | None = None,
        notifier: Notifier | None = None,
        api_url: str | None = None,
        notify_duration: int = 3000,
    ) -> None:
        """Initialize the AniList client.

        Args:
            rate_limiter (RateLimiter): Limiter every request is submitted to.
            credential_provider (CredentialProvider | None): Returns the current
                AniList token, or None to operate in public read-only mode.
            notifier (Notifier | None): Sink for user-visible error messages.
            api_url (str | None): Override for the GraphQL endpoint.
            notify_duration (int): Notification display duration in ms.
        """
        self.rate_limiter = rate_limiter
        self.credential_provider = credential_provider or (lambda: None)
        self.notifier = notifier or LogNotifier()
        self.api_url = api_url or self.API_URL
        self.notify_duration = notify_duration

        self._session: aiohttp.ClientSession | None = None
        self._viewer: User | None = None
        self._viewer_lock = asyncio.Lock()

    async def __aenter__(self) -> "AniListClient":
        """Enter the async context."""
        return self

    async def __aexit__(self, *_) -> None:
        """Close the session when leaving the async context."""
        await self.close()

    @property
    def token(self) -> str | None:
        """The current AniList token, if any."""
        return self.credential_provider() or None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            aiohttp.ClientSession: The active session for making HTTP requests.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "User-Agent": f"AniSync/{__version__}",
                },
                timeout=aiohttp.ClientTimeout(total=None),
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _auth_headers(self) -> dict[str, str]:
        """Build the authorization header for the current credential."""
        token = self.token
        if not token:
            return {}
        if not token.lower().startswith("bearer "):
            token = f"Bearer {token}"
        return {"Authorization": token}

    async def get_viewer(self) -> User | None:
        """Return the authenticated viewer, fetching it at most once.

        Concurrent callers wait on the same fetch. A failed fetch is not
        remembered, so a later call tries again.

        Returns:
            User | None: The viewer, or None without a credential or on failure.
        """
        if self._viewer is not None:
            return self._viewer
        if not self.token:
            return None

        async with self._viewer_lock:
            if self._viewer is not None:
                return self._viewer

            result = await self.execute(RequestDescriptor.of(RequestMethod.VIEWER))
            viewer = result.data.get("Viewer")
            if not viewer:
                log.warning("Unable to fetch the AniList viewer")
                return None

            try:
                self._viewer = User.model_validate(viewer)
            except ValidationError as e:
                log.warning(f"AniList returned an incomplete viewer: {e}")
                return None

            log.debug(
                f"Authenticated as AniList user $$'{self._viewer.name}'$$ "
                f"$${{user_id: {self._viewer.id}}}$$"
            )
            return self._viewer

    async def get_viewer_id(self) -> int | None:
        """Return the authenticated viewer's id, or None when unavailable."""
        viewer = await self.get_viewer()
        return viewer.id if viewer else None

    async def build_variables(
        self, descriptor: RequestDescriptor, template: OperationTemplate
    ) -> dict[str, Any]:
        """Translate descriptor parameters into the template's variables.

        Defaults are applied first, then the template's own defaults, then the
        descriptor's parameters (renamed through the template aliases). Only
        the variables declared by the template are kept, and null ones are
        dropped for templates that omit them.

        Args:
            descriptor (RequestDescriptor): The request to translate.
            template (OperationTemplate): Template selected for the request.

        Returns:
            dict[str, Any]: Variables to send alongside the query.
        """
        bag: dict[str, Any] = {**self.DEFAULT_VARIABLES, **template.defaults}
        for key, value in descriptor.params.items():
            if value is None and key in bag:
                continue
            bag[template.aliases.get(key, key)] = value

        airing = descriptor.method is RequestMethod.AIRING_SCHEDULE
        if airing and bag.get("from") is not None:
            bag["to"] = int(bag["from"]) + AIRING_WINDOW
        if template.viewer_variable:
            bag[template.viewer_variable] = await self.get_viewer_id()

        variables = {name: bag.get(name) for name in template.variables}
        if template.omit_null:
            return {k: v for k, v in variables.items() if v is not None}
        return variables

    async def execute(self, descriptor: RequestDescriptor) -> AniListResult:
        """Send a request to AniList.

        Args:
            descriptor (RequestDescriptor): The operation and its parameters.

        Returns:
            AniListResult: The parsed payload (possibly None or partial) plus any
                recoverable errors encountered on the way.

        Raises:
            UnknownOperationError: If no template exists for the descriptor.
        """
        try:
            template = get_template(descriptor.method)
        except KeyError as e:
            raise UnknownOperationError(
                f"No query template for AniList operation '{descriptor.method}'"
            ) from e

        variables = await self.build_variables(descriptor, template)
        body = {
            "query": WHITESPACE_PATTERN.sub(" ", template.query).strip(),
            "variables": variables,
        }
        log.debug(
            f"Sending AniList request $$'{descriptor.method.value}'$$ "
            f"$${{variables: {variables}}}$$"
        )

        try:
            return await self.rate_limiter.submit(lambda: self._make_request(body))
        except RequestCancelledError as e:
            log.warning(f"AniList request $$'{descriptor.method.value}'$$ cancelled")
            return AniListResult(errors=[e])

    async def _send(self, body: dict[str, Any]) -> RawResponse:
        """POST a GraphQL body and read the raw response.

        Args:
            body (dict[str, Any]): The ``{query, variables}`` document.

        Returns:
            RawResponse: Status, reason and text of the response.
        """
        session = await self._get_session()
        async with session.post(
            self.api_url, json=body, headers=self._auth_headers()
        ) as response:
            return RawResponse(
                status=response.status,
                reason=response.reason,
                text=await response.text(),
            )

    async def _make_request(self, body: dict[str, Any]) -> AniListResult:
        """Perform one attempt of a request and normalize its outcome.

        Raises:
            ThrottledError: If AniList answered with HTTP 429.
        """
        try:
            response = await self._send(body)
        except (TimeoutError, aiohttp.ClientError) as e:
            log.error(f"Connection error while making request to AniList API: {e}")
            error = TransportError(str(e), status=None, reason=status_reason(None))
            self._report(error)
            return AniListResult(errors=[error])

        if response.status == HTTPStatus.TOO_MANY_REQUESTS:
            raise ThrottledError(status=response.status, reason=response.reason)

        payload: dict[str, Any] | None = None
        try:
            payload = json.loads(response.text)
        except ValueError:
            payload = None

        result = AniListResult(payload=payload, status=response.status)

        if response.ok:
            if payload is None:
                log.warning(
                    f"AniList returned a non-JSON body "
                    f"$${{status: {response.status}}}$$"
                )
                result.errors.append(
                    MalformedResponseError(
                        "Response body is not valid JSON",
                        status=response.status,
                        reason=response.reason,
                    )
                )
            return result

        reason = response.reason or status_reason(response.status)
        if isinstance(payload, dict):
            for item in payload.get("errors") or []:
                item = item if isinstance(item, dict) else {"message": str(item)}
                error = ProviderError(
                    item.get("message") or "",
                    status=item.get("status") or response.status,
                    reason=reason,
                )
                self._report(error)
                result.errors.append(error)
        else:
            error = TransportError(status=response.status, reason=reason)
            self._report(error)
            result.errors.append(error)

        return result

    def _report(self, error: AniListError) -> None:
        """Log an error and forward it to the notifier."""
        log.error(f"Failed to make request to AniList API: {error}")
        self.notifier.notify(
            self.NOTIFY_TITLE,
            f"Failed making request to AniList! Try again in a minute. {error}",
            Severity.DANGER,
            self.notify_duration,
        )
