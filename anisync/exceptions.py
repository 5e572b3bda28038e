"""AniSync exception classes."""


class AniSyncError(Exception):
    """Base class for all AniSync exceptions."""


# Configuration errors
class ConfigError(AniSyncError):
    """Base class for configuration-related errors."""


class UnknownOperationError(ConfigError, ValueError):
    """A request descriptor names an operation that has no query template."""


# AniList client errors
class AniListError(AniSyncError):
    """Base class for AniList-related failures.

    Instances of this hierarchy are usually not raised out of the client. They
    are returned as recoverable markers on an ``AniListResult`` so callers can
    inspect what went wrong without the request ever crashing them.
    """

    def __init__(
        self, message: str = "", status: int | None = None, reason: str | None = None
    ) -> None:
        """Initialize the error.

        Args:
            message (str): Human readable description of the failure.
            status (int | None): HTTP status code associated with the failure.
            reason (str | None): HTTP reason phrase associated with the status.
        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.reason = reason

    def __str__(self) -> str:
        """Return ``<status> - <message or reason>``."""
        detail = self.message or self.reason or ""
        if self.status is None:
            return detail
        return f"{self.status} - {detail}"


class ThrottledError(AniListError):
    """AniList answered with HTTP 429; the request is retried by the limiter."""


class ProviderError(AniListError):
    """AniList reported an application-level error in its response body."""


class TransportError(AniListError):
    """The request failed with an unparseable body or never got a response."""


class MalformedResponseError(AniListError):
    """A successful response carried a body that is not valid JSON."""


class RequestCancelledError(AniListError):
    """The throttle retry loop was cancelled before the request succeeded."""
