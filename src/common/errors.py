"""Exceptions raised by the report pipeline."""


class ReportError(Exception):
    """Base class for report pipeline errors."""


class ConfigError(ReportError, ValueError):
    """Invalid or incomplete report configuration."""


class FetchError(ReportError):
    """The corpus source could not be queried (network, auth or rate limit)."""


class RateLimitError(FetchError):
    """The content API rejected the request for exceeding its rate limit."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class TransientNetworkError(FetchError):
    """A request failed in a way that may succeed on retry (timeout, 5xx)."""


class MalformedRecordError(ReportError):
    """A fetched or stored article record is missing required fields."""


class InsufficientDataError(ReportError):
    """Not enough data to continue the run (no articles, degenerate topic fit)."""


class UnsupportedMethodError(ReportError, ValueError):
    """Unknown sentiment scoring method."""
