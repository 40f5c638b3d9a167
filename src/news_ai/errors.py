"""Error taxonomy for upstream failures.

Every failure coming out of a gateway is reduced to one ``ErrorKind`` so the
controller can decide on a policy (surface, fall back) and render a message
without knowing which provider or transport produced it.
"""

import json
import logging
from enum import StrEnum
from typing import Literal

import anthropic
import httpx

logger = logging.getLogger(__name__)

Operation = Literal["news", "summary", "answer"]


class ErrorKind(StrEnum):
    """Closed set of failure kinds exposed to callers."""

    MISSING_CREDENTIALS = "missing_credentials"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_SERVER_ERROR = "upstream_server_error"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_CONTEXT = "empty_context"
    UNKNOWN = "unknown"


# NewsAPI reports failures in the body as {"status": "error", "code": ...}.
_NEWS_ERROR_CODES: dict[str, ErrorKind] = {
    "apiKeyMissing": ErrorKind.MISSING_CREDENTIALS,
    "apiKeyInvalid": ErrorKind.UNAUTHORIZED,
    "apiKeyDisabled": ErrorKind.UNAUTHORIZED,
    "apiKeyExhausted": ErrorKind.RATE_LIMITED,
    "rateLimited": ErrorKind.RATE_LIMITED,
    "unexpectedError": ErrorKind.UPSTREAM_SERVER_ERROR,
}


class PipelineError(Exception):
    """A classified upstream failure.

    Args:
        kind: The classified failure kind.
        detail: Human-readable detail, usually the provider's message.
        status_code: HTTP status of the failed call, when there was one.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: str = "",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail
        self.status_code = status_code

    @classmethod
    def from_exception(cls, exc: BaseException) -> "PipelineError":
        """Wrap any exception raised while talking to a provider."""
        if isinstance(exc, PipelineError):
            return exc
        return cls(classify_error(exc), str(exc), status_code=_status_of(exc))


def classify_status(status_code: int) -> ErrorKind:
    """Map an HTTP status code to an error kind."""
    if status_code in (401, 403):
        return ErrorKind.UNAUTHORIZED
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code == 503:
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if 500 <= status_code < 600:
        return ErrorKind.UPSTREAM_SERVER_ERROR
    return ErrorKind.UNKNOWN


def classify_news_error_code(code: str | None) -> ErrorKind:
    """Map a NewsAPI error-body code (e.g. ``"apiKeyInvalid"``) to an error kind."""
    if not code:
        return ErrorKind.UNKNOWN
    return _NEWS_ERROR_CODES.get(code, ErrorKind.UNKNOWN)


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a raw exception from a transport or SDK to an error kind."""
    if isinstance(exc, PipelineError):
        return exc.kind
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_status(exc.response.status_code)
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if isinstance(exc, anthropic.APIStatusError):
        return classify_status(exc.status_code)
    if isinstance(exc, anthropic.APIConnectionError):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if isinstance(exc, (json.JSONDecodeError, KeyError, TypeError)):
        return ErrorKind.MALFORMED_RESPONSE
    logger.debug("Unclassified upstream error: %r", exc)
    return ErrorKind.UNKNOWN


def _status_of(exc: BaseException) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    if isinstance(exc, anthropic.APIStatusError):
        return exc.status_code
    return None


_SERVICE_NAMES: dict[str, str] = {
    "news": "News API",
    "summary": "Summary service",
    "answer": "AI service",
}


def user_message(kind: ErrorKind, operation: Operation = "news") -> str:
    """Render an error kind as the message shown to the user.

    Args:
        kind: The classified failure kind.
        operation: Which pipeline operation failed; only used for wording.

    Returns:
        A short, user-facing sentence.
    """
    service = _SERVICE_NAMES[operation]
    if kind is ErrorKind.MISSING_CREDENTIALS:
        return f"{service} key is missing. Add it to your environment and restart."
    if kind is ErrorKind.UNAUTHORIZED:
        return f"Invalid API key. Please check your {service} key."
    if kind is ErrorKind.RATE_LIMITED:
        if operation == "answer":
            return "Rate limit exceeded. Please try again later."
        return "API rate limit exceeded. Please try again later."
    if kind is ErrorKind.UPSTREAM_UNAVAILABLE:
        if operation == "answer":
            return "AI service is currently loading. Please try again in a moment."
        return "Network error. Please check your connection and try again."
    if kind is ErrorKind.UPSTREAM_SERVER_ERROR:
        return f"{service} server error. Please try again later."
    if kind is ErrorKind.MALFORMED_RESPONSE:
        return f"Unexpected response format from {service}."
    if kind is ErrorKind.EMPTY_CONTEXT:
        return "No content available to answer questions about."
    return "An unexpected error occurred. Please try again."
