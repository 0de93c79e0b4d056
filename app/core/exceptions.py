"""
Domain exceptions for the quiz pipeline.

Provider failures are reported as ``ServiceError`` with a ``kind`` drawn from
``ServiceErrorKind``; payloads that cannot be coerced into the expected schema
raise a ``MalformedOutputError`` subclass. The generation entry point wraps
both into ``ServiceUnavailableError`` before they reach the HTTP layer.
"""
from enum import Enum
from typing import Optional


class ServiceErrorKind(str, Enum):
    """Failure classes reported by a generation provider."""

    RATE_LIMITED = "rate_limited"
    AUTH_INVALID = "auth_invalid"
    TIMEOUT = "timeout"
    SERVER_OVERLOAD = "server_overload"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"
    BAD_REQUEST = "bad_request"


USER_MESSAGES = {
    ServiceErrorKind.RATE_LIMITED: "AI service rate limit exceeded. Please try again in a few moments.",
    ServiceErrorKind.AUTH_INVALID: "AI service API key invalid or missing. Please check your API configuration.",
    ServiceErrorKind.TIMEOUT: "AI service request timeout. Please try again.",
    ServiceErrorKind.SERVER_OVERLOAD: "AI service is currently overloaded. Please try again later.",
    ServiceErrorKind.EMPTY_RESPONSE: "AI service returned empty response.",
    ServiceErrorKind.MALFORMED_RESPONSE: "AI returned invalid format. Please try again.",
    ServiceErrorKind.BAD_REQUEST: "Bad request to AI service. Please check your input.",
}

RETRYABLE_KINDS = frozenset({
    ServiceErrorKind.RATE_LIMITED,
    ServiceErrorKind.TIMEOUT,
    ServiceErrorKind.SERVER_OVERLOAD,
    ServiceErrorKind.EMPTY_RESPONSE,
    ServiceErrorKind.MALFORMED_RESPONSE,
})


class QuizPipelineError(Exception):
    """Base class for every error raised by the quiz pipeline."""


class ServiceError(QuizPipelineError):
    """The generation provider failed to produce a response."""

    def __init__(self, kind: ServiceErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or USER_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS


class ServiceTimeoutError(ServiceError):
    """The provider did not answer within the configured timeout."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ServiceErrorKind.TIMEOUT, message)


class MalformedOutputError(QuizPipelineError):
    """The provider answered but the payload does not fit the expected schema."""

    kind = ServiceErrorKind.MALFORMED_RESPONSE


class NoJsonFoundError(MalformedOutputError):
    """No ``{...}`` candidate could be located in the provider output."""


class InvalidJsonError(MalformedOutputError):
    """The JSON candidate could not be decoded, even after repair."""


class InvalidQuizFormatError(MalformedOutputError):
    """The decoded payload is not a structurally valid quiz."""


class AnalysisFormatError(MalformedOutputError):
    """The decoded payload is not a performance analysis."""


class ServiceUnavailableError(QuizPipelineError):
    """Quiz generation failed; wraps the provider or parsing error."""

    def __init__(self, kind: ServiceErrorKind, detail: str, retryable: bool = True):
        self.kind = kind
        self.detail = detail
        self.retryable = retryable
        super().__init__(detail)

    @classmethod
    def from_error(cls, error: Exception) -> "ServiceUnavailableError":
        if isinstance(error, ServiceError):
            return cls(error.kind, error.message, error.retryable)
        if isinstance(error, MalformedOutputError):
            return cls(
                ServiceErrorKind.MALFORMED_RESPONSE,
                f"{USER_MESSAGES[ServiceErrorKind.MALFORMED_RESPONSE]} Error: {error}",
            )
        return cls(
            ServiceErrorKind.SERVER_OVERLOAD,
            f"AI service is currently unavailable. Please try again later. Error: {error}",
        )


class NotFoundError(QuizPipelineError):
    """A quiz, book or progress record does not exist."""


class QuizAlreadyCompletedError(QuizPipelineError):
    """The quiz has already been graded."""


class InvalidInputError(QuizPipelineError):
    """Caller input cannot be processed."""
