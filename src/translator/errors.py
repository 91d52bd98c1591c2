"""Closed failure taxonomy for chat completions.

Backend failures are reduced to an ``ErrorSignal`` (status code, error code,
message) and classified by table lookup, so supporting a new backend means
adding table entries rather than branches.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import openai


class ErrorKind(str, Enum):
    CONFIG_MISSING = "config_missing"
    MESSAGES_INVALID = "messages_invalid"
    UNKNOWN_PROVIDER = "unknown_provider"
    API_KEY_REQUIRED = "api_key_required"
    EMPTY_RESPONSE = "empty_response"
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    MODEL_NOT_FOUND = "model_not_found"
    CONNECTION_REFUSED = "connection_refused"
    UNKNOWN = "unknown"


HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.CONFIG_MISSING: 400,
    ErrorKind.MESSAGES_INVALID: 400,
    ErrorKind.UNKNOWN_PROVIDER: 400,
    ErrorKind.API_KEY_REQUIRED: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.MODEL_NOT_FOUND: 404,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.CONNECTION_REFUSED: 503,
    ErrorKind.EMPTY_RESPONSE: 500,
    ErrorKind.UNKNOWN: 500,
}

# Failures that mean the user has to revisit their settings.
CONFIG_ERRORS = frozenset(
    {ErrorKind.UNKNOWN_PROVIDER, ErrorKind.API_KEY_REQUIRED, ErrorKind.INVALID_CREDENTIALS}
)

CONFIG_MISSING_MESSAGE = "LLM configuration is required"
MESSAGES_INVALID_MESSAGE = "Messages array is required"
UNKNOWN_PROVIDER_MESSAGE = "Invalid provider ID"
API_KEY_REQUIRED_MESSAGE = "API key is required for {provider}"
EMPTY_RESPONSE_MESSAGE = "No response from {provider}"
FALLBACK_MESSAGE = "Failed to get response from AI"

_DISPLAY_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CREDENTIALS: "Invalid API key. Please check your API key.",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded or insufficient quota.",
    ErrorKind.MODEL_NOT_FOUND: "Model not found or not available.",
    ErrorKind.CONNECTION_REFUSED: "Cannot connect to the LLM service. Make sure it is running.",
}

# Backend signal tables. Error codes are the most specific, then HTTP status,
# then well-known message fragments.
_BY_CODE: dict[str, ErrorKind] = {
    "invalid_api_key": ErrorKind.INVALID_CREDENTIALS,
    "insufficient_quota": ErrorKind.RATE_LIMITED,
    "rate_limit_exceeded": ErrorKind.RATE_LIMITED,
    "model_not_found": ErrorKind.MODEL_NOT_FOUND,
    "ECONNREFUSED": ErrorKind.CONNECTION_REFUSED,
    "connection_error": ErrorKind.CONNECTION_REFUSED,
}

_BY_STATUS: dict[int, ErrorKind] = {
    401: ErrorKind.INVALID_CREDENTIALS,
    404: ErrorKind.MODEL_NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}

_BY_MESSAGE: dict[str, ErrorKind] = {
    "ECONNREFUSED": ErrorKind.CONNECTION_REFUSED,
    "Connection refused": ErrorKind.CONNECTION_REFUSED,
}

# Texts of the inbound route's 400 responses, used to recover the exact kind
# on the client side.
_PRECONDITION_FRAGMENTS: dict[str, ErrorKind] = {
    CONFIG_MISSING_MESSAGE: ErrorKind.CONFIG_MISSING,
    MESSAGES_INVALID_MESSAGE: ErrorKind.MESSAGES_INVALID,
    UNKNOWN_PROVIDER_MESSAGE: ErrorKind.UNKNOWN_PROVIDER,
    "API key is required": ErrorKind.API_KEY_REQUIRED,
    "No response from": ErrorKind.EMPTY_RESPONSE,
}


@dataclass(frozen=True)
class ErrorSignal:
    status: Optional[int] = None
    code: Optional[str] = None
    message: str = ""


@dataclass(frozen=True)
class TranslationError:
    kind: ErrorKind
    message: str          # human-readable, shown to the user
    detail: str = ""      # original backend message, if any

    @property
    def status(self) -> int:
        return HTTP_STATUS[self.kind]

    @property
    def needs_reconfiguration(self) -> bool:
        return self.kind in CONFIG_ERRORS


def classify_error(signal: ErrorSignal) -> ErrorKind:
    """Map a backend failure signal onto the taxonomy. Never fails."""
    if signal.code and signal.code in _BY_CODE:
        return _BY_CODE[signal.code]
    if signal.status in _BY_STATUS:
        return _BY_STATUS[signal.status]
    for fragment, kind in _BY_MESSAGE.items():
        if fragment in (signal.message or ""):
            return kind
    return ErrorKind.UNKNOWN


def error_from_signal(signal: ErrorSignal) -> TranslationError:
    kind = classify_error(signal)
    message = _DISPLAY_MESSAGES.get(kind) or signal.message or FALLBACK_MESSAGE
    return TranslationError(kind=kind, message=message, detail=signal.message)


def signal_from_exception(exc: BaseException) -> ErrorSignal:
    """Reduce an exception raised by the outbound call to an ErrorSignal."""
    if isinstance(exc, openai.APITimeoutError):
        return ErrorSignal(code="timeout", message=str(exc))
    if isinstance(exc, openai.APIConnectionError):
        cause = exc.__cause__
        return ErrorSignal(code="connection_error", message=str(cause or exc))
    if isinstance(exc, openai.APIStatusError):
        code = exc.code if isinstance(exc.code, str) else None
        return ErrorSignal(status=exc.status_code, code=code, message=exc.message)

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    code = getattr(exc, "code", None)
    return ErrorSignal(
        status=status if isinstance(status, int) else None,
        code=code if isinstance(code, str) else None,
        message=str(exc),
    )


def error_from_route_response(status: int, message: str) -> TranslationError:
    """Rebuild a TranslationError from an inbound route error response."""
    kind = ErrorKind.UNKNOWN
    for fragment, candidate in _PRECONDITION_FRAGMENTS.items():
        if fragment in message and HTTP_STATUS[candidate] == status:
            kind = candidate
            break
    else:
        by_status = [k for k, s in HTTP_STATUS.items() if s == status]
        if len(by_status) == 1:
            kind = by_status[0]
    return TranslationError(kind=kind, message=message or FALLBACK_MESSAGE, detail=message)
