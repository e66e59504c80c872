from __future__ import annotations

from typing import Any, Optional


class NameLookupError(Exception):
    """Base for every failure a lookup can surface to the user."""

    kind: str = "unknown"
    default_description: str = "Could not fetch data."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message
        super().__init__(message or self.default_description)

    def describe(self) -> str:
        return self.message or self.default_description


class EmptyNameError(NameLookupError):
    kind = "empty_name"
    default_description = "Please enter a name."

    def describe(self) -> str:
        return self.default_description


class FetchError(NameLookupError):
    """Failure of a single upstream request."""


class UnauthorizedError(FetchError):
    kind = "unauthorized"
    default_description = "Invalid API key."


class PaymentRequiredError(FetchError):
    kind = "payment_required"
    default_description = "Subscription is not active."


class UnprocessableError(FetchError):
    kind = "unprocessable"
    default_description = "Invalid or missing name parameter."


class TooManyRequestsError(FetchError):
    kind = "too_many_requests"
    default_description = "Too many requests."


class DecodingError(FetchError):
    kind = "decoding"
    default_description = "Failed to decode server response."

    def __init__(self) -> None:
        # Parse details are intentionally not carried
        super().__init__(None)


class NetworkError(FetchError):
    kind = "network"
    default_description = "Network connection failed."

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(str(cause) or None)


class UnknownFetchError(FetchError):
    kind = "unknown"


_STATUS_ERRORS: dict[int, type[FetchError]] = {
    401: UnauthorizedError,
    402: PaymentRequiredError,
    422: UnprocessableError,
    429: TooManyRequestsError,
}


def _server_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str):
            return message
    return None


def error_from_response(status_code: int, body: Any = None) -> FetchError:
    """Map a non-2xx status and its (already JSON-decoded) body to a typed error."""
    error_cls = _STATUS_ERRORS.get(status_code, UnknownFetchError)
    return error_cls(_server_message(body))
