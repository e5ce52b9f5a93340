"""API exception hierarchy for consistent error handling.

All API exceptions inherit from HubAPIError, which provides status_code
and error_code attributes used by the global exception handler to build
the error body.
"""

from websub_hub.api.models.errors import ErrorCode


class HubAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(HubAPIError):
    """Raised when the request body cannot be read or validated."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class IntentNotVerifiedError(HubAPIError):
    """Raised when the subscriber failed intent verification."""

    status_code = 403
    error_code = ErrorCode.VERIFICATION_FAILED


class SubscriptionNotFoundAPIError(HubAPIError):
    """Raised when unsubscribing an unknown subscription."""

    status_code = 404
    error_code = ErrorCode.SUBSCRIPTION_NOT_FOUND


class TopicUnavailableError(HubAPIError):
    """Raised when the topic could not be fetched on publish."""

    status_code = 503
    error_code = ErrorCode.TOPIC_FETCH_FAILED

