"""Hub error taxonomy.

Components catch transport and backend errors at their boundary and raise
one of these instead, so the HTTP layer never sees raw httpx or redis
exceptions.
"""


class HubError(Exception):
    """Base exception for all hub errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class VerificationFailedError(HubError):
    """Subscriber did not confirm intent.

    Raised for a wrong or missing echo, a non-2xx answer, a timeout or a
    connection failure while contacting the callback.
    """


class SubscriptionNotFoundError(HubError):
    """Unsubscribe targeted a (topic, callback) pair with no subscription."""


class TopicFetchFailedError(HubError):
    """Publish-time GET of the topic URL failed or timed out."""


class DeliveryFailedError(HubError):
    """Delivery to a single subscriber failed.

    Never surfaced to the publisher; only logged.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, cause)
        self.status_code = status_code
        self.retryable = retryable


class StoreUnavailableError(HubError):
    """Underlying subscription storage operation failed."""
