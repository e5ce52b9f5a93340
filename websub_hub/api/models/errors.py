"""Error response models for consistent API error handling."""

from enum import Enum
from http import HTTPStatus

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed body, missing fields, etc.)."""

    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    """The subscriber did not confirm the (un)subscription intent."""

    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    """Unsubscribe targeted a subscription that does not exist."""

    TOPIC_FETCH_FAILED = "TOPIC_FETCH_FAILED"
    """The topic URL could not be fetched on publish."""

    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    """The subscription store failed."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    message: str


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx response.

    Example:
        {
            "statusCode": 403,
            "error": "Forbidden",
            "message": "Subscriber has return an invalid answer",
            "code": "VERIFICATION_FAILED"
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(serialization_alias="statusCode")
    error: str
    message: str
    code: ErrorCode
    details: list[ErrorDetail] | None = None

    @classmethod
    def build(
        cls,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: list[ErrorDetail] | None = None,
    ) -> "ErrorResponse":
        return cls(
            status_code=status_code,
            error=HTTPStatus(status_code).phrase,
            message=message,
            code=code,
            details=details,
        )

    def to_content(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
