"""Subscribe and unsubscribe endpoint."""

from fastapi import APIRouter

from websub_hub.api.dependencies import HubDep, HubFieldsDep
from websub_hub.api.exceptions import (
    IntentNotVerifiedError,
    SubscriptionNotFoundAPIError,
)
from websub_hub.api.models.requests import SubscribeRequest
from websub_hub.api.models.responses import SubscriptionResponse
from websub_hub.errors import SubscriptionNotFoundError, VerificationFailedError
from websub_hub.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/subscribe", response_model=SubscriptionResponse)
async def subscribe(fields: HubFieldsDep, hub: HubDep) -> SubscriptionResponse:
    """Subscribe or unsubscribe a callback to a topic.

    The hub verifies intent with the callback before changing anything.

    Returns:
        200 once intent was verified; 403 when verification failed; 404 when
        unsubscribing a subscription that does not exist
    """
    request = SubscribeRequest.model_validate(fields)

    logger.info(
        "subscription_request",
        mode=request.mode,
        topic=request.topic,
        callback=request.callback,
        signed=request.secret is not None,
        lease_seconds=request.lease_seconds,
    )

    try:
        if request.mode == "subscribe":
            subscription = await hub.subscribe(
                request.topic,
                request.callback,
                secret=request.secret,
                lease_seconds=request.lease_seconds,
            )
        else:
            subscription = await hub.unsubscribe(request.topic, request.callback)
    except VerificationFailedError as e:
        raise IntentNotVerifiedError(e.message) from e
    except SubscriptionNotFoundError as e:
        raise SubscriptionNotFoundAPIError(e.message) from e

    return SubscriptionResponse.from_subscription(request.mode, subscription)
