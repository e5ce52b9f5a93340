"""Publish endpoint."""

from fastapi import APIRouter

from websub_hub.api.dependencies import HubDep, HubFieldsDep
from websub_hub.api.exceptions import TopicUnavailableError
from websub_hub.api.models.requests import PublishRequest
from websub_hub.api.models.responses import PublishResponse
from websub_hub.errors import TopicFetchFailedError
from websub_hub.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/publish", response_model=PublishResponse)
async def publish(fields: HubFieldsDep, hub: HubDep) -> PublishResponse:
    """Notify the hub that a topic changed.

    The hub fetches the topic and dispatches deliveries to its subscribers.
    The response does not wait for deliveries to finish.

    Returns:
        200 once the topic was fetched; 503 when the fetch failed
    """
    request = PublishRequest.model_validate(fields)

    logger.info("publish_request", topic=request.url)

    try:
        result = await hub.publish(request.url)
    except TopicFetchFailedError as e:
        raise TopicUnavailableError(e.message) from e

    return PublishResponse(topic=result.topic, subscribers=result.subscribers)
