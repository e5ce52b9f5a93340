"""Hub engine: verification, signing and content distribution."""

from websub_hub.hub.delivery import Delivery, DeliveryPool, DeliveryResult
from websub_hub.hub.distributor import Distributor, PublishResult, TopicContent
from websub_hub.hub.http_client import HubHttpClient
from websub_hub.hub.service import Hub
from websub_hub.hub.signer import SIGNATURE_HEADER, sign, verify
from websub_hub.hub.verifier import VerificationPayload, Verifier

__all__ = [
    "Delivery",
    "DeliveryPool",
    "DeliveryResult",
    "Distributor",
    "Hub",
    "HubHttpClient",
    "PublishResult",
    "SIGNATURE_HEADER",
    "TopicContent",
    "VerificationPayload",
    "Verifier",
    "sign",
    "verify",
]
