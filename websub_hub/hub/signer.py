"""HMAC-SHA256 content signing for subscribers holding a secret."""

import hashlib
import hmac

SIGNATURE_HEADER = "X-Hub-Signature"


def sign(secret: str, body: bytes) -> str:
    """Generate the signature for a delivery body.

    The HMAC is computed over the exact bytes sent on the wire, so a
    subscriber hashing the literal request body gets the same value.

    Args:
        secret: Subscriber's shared secret
        body: Delivery body bytes

    Returns:
        Lowercase hex HMAC-SHA256 digest
    """
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify(secret: str, body: bytes, signature: str) -> bool:
    """Check a signature in constant time."""
    return hmac.compare_digest(sign(secret, body), signature)
