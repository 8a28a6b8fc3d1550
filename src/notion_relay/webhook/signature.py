import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Notion-Signature"
SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Verify a Notion webhook HMAC-SHA256 signature against the raw body.

    Notion sends ``X-Notion-Signature: sha256=<hex digest>``. Never raises.
    """
    if not signature:
        logger.warning("Missing %s header", SIGNATURE_HEADER)
        return False

    if not body:
        logger.warning("Missing request body for signature verification")
        return False

    try:
        expected = compute_signature(body, secret)
        return hmac.compare_digest(expected.encode(), signature.encode())
    except Exception:
        logger.exception("Error during Notion webhook signature verification")
        return False
