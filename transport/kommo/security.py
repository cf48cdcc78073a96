"""
Kommo Chat Signature Verification

SECURITY BOUNDARY - Verify the chat channel HMAC-SHA1 signature.
No agent imports. No retries. No logic.
"""

import hashlib
import hmac
from typing import Mapping, Optional

SIGNATURE_HEADER = "x-signature"


class SignatureVerificationError(Exception):
    """Signature verification failed."""
    pass


def compute_signature(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA1 of the raw body keyed by the channel secret."""
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha1
    ).hexdigest()


def verify_signature(
    body: bytes,
    secret: Optional[str],
    signature: Optional[str],
) -> bool:
    """
    Verify the Kommo chat channel signature.

    Kommo sends:
    - X-Signature header with hex HMAC-SHA1 of the body
    - Request body

    We compute HMAC(body, channel_secret) and compare in constant time.

    Args:
        body: Raw request body bytes (exactly as received)
        secret: Channel secret; empty or None disables the check
        signature: Value of the X-Signature header, None when missing

    Returns:
        True if the request is authentic (or no secret is configured)
    """

    # Open mode until a channel secret is provisioned
    if not secret:
        return True

    if not signature:
        return False

    expected = compute_signature(body, secret).encode("ascii")
    presented = signature.encode("utf-8", errors="replace")

    return hmac.compare_digest(presented, expected)


def signature_from_headers(headers: Mapping[str, str]) -> Optional[str]:
    """Read X-Signature from a header mapping, ignoring case."""
    value = headers.get(SIGNATURE_HEADER)
    if value is not None:
        return value
    for name, value in headers.items():
        if name.lower() == SIGNATURE_HEADER:
            return value
    return None
