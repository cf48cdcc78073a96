"""
Kommo Chat Reply Sender

Sends a canned reply back to a Kommo conversation.
No formatting intelligence. No retries. Fire-and-forget for the caller.
"""

import logging
import time
from typing import Optional

import httpx

from .schemas import OutgoingMessage, OutgoingText, SendMessagesRequest

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/api/v4/chats/messages"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MSGID_PREFIX = "wamid"


class KommoSenderError(Exception):
    """Kommo rejected or did not answer the send request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def make_msgid(prefix: str = DEFAULT_MSGID_PREFIX, now_ms: Optional[int] = None) -> str:
    """
    Client message id: prefix plus wall-clock milliseconds.

    Two sends within the same millisecond share an id.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{prefix}-{now_ms}"


def build_outgoing_message(
    conversation_id: str,
    reply_text: str,
    msgid_prefix: str = DEFAULT_MSGID_PREFIX,
) -> OutgoingMessage:
    return OutgoingMessage(
        message=OutgoingText(text=reply_text),
        conversation_id=conversation_id,
        msgid=make_msgid(msgid_prefix),
    )


async def send_reply(
    base_url: str,
    access_token: str,
    conversation_id: str,
    reply_text: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    msgid_prefix: str = DEFAULT_MSGID_PREFIX,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """
    Send one reply to Kommo. Exactly one attempt.

    The caller guarantees access_token and conversation_id are non-empty.
    Failures are logged without the token or the response body and are
    never raised.

    Args:
        base_url: Kommo account URL, e.g. https://example.kommo.com
        access_token: OAuth bearer token
        conversation_id: Kommo conversation to reply into
        reply_text: Text to send
        timeout: Seconds before the attempt is abandoned
        msgid_prefix: Prefix of the generated msgid
        transport: Optional httpx transport (tests)

    Returns:
        True if Kommo accepted the message, False otherwise
    """

    outgoing = build_outgoing_message(conversation_id, reply_text, msgid_prefix)
    payload = SendMessagesRequest(messages=[outgoing]).model_dump()

    try:
        status_code = await _post_messages(
            base_url, access_token, payload, timeout=timeout, transport=transport
        )
    except KommoSenderError as e:
        logger.error(
            "Send message failed",
            extra={
                "conversation_id": conversation_id,
                "msgid": outgoing.msgid,
                "status_code": e.status_code,
            },
        )
        return False
    except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
        # Only the exception class: messages may echo the URL, headers or token
        logger.error(
            "Send message failed",
            extra={
                "conversation_id": conversation_id,
                "msgid": outgoing.msgid,
                "error_type": type(e).__name__,
            },
        )
        return False

    logger.info(
        f"Reply sent to conversation {conversation_id}",
        extra={
            "conversation_id": conversation_id,
            "msgid": outgoing.msgid,
            "status_code": status_code,
        },
    )
    return True


async def _post_messages(
    base_url: str,
    access_token: str,
    payload: dict,
    *,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> int:
    endpoint = f"{base_url.rstrip('/')}{MESSAGES_PATH}"

    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json"
    }

    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        response = await client.post(endpoint, json=payload, headers=headers)

    if not response.is_success:
        raise KommoSenderError(
            f"Kommo API returned {response.status_code}",
            status_code=response.status_code,
        )

    return response.status_code
