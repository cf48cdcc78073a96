"""
Kommo Chat Input Normalization

PURE CONVERSION - NO LOGIC, NO MODEL CALLS

Converts a raw chat webhook body into an IncomingEvent.
- conversation_id: string kept as received, numbers stringified, anything else ""
- message.text: string, anything else becomes ""

Parsing is permissive: incomplete or malformed events are never rejected.
"""

import json
import logging
from typing import Any, Union

from .schemas import IncomingEvent

logger = logging.getLogger(__name__)


def parse_event(body: Union[bytes, str, dict, None]) -> IncomingEvent:
    """
    Convert a webhook body into an IncomingEvent.

    Args:
        body: Raw request bytes, a JSON string, or an already decoded dict

    Returns:
        IncomingEvent with empty defaults for anything missing
    """

    payload = _decode(body)

    if not isinstance(payload, dict):
        logger.warning(
            "Webhook body is not a JSON object, using empty event",
            extra={"body_type": type(payload).__name__},
        )
        return IncomingEvent()

    conversation_id = _as_text(payload.get("conversation_id"))

    message = payload.get("message")
    text = ""
    if isinstance(message, dict):
        raw_text = message.get("text")
        if isinstance(raw_text, str):
            text = raw_text

    if not conversation_id or not text:
        logger.debug(
            "Incomplete chat event",
            extra={
                "has_conversation_id": bool(conversation_id),
                "has_text": bool(text),
            },
        )

    return IncomingEvent(conversation_id=conversation_id, text=text)


def _decode(body: Union[bytes, str, dict, None]) -> Any:
    if body is None or isinstance(body, dict):
        return body or {}

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if not body.strip():
        return {}

    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return None


def _as_text(value: Any) -> str:
    # bool is an int subclass, but True is not a conversation id
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""
