"""Kommo Chat Transport Layer - Module Exports"""

from .normalize import parse_event
from .schemas import (
    IncomingEvent,
    OutgoingMessage,
    OutgoingText,
    SendMessagesRequest,
    WebhookAck,
)
from .security import (
    SIGNATURE_HEADER,
    SignatureVerificationError,
    compute_signature,
    verify_signature,
)
from .sender import KommoSenderError, make_msgid, send_reply
from .webhook import KommoWebhookHandler, create_router

__all__ = [
    # Schemas
    "IncomingEvent",
    "OutgoingMessage",
    "OutgoingText",
    "SendMessagesRequest",
    "WebhookAck",
    # Normalization
    "parse_event",
    # Security
    "SIGNATURE_HEADER",
    "compute_signature",
    "verify_signature",
    "SignatureVerificationError",
    # Sender
    "send_reply",
    "make_msgid",
    "KommoSenderError",
    # Router
    "KommoWebhookHandler",
    "create_router",
]
