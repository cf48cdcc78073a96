"""
Kommo Chat Transport - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between the Kommo chat channel and the reply engine.
"""

from typing import List, Literal

from pydantic import BaseModel, Field


# ============================================================================
# INCOMING EVENT (WEBHOOK INPUT)
# ============================================================================

class IncomingEvent(BaseModel):
    """
    Inbound chat event, already flattened by normalize.parse_event.

    Missing fields are empty strings; an event is never rejected
    for being incomplete.
    """

    conversation_id: str = Field(
        default="",
        description="Opaque Kommo conversation id. Empty when absent."
    )
    text: str = Field(
        default="",
        description="message.text from the webhook. Empty when absent."
    )

    class Config:
        """Pydantic config."""
        frozen = True  # Request-scoped, never mutated

    @property
    def has_conversation(self) -> bool:
        return bool(self.conversation_id)


# ============================================================================
# OUTGOING MESSAGE (KOMMO API INPUT)
# ============================================================================

class OutgoingText(BaseModel):
    """Message body of an outgoing chat message."""
    text: str


class OutgoingMessage(BaseModel):
    """
    Single outgoing chat message for POST /api/v4/chats/messages.

    Only built when both an access token and a conversation id exist.
    """

    type: Literal["outgoing"] = "outgoing"
    message: OutgoingText
    conversation_id: str = Field(..., min_length=1)
    msgid: str = Field(..., min_length=1, description="Client-side message id")

    class Config:
        frozen = True


class SendMessagesRequest(BaseModel):
    """Request body wrapper. Kommo expects a list; we always send one."""

    messages: List[OutgoingMessage] = Field(..., min_length=1, max_length=1)


# ============================================================================
# WEBHOOK ACKNOWLEDGEMENT (OUTPUT)
# ============================================================================

class WebhookAck(BaseModel):
    """Body returned to Kommo for every authenticated webhook."""
    ok: bool = True
