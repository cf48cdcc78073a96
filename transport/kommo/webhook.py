"""
Kommo Chat Webhook Receiver

FastAPI router that receives Kommo chat events, picks a canned reply and
sends it back to the conversation.

Flow:
  receive → verify signature → parse → classify → (dispatch) → ack
"""

import functools
import logging
from typing import Awaitable, Callable, Mapping, Optional

from fastapi import APIRouter, BackgroundTasks, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from agent.replies import ReplyClassifier
from config import Config

from .normalize import parse_event
from .schemas import IncomingEvent, WebhookAck
from .security import (
    SignatureVerificationError,
    signature_from_headers,
    verify_signature,
)
from .sender import send_reply

logger = logging.getLogger(__name__)

# (base_url, access_token, conversation_id, reply_text) -> delivered
Dispatch = Callable[[str, str, str, str], Awaitable[bool]]


class KommoWebhookHandler:
    """
    One webhook request is one complete pass through process().

    Holds only immutable collaborators; nothing is kept between requests.
    """

    def __init__(
        self,
        config: Config,
        classifier: Optional[ReplyClassifier] = None,
        dispatch: Optional[Dispatch] = None,
    ):
        self.config = config
        self.classifier = classifier or ReplyClassifier()
        self.dispatch: Dispatch = dispatch or functools.partial(
            send_reply,
            timeout=config.send_timeout,
            msgid_prefix=config.msgid_prefix,
        )

    def authenticate(self, body: bytes, headers: Mapping[str, str]) -> None:
        """
        Raises:
            SignatureVerificationError: Signature missing or wrong
        """
        if not verify_signature(
            body, self.config.channel_secret, signature_from_headers(headers)
        ):
            raise SignatureVerificationError("invalid signature")

    def should_dispatch(self, event: IncomingEvent) -> bool:
        return bool(self.config.access_token) and event.has_conversation

    async def process(
        self,
        body: bytes,
        headers: Mapping[str, str],
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> str:
        """
        Run the pipeline for one request.

        Args:
            body: Raw request body bytes
            headers: Request headers
            background_tasks: When given and background dispatch is
                enabled, the send runs after the response

        Returns:
            The reply text selected for the event

        Raises:
            SignatureVerificationError: Request is not authentic
        """

        # Step 1: Verify signature (security boundary)
        self.authenticate(body, headers)

        # Step 2: Parse permissively
        event = parse_event(body)

        # Step 3: Pick a reply
        reply = self.classifier.classify(event.text)
        logger.info(
            "Chat event received",
            extra={
                "conversation_id": event.conversation_id,
                "text_length": len(event.text),
            },
        )

        # Step 4: Send it back when we can
        if not self.should_dispatch(event):
            logger.info(
                "Reply not sent: access token or conversation id missing",
                extra={
                    "has_access_token": bool(self.config.access_token),
                    "has_conversation_id": event.has_conversation,
                },
            )
            return reply

        args = (
            self.config.base_url,
            self.config.access_token,
            event.conversation_id,
            reply,
        )

        if self.config.dispatch_in_background and background_tasks is not None:
            background_tasks.add_task(self._dispatch_quietly, *args)
        else:
            await self._dispatch_quietly(*args)

        return reply

    async def _dispatch_quietly(
        self,
        base_url: str,
        access_token: str,
        conversation_id: str,
        reply: str,
    ) -> None:
        # The webhook is acknowledged whatever happens to delivery
        try:
            await self.dispatch(base_url, access_token, conversation_id, reply)
        except Exception as e:
            logger.error(
                "Send message failed",
                extra={
                    "conversation_id": conversation_id,
                    "error_type": type(e).__name__,
                },
            )

    async def handle(
        self,
        body: bytes,
        headers: Mapping[str, str],
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Response:
        """HTTP response for one webhook request: 401 text or 200 ack."""
        try:
            await self.process(body, headers, background_tasks)
        except SignatureVerificationError as e:
            logger.warning(f"Signature verification failed: {e}")
            return PlainTextResponse(
                "invalid signature", status_code=status.HTTP_401_UNAUTHORIZED
            )

        # Always acknowledge so Kommo does not redeliver
        return JSONResponse(WebhookAck().model_dump(), status_code=status.HTTP_200_OK)


def create_router(handler: KommoWebhookHandler) -> APIRouter:
    """Router exposing POST /chat/webhook bound to one handler."""

    router = APIRouter(prefix="/chat", tags=["Kommo Chat"])

    @router.post("/webhook")
    async def kommo_chat_webhook(
        request: Request, background_tasks: BackgroundTasks
    ) -> Response:
        """
        Receive Kommo chat channel events.

        Returns:
            401 "invalid signature" when the X-Signature header does not match,
            otherwise 200 {"ok": true}
        """
        body = await request.body()
        return await handler.handle(body, request.headers, background_tasks)

    return router
