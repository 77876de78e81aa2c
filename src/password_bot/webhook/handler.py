"""Telegram webhook handler — receives updates and sends replies."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Header, Request, Response

from password_bot.config import settings
from password_bot.database.engine import async_session_factory
from password_bot.services.message_router import MessageRouter
from password_bot.services.session_manager import SessionManager
from password_bot.services.telegram_client import TelegramClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])

# ── Shared instances (created once, reused across requests) ──
_session_manager = SessionManager()
_message_router = MessageRouter(_session_manager)
_telegram = TelegramClient()


def extract_message(update: dict[str, Any]) -> tuple[int, str] | None:
    """Pull ``(chat_id, text)`` out of a Telegram ``Update``.

    Returns ``None`` for updates that carry no text message (edits,
    callbacks, stickers and so on).
    """
    message = update.get("message")
    if not isinstance(message, dict):
        return None
    text = message.get("text")
    chat = message.get("chat")
    if not isinstance(text, str) or not isinstance(chat, dict):
        return None
    chat_id = chat.get("id")
    if not isinstance(chat_id, int):
        return None
    return chat_id, text


# ──────────────────────────────────────────────────────────────
# POST /webhook — Incoming updates
# ──────────────────────────────────────────────────────────────
@router.post("/webhook", response_model=None)
async def receive_update(
    request: Request,
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
) -> dict | Response:
    """Process one Telegram update.

    Expected payload structure (simplified)::

        {
          "update_id": 1,
          "message": {
            "chat": { "id": 12345 },
            "text": "/start"
          }
        }
    """
    if settings.telegram_webhook_secret and secret_token != settings.telegram_webhook_secret:
        logger.warning("Webhook call rejected (bad secret token)")
        return Response(content="Forbidden", status_code=403)

    update = await request.json()
    extracted = extract_message(update)
    if extracted is None:
        logger.debug("Received non-message update, ignoring")
        return {"status": "ok"}

    chat_id, text = extracted
    logger.info("Message from %s", chat_id)

    async with async_session_factory() as db_session:
        response = await _message_router.route(
            user_id=chat_id,
            message=text,
            db_session=db_session,
        )

    if response.reply_text:
        await _telegram.send_message(chat_id, response.reply_text)

    return {"status": "ok"}
