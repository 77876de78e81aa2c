"""Telegram client — async wrapper around the Bot API ``sendMessage`` call."""

from __future__ import annotations

import logging

import httpx

from password_bot.config import settings

logger = logging.getLogger(__name__)


class TelegramClient:
    """Delivers bot replies through the Telegram Bot API.

    Without a bot token the client only logs what it would have sent,
    which keeps local runs and tests free of network calls.
    """

    def __init__(
        self,
        token: str | None = None,
        api_base: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = settings.telegram_bot_token if token is None else token
        self._api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def send_message(self, chat_id: int, text: str) -> bool:
        """Send *text* to *chat_id*.

        Returns ``True`` if Telegram accepted the message.
        """
        if not self._token:
            logger.warning("TELEGRAM_BOT_TOKEN not set — reply to %s not sent", chat_id)
            return False

        url = f"{self._api_base}/bot{self._token}/sendMessage"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(url, json={"chat_id": chat_id, "text": text})
        except httpx.HTTPError as exc:
            logger.error("sendMessage request to %s failed: %s", chat_id, exc)
            return False

        if resp.status_code == 200:
            try:
                accepted = resp.json().get("ok", False)
            except ValueError:
                logger.error("sendMessage to %s returned a non-JSON body", chat_id)
                return False
            if accepted:
                logger.info("Reply sent to %s", chat_id)
                return True
        logger.error("Failed to send reply to %s: %s %s", chat_id, resp.status_code, resp.text)
        return False
