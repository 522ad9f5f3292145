"""Telegram Bot API sender."""

import logging
from typing import Any, Dict, Optional

import httpx

from ....config.constants import MessagePlatform
from .base import DEFAULT_PLATFORM_TIMEOUT, MassSenderStrategy, SendResult

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramSender(MassSenderStrategy):
    """
    Sends messages through the Telegram Bot API.

    The text goes out first with HTML parse mode. When a file URL is
    present it follows as a separate ``sendDocument`` call once the text is
    confirmed; a failure there is logged and does not change the result.
    """

    platform = MessagePlatform.TELEGRAM

    def __init__(
        self,
        bot_token: Optional[str],
        timeout: float = DEFAULT_PLATFORM_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = TELEGRAM_API_BASE,
    ):
        super().__init__(timeout=timeout, http_client=http_client)
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")
        if not bot_token:
            logger.warning("Telegram bot token not configured, telegram sends will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self._bot_token)

    def _method_url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._bot_token}/{method}"

    def _is_accepted(self, body: Dict[str, Any]) -> bool:
        return body.get("ok") is True

    def _error_message(self, body: Dict[str, Any]) -> Optional[str]:
        return body.get("description")

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        if not self.is_configured:
            return self._not_configured()

        result = await self._post_json(
            self._method_url("sendMessage"),
            {"chat_id": recipient, "text": content, "parse_mode": "HTML"},
        )
        if not result.success or not file_url:
            return result

        document = await self._post_json(
            self._method_url("sendDocument"),
            {"chat_id": recipient, "document": file_url},
        )
        if not document.success:
            logger.warning(f"Telegram document follow-up failed for chat {recipient}: {document.message}")
        return result
