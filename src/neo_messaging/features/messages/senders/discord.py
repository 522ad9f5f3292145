"""Discord REST API sender."""

import logging
from typing import Optional

import httpx

from ....config.constants import MessagePlatform
from .base import DEFAULT_PLATFORM_TIMEOUT, MassSenderStrategy, SendResult

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"


class DiscordSender(MassSenderStrategy):
    """Posts messages to Discord channels as a bot, attaching files as embeds."""

    platform = MessagePlatform.DISCORD

    def __init__(
        self,
        bot_token: Optional[str],
        timeout: float = DEFAULT_PLATFORM_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = DISCORD_API_BASE,
    ):
        super().__init__(timeout=timeout, http_client=http_client)
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")
        if not bot_token:
            logger.warning("Discord bot token not configured, discord sends will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self._bot_token)

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        if not self.is_configured:
            return self._not_configured()

        payload = {"content": content}
        if file_url:
            payload["embeds"] = [{"url": file_url, "image": {"url": file_url}}]

        return await self._post_json(
            f"{self._api_base}/channels/{recipient}/messages",
            payload,
            headers={"Authorization": f"Bot {self._bot_token}"},
        )
