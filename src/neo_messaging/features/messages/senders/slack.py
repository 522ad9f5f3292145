"""Slack Web API sender."""

import logging
from typing import Any, Dict, Optional

import httpx

from ....config.constants import MessagePlatform
from .base import DEFAULT_PLATFORM_TIMEOUT, SenderStrategy, SendResult

logger = logging.getLogger(__name__)

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


class SlackSender(SenderStrategy):
    """
    Sends messages with ``chat.postMessage``.

    Slack has no batch endpoint, so this strategy is single-recipient only
    and several recipients are fanned out by the dispatch service.
    """

    platform = MessagePlatform.SLACK

    def __init__(
        self,
        bot_token: Optional[str],
        timeout: float = DEFAULT_PLATFORM_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        api_url: str = SLACK_POST_MESSAGE_URL,
    ):
        super().__init__(timeout=timeout, http_client=http_client)
        self._bot_token = bot_token
        self._api_url = api_url
        if not bot_token:
            logger.warning("Slack bot token not configured, slack sends will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self._bot_token)

    def _is_accepted(self, body: Dict[str, Any]) -> bool:
        return body.get("ok") is True

    def _error_message(self, body: Dict[str, Any]) -> Optional[str]:
        return body.get("error")

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        if not self.is_configured:
            return self._not_configured()

        text = f"{content}\n<{file_url}>" if file_url else content
        return await self._post_json(
            self._api_url,
            {"channel": recipient, "text": text},
            headers={"Authorization": f"Bearer {self._bot_token}"},
        )
