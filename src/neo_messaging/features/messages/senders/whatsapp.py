"""WhatsApp Cloud API sender."""

import logging
from typing import Any, Dict, Optional

import httpx

from ....config.constants import MessagePlatform
from .base import DEFAULT_PLATFORM_TIMEOUT, MassSenderStrategy, SendResult

logger = logging.getLogger(__name__)

WHATSAPP_API_BASE = "https://graph.facebook.com"


class WhatsAppSender(MassSenderStrategy):
    """
    Sends messages through the WhatsApp Cloud API.

    Plain content goes out as a text message. With a file URL the message
    becomes a document message carrying the content as its caption.
    """

    platform = MessagePlatform.WHATSAPP

    def __init__(
        self,
        access_token: Optional[str],
        phone_number_id: Optional[str],
        api_version: str = "v19.0",
        timeout: float = DEFAULT_PLATFORM_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = WHATSAPP_API_BASE,
    ):
        super().__init__(timeout=timeout, http_client=http_client)
        self._access_token = access_token
        self._phone_number_id = phone_number_id
        self._messages_url = f"{api_base.rstrip('/')}/{api_version}/{phone_number_id}/messages"
        if not self.is_configured:
            logger.warning("WhatsApp credentials not configured, whatsapp sends will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self._access_token and self._phone_number_id)

    def _error_message(self, body: Dict[str, Any]) -> Optional[str]:
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
        return None

    def _build_payload(self, recipient: str, content: str, file_url: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient,
        }
        if file_url:
            payload["type"] = "document"
            payload["document"] = {"link": file_url, "caption": content}
        else:
            payload["type"] = "text"
            payload["text"] = {"preview_url": False, "body": content}
        return payload

    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        if not self.is_configured:
            return self._not_configured()

        return await self._post_json(
            self._messages_url,
            self._build_payload(recipient, content, file_url),
            headers={"Authorization": f"Bearer {self._access_token}"},
        )
