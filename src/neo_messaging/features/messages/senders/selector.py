"""Sender strategy registry keyed by platform tag."""

import logging
from typing import Dict, Iterable, List, Optional, Union

import httpx

from ....config.constants import MessagePlatform
from ....config.settings import MessagingSettings
from ....core.exceptions import UnsupportedPlatformError
from .base import SenderStrategy
from .discord import DiscordSender
from .slack import SlackSender
from .telegram import TelegramSender
from .whatsapp import WhatsAppSender

logger = logging.getLogger(__name__)


class SenderSelector:
    """Maps platform tags to sender strategy singletons.

    Resolution has no side effects and the same tag always yields the
    same instance.
    """

    def __init__(self, strategies: Optional[Iterable[SenderStrategy]] = None):
        self._strategies: Dict[str, SenderStrategy] = {}
        for strategy in strategies or []:
            self.register(strategy)

    def register(self, strategy: SenderStrategy) -> None:
        """Register a strategy under its platform tag."""
        tag = strategy.platform.value
        if tag in self._strategies:
            logger.warning(f"Replacing sender strategy for platform: {tag}")
        self._strategies[tag] = strategy

    @property
    def platforms(self) -> List[str]:
        return sorted(self._strategies)

    def resolve(self, platform: Union[MessagePlatform, str]) -> SenderStrategy:
        """Return the strategy for a platform tag.

        Raises:
            UnsupportedPlatformError: If nothing is registered for the tag
        """
        tag = platform.value if isinstance(platform, MessagePlatform) else str(platform)
        strategy = self._strategies.get(tag)
        if strategy is None:
            raise UnsupportedPlatformError(tag, self.platforms)
        return strategy


def create_sender_selector(
    settings: MessagingSettings,
    http_client: Optional[httpx.AsyncClient] = None,
) -> SenderSelector:
    """Build the selector with one strategy per supported platform."""

    def secret(value) -> Optional[str]:
        return value.get_secret_value() if value else None

    timeout = settings.platform_timeout_seconds
    return SenderSelector([
        TelegramSender(secret(settings.telegram_bot_token), timeout=timeout, http_client=http_client),
        SlackSender(secret(settings.slack_bot_token), timeout=timeout, http_client=http_client),
        DiscordSender(secret(settings.discord_bot_token), timeout=timeout, http_client=http_client),
        WhatsAppSender(
            secret(settings.whatsapp_access_token),
            settings.whatsapp_phone_number_id,
            api_version=settings.whatsapp_api_version,
            timeout=timeout,
            http_client=http_client,
        ),
    ])
