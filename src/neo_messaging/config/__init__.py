"""Configuration for the messaging service."""
from .constants import MessagePlatform
from .settings import MessagingSettings, get_settings
from .logging_config import LoggingConfig

__all__ = [
    "MessagePlatform",
    "MessagingSettings",
    "get_settings",
    "LoggingConfig",
]
