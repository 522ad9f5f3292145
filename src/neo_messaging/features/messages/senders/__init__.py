"""Platform sender strategies."""
from .base import MassSenderStrategy, SenderStrategy, SendResult, combine_results, gather_results
from .discord import DiscordSender
from .selector import SenderSelector, create_sender_selector
from .slack import SlackSender
from .telegram import TelegramSender
from .whatsapp import WhatsAppSender

__all__ = [
    "MassSenderStrategy",
    "SenderStrategy",
    "SendResult",
    "combine_results",
    "gather_results",
    "SenderSelector",
    "create_sender_selector",
    "TelegramSender",
    "SlackSender",
    "DiscordSender",
    "WhatsAppSender",
]
