"""
neo-messaging: multi-platform outbound messaging service.

Routes messages to Telegram, Slack, Discord and WhatsApp, records every
delivery attempt in PostgreSQL and serves message history through a
Redis read-through cache.
"""
from .__version__ import __version__

__all__ = ["__version__"]
