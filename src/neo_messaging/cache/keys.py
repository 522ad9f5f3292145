"""
Cache key construction for message history pages.
"""
from ..config.constants import MESSAGES_CACHE_NAMESPACE

# Characters with special meaning in Redis glob patterns
_GLOB_SPECIAL_CHARS = "\\*?[]"


def escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so the value matches literally."""
    return "".join(f"\\{char}" if char in _GLOB_SPECIAL_CHARS else char for char in value)


class MessageCacheKeys:
    """Key layout for the message history cache.

    Pages live under ``messages:{user_id}:{limit}:{offset}``; every page of a
    user shares the ``messages:{user_id}:`` prefix so a single pattern delete
    drops them all.
    """

    namespace = MESSAGES_CACHE_NAMESPACE

    @classmethod
    def page_key(cls, user_id: str, limit: int, offset: int) -> str:
        """Key for one page of a user's history."""
        return f"{cls.namespace}:{user_id}:{int(limit)}:{int(offset)}"

    @classmethod
    def user_pattern(cls, user_id: str) -> str:
        """Pattern matching every cached page of a user."""
        return f"{cls.namespace}:{escape_glob(user_id)}:*"
