"""HTTP routes for the messages feature."""
from .dependencies import AuthenticatedUser, get_current_user
from .message_router import router

__all__ = ["router", "AuthenticatedUser", "get_current_user"]
