"""Message services."""
from .dispatch_service import MessageDispatchService
from .query_service import MessageQueryService

__all__ = ["MessageDispatchService", "MessageQueryService"]
