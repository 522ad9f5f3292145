"""Message router dependencies.

Services are created once in the application lifespan and stored on
``app.state``. The caller's identity is placed on ``request.state.user``
by the authentication middleware in front of this service.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import HTTPException, Query, Request, status

from ....core.exceptions import ValidationError

from ..services.dispatch_service import MessageDispatchService
from ..services.query_service import MessageQueryService


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity of the caller."""

    user_id: str
    username: Optional[str] = None


def _coerce_user(value: Any) -> Optional[AuthenticatedUser]:
    if isinstance(value, AuthenticatedUser):
        return value
    if isinstance(value, dict):
        user_id = value.get("id") or value.get("user_id") or value.get("sub")
        if user_id:
            return AuthenticatedUser(user_id=str(user_id), username=value.get("username"))
    return None


def get_current_user(request: Request) -> AuthenticatedUser:
    """Return the authenticated caller or reject the request."""
    user = _coerce_user(getattr(request.state, "user", None))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return user


def get_dispatch_service(request: Request) -> MessageDispatchService:
    return request.app.state.dispatch_service


def get_query_service(request: Request) -> MessageQueryService:
    return request.app.state.query_service


@dataclass(frozen=True)
class PageParams:
    """Validated pagination window."""

    limit: int
    offset: int


def get_page_params(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, description="Page size"),
    offset: int = Query(0, ge=0, description="Number of messages to skip"),
) -> PageParams:
    """Apply the configured default and maximum page size."""
    settings = request.app.state.settings
    if limit is None:
        limit = settings.default_page_size
    if limit > settings.max_page_size:
        raise ValidationError(
            f"limit must not exceed {settings.max_page_size}",
            field="limit"
        )
    return PageParams(limit=limit, offset=offset)
