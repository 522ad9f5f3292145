"""Message router: send messages, browse sent history and delivery stats."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ....models.base import APIResponse
from ..entities.attachment import Attachment
from ..models.requests import parse_recipients
from ..models.responses import (
    CacheInfo,
    MessageListData,
    MessageResponse,
    MessageStatsData,
    MessageStatsResponse,
    PaginationMeta,
    SentByResponse,
    SentMessageResponse,
)
from ..services.dispatch_service import MessageDispatchService
from ..services.query_service import MessageQueryService
from .dependencies import (
    AuthenticatedUser,
    PageParams,
    get_current_user,
    get_dispatch_service,
    get_page_params,
    get_query_service,
)


router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
    responses={
        400: {"description": "Validation error"},
        401: {"description": "Authentication required"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/send",
    response_model=APIResponse[SentMessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Send message",
    description="Send a message to one or more recipients on a messaging platform",
    responses={
        201: {"description": "Message processed and recorded"},
        502: {"description": "Attachment upload failed"}
    }
)
async def send_message(
    platform: str = Form(..., description="Target platform"),
    content: str = Form(..., description="Message content"),
    recipients: str = Form(..., description="JSON array of recipient identifiers"),
    file: Optional[UploadFile] = File(None, description="Optional attachment"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: MessageDispatchService = Depends(get_dispatch_service),
) -> APIResponse[SentMessageResponse]:
    """Send a message and record the delivery outcome."""
    attachment = None
    if file is not None and file.filename:
        attachment = Attachment(
            content=await file.read(),
            filename=file.filename,
            mime_type=file.content_type or "application/octet-stream",
        )

    message = await service.dispatch(
        owner_id=user.user_id,
        platform=platform.strip().lower(),
        recipients=parse_recipients(recipients),
        content=content,
        attachment=attachment,
    )

    data = SentMessageResponse(
        **MessageResponse.from_entity(message).model_dump(),
        sent_by=SentByResponse(id=user.user_id, username=user.username),
    )
    result = "Message sent successfully" if message.sent else "Message recorded but delivery failed"
    return APIResponse.success_response(data=data, message=result)


@router.get(
    "/sent",
    response_model=APIResponse[MessageListData],
    summary="List sent messages",
    description="Get the caller's sent messages, newest first, with pagination and cache provenance"
)
async def list_sent_messages(
    page_params: PageParams = Depends(get_page_params),
    user: AuthenticatedUser = Depends(get_current_user),
    service: MessageQueryService = Depends(get_query_service),
) -> APIResponse[MessageListData]:
    """List the caller's sent messages."""
    limit, offset = page_params.limit, page_params.offset
    page = await service.list_messages(user.user_id, limit, offset)
    total = await service.count_messages(user.user_id)

    data = MessageListData(
        user=SentByResponse(id=user.user_id, username=user.username),
        messages=[MessageResponse.from_entity(message) for message in page.items],
        pagination=PaginationMeta.create(total=total, count=page.count, limit=limit, offset=offset),
        cache=CacheInfo(
            hit=page.from_cache,
            ttl_seconds=service.cache_ttl,
            source="cache" if page.from_cache else "database",
        ),
    )
    return APIResponse.success_response(data=data, message="Messages retrieved successfully")


@router.get(
    "/stats",
    response_model=APIResponse[MessageStatsData],
    summary="Message statistics",
    description="Get delivery statistics for the caller"
)
async def get_message_stats(
    user: AuthenticatedUser = Depends(get_current_user),
    service: MessageQueryService = Depends(get_query_service),
) -> APIResponse[MessageStatsData]:
    """Get the caller's delivery statistics."""
    stats = await service.get_stats(user.user_id)
    data = MessageStatsData(
        user=SentByResponse(id=user.user_id, username=user.username),
        statistics=MessageStatsResponse.from_entity(stats),
    )
    return APIResponse.success_response(data=data, message="Statistics retrieved successfully")
