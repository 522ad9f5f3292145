"""Message dispatch service.

Runs one send request end to end: validate, upload the attachment,
select the platform strategy, fan out to recipients, persist the outcome
and invalidate the sender's cached history.
"""

import logging
from typing import List, Optional, Union

from ....config.constants import DEFAULT_MAX_FILE_SIZE_MB, MessagePlatform
from ....core.exceptions import FileUploadError, ProcessingFailedError, ValidationError
from ....cache.keys import MessageCacheKeys
from ..entities.attachment import Attachment
from ..entities.message import OutboundMessage
from ..entities.protocols import (
    FileStorageProtocol,
    MessageCacheProtocol,
    MessageRepositoryProtocol,
)
from ..senders.base import SenderStrategy, SendResult, combine_results, gather_results
from ..senders.selector import SenderSelector
from ..utils.validation import MessageValidationRules

logger = logging.getLogger(__name__)


class MessageDispatchService:
    """Coordinates delivery, persistence and cache invalidation for sends."""

    def __init__(
        self,
        repository: MessageRepositoryProtocol,
        selector: SenderSelector,
        cache: Optional[MessageCacheProtocol] = None,
        file_storage: Optional[FileStorageProtocol] = None,
        max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
    ):
        self.repository = repository
        self.selector = selector
        self.cache = cache
        self.file_storage = file_storage
        self.max_file_size_mb = max_file_size_mb

    async def dispatch(
        self,
        owner_id: str,
        platform: Union[MessagePlatform, str],
        recipients: List[str],
        content: str,
        attachment: Optional[Attachment] = None,
    ) -> OutboundMessage:
        """Send a message and record the outcome.

        A record is persisted for every request that reaches a platform,
        whether or not delivery succeeded.

        Raises:
            ValidationError: Invalid input, or no strategy for the platform
            FileUploadError: The attachment could not be uploaded
            ProcessingFailedError: Any other failure before the record is stored
        """
        recipients = MessageValidationRules.validate_recipients(recipients)
        content = MessageValidationRules.validate_content(content)
        if attachment is not None:
            attachment.validate(self.max_file_size_mb)

        try:
            file_url = await self._upload(attachment) if attachment is not None else None
            strategy = self.selector.resolve(platform)
            result = await self._fan_out(strategy, recipients, content, file_url)

            message = OutboundMessage(
                sender_id=owner_id,
                platform=strategy.platform,
                recipients=recipients,
                content=content,
                file_url=file_url,
                sent=result.success,
            )
            await self.repository.save(message)
        except (ValidationError, FileUploadError):
            raise
        except Exception as e:
            logger.error(f"Message dispatch failed for user {owner_id}: {e}", exc_info=True)
            raise ProcessingFailedError() from e

        logger.info(
            f"Dispatched message {message.id} via {message.platform.value} "
            f"to {len(recipients)} recipient(s): sent={message.sent} ({result.message})"
        )
        await self._invalidate(owner_id)
        return message

    async def _upload(self, attachment: Attachment) -> str:
        if self.file_storage is None:
            raise FileUploadError("File storage is not configured")
        try:
            return await self.file_storage.upload(attachment.content, attachment.filename, attachment.mime_type)
        except FileUploadError:
            raise
        except Exception as e:
            logger.error(f"Attachment upload failed for {attachment.filename}: {e}")
            raise FileUploadError(details={"filename": attachment.filename}) from e

    async def _fan_out(
        self,
        strategy: SenderStrategy,
        recipients: List[str],
        content: str,
        file_url: Optional[str],
    ) -> SendResult:
        """Deliver to every recipient using the strategy's best available path."""
        if len(recipients) == 1:
            return await strategy.send_one(recipients[0], content, file_url)

        if strategy.supports_mass_send:
            return await strategy.send_many(recipients, content, file_url)

        results = await gather_results(
            strategy.send_one(recipient, content, file_url) for recipient in recipients
        )
        return combine_results(results)

    async def _invalidate(self, owner_id: str) -> None:
        """Drop every cached history page of the sender."""
        if self.cache is None:
            return
        try:
            removed = await self.cache.delete_pattern(MessageCacheKeys.user_pattern(owner_id))
            logger.debug(f"Invalidated {removed} cached page(s) for user {owner_id}")
        except Exception as e:
            logger.warning(f"Failed to invalidate message cache for user {owner_id}: {e}")
