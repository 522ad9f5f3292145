"""Tests for the message dispatch service."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from neo_messaging.cache.keys import MessageCacheKeys
from neo_messaging.config.constants import MessagePlatform
from neo_messaging.core.exceptions import (
    FileUploadError,
    ProcessingFailedError,
    UnsupportedPlatformError,
    ValidationError,
)
from neo_messaging.features.messages.entities.attachment import Attachment
from neo_messaging.features.messages.senders.base import SendResult
from neo_messaging.features.messages.senders.selector import SenderSelector
from neo_messaging.features.messages.services.dispatch_service import MessageDispatchService


@pytest.fixture
def service(repository, selector, cache, mock_file_storage):
    return MessageDispatchService(
        repository=repository,
        selector=selector,
        cache=cache,
        file_storage=mock_file_storage,
    )


@pytest.fixture
def pdf():
    return Attachment(content=b"%PDF-1.4 test", filename="report.pdf", mime_type="application/pdf")


class TestFanOut:
    """Test recipient fan-out policy."""

    @pytest.mark.asyncio
    async def test_single_recipient_uses_send_one(self, service, telegram_sender):
        message = await service.dispatch("user-1", "telegram", ["42"], "hello")

        assert telegram_sender.send_one_calls == [("42", "hello", None)]
        assert telegram_sender.send_many_calls == []
        assert message.sent is True

    @pytest.mark.asyncio
    async def test_mass_capable_strategy_gets_one_send_many(self, service, telegram_sender):
        await service.dispatch("user-1", "telegram", ["1", "2", "3"], "hello")

        assert telegram_sender.send_many_calls == [(["1", "2", "3"], "hello", None)]
        assert telegram_sender.send_one_calls == []

    @pytest.mark.asyncio
    async def test_mass_send_failure_recorded(self, service, telegram_sender, repository):
        telegram_sender.mass_success = False

        message = await service.dispatch("user-1", "telegram", ["1", "2"], "hello")

        assert message.sent is False
        assert repository.messages == [message]

    @pytest.mark.asyncio
    async def test_unexpected_send_error_waits_for_other_recipients(self, service, slack_sender, repository):
        finished = []

        async def send_one(recipient, content, file_url=None):
            if recipient == "C1":
                raise RuntimeError("socket closed")
            await asyncio.sleep(0.05)
            finished.append(recipient)
            return SendResult(success=True)

        slack_sender.send_one = send_one

        with pytest.raises(ProcessingFailedError):
            await service.dispatch("user-1", "slack", ["C1", "C2"], "hello")

        assert finished == ["C2"]
        assert repository.messages == []

    @pytest.mark.asyncio
    async def test_single_only_strategy_falls_back_per_recipient(self, service, slack_sender):
        message = await service.dispatch("user-1", "slack", ["C1", "C2", "C3"], "hello")

        assert sorted(call[0] for call in slack_sender.send_one_calls) == ["C1", "C2", "C3"]
        assert message.sent is True

    @pytest.mark.asyncio
    async def test_fallback_is_and_combined(self, repository, cache, make_sender):
        slack = make_sender(MessagePlatform.SLACK, results={"C2": False})
        service = MessageDispatchService(repository, SenderSelector([slack]), cache=cache)

        message = await service.dispatch("user-1", "slack", ["C1", "C2", "C3"], "hello")

        assert len(slack.send_one_calls) == 3
        assert message.sent is False
        assert repository.save_calls == 1

    @pytest.mark.asyncio
    async def test_failed_single_send_is_still_persisted(self, repository, cache, make_sender):
        slack = make_sender(MessagePlatform.SLACK, results={"C1": False})
        service = MessageDispatchService(repository, SenderSelector([slack]), cache=cache)

        message = await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert message.sent is False
        assert repository.messages == [message]


class TestPersistence:
    """Test the persisted record."""

    @pytest.mark.asyncio
    async def test_record_fields(self, service, repository):
        message = await service.dispatch("user-1", "slack", ["C9", "C1"], "  status update  ")

        assert repository.save_calls == 1
        stored = repository.messages[0]
        assert stored is message
        assert stored.sender_id == "user-1"
        assert stored.platform is MessagePlatform.SLACK
        assert stored.recipients == ["C9", "C1"]
        assert stored.content == "status update"
        assert stored.file_url is None

    @pytest.mark.asyncio
    async def test_attachment_uploaded_before_send(self, service, telegram_sender, mock_file_storage, pdf):
        message = await service.dispatch("user-1", "telegram", ["42"], "see attached", attachment=pdf)

        mock_file_storage.upload.assert_awaited_once_with(pdf.content, "report.pdf", "application/pdf")
        assert telegram_sender.send_one_calls == [("42", "see attached", "https://files.example.com/report.pdf")]
        assert message.file_url == "https://files.example.com/report.pdf"


class TestInvalidation:
    """Test cache invalidation after a write."""

    @pytest.mark.asyncio
    async def test_user_pages_dropped_after_send(self, service, cache):
        cache.store[MessageCacheKeys.page_key("user-1", 10, 0)] = "[]"
        cache.store[MessageCacheKeys.page_key("user-1", 5, 5)] = "[]"
        cache.store[MessageCacheKeys.page_key("user-2", 10, 0)] = "[]"

        await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert list(cache.store) == [MessageCacheKeys.page_key("user-2", 10, 0)]
        assert cache.deleted_patterns == ["messages:user-1:*"]

    @pytest.mark.asyncio
    async def test_invalidation_failure_is_swallowed(self, service, cache, repository):
        cache.fail_deletes = True

        message = await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert repository.messages == [message]

    @pytest.mark.asyncio
    async def test_invalidation_happens_after_failed_delivery(self, repository, cache, make_sender):
        slack = make_sender(MessagePlatform.SLACK, results={"C1": False})
        service = MessageDispatchService(repository, SenderSelector([slack]), cache=cache)

        await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert cache.deleted_patterns == ["messages:user-1:*"]

    @pytest.mark.asyncio
    async def test_works_without_cache(self, repository, selector):
        service = MessageDispatchService(repository, selector)

        message = await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert repository.messages == [message]


class TestFailures:
    """Test failure semantics."""

    @pytest.mark.asyncio
    async def test_unsupported_platform_persists_nothing(self, service, repository, cache):
        with pytest.raises(UnsupportedPlatformError):
            await service.dispatch("user-1", "fax", ["1"], "hello")

        assert repository.save_calls == 0
        assert cache.deleted_patterns == []

    @pytest.mark.asyncio
    async def test_upload_failure_aborts(self, service, repository, telegram_sender, mock_file_storage, pdf):
        mock_file_storage.upload.side_effect = FileUploadError("rejected")

        with pytest.raises(FileUploadError):
            await service.dispatch("user-1", "telegram", ["42"], "hello", attachment=pdf)

        assert telegram_sender.send_one_calls == []
        assert repository.save_calls == 0

    @pytest.mark.asyncio
    async def test_unexpected_upload_error_becomes_upload_error(self, service, repository, mock_file_storage, pdf):
        mock_file_storage.upload.side_effect = ConnectionResetError("reset")

        with pytest.raises(FileUploadError):
            await service.dispatch("user-1", "telegram", ["42"], "hello", attachment=pdf)

        assert repository.save_calls == 0

    @pytest.mark.asyncio
    async def test_attachment_without_storage_fails(self, repository, selector, pdf):
        service = MessageDispatchService(repository, selector)

        with pytest.raises(FileUploadError):
            await service.dispatch("user-1", "telegram", ["42"], "hello", attachment=pdf)

    @pytest.mark.asyncio
    async def test_validation_happens_before_any_io(self, service, mock_file_storage, telegram_sender, pdf):
        with pytest.raises(ValidationError):
            await service.dispatch("user-1", "telegram", [], "hello", attachment=pdf)
        with pytest.raises(ValidationError):
            await service.dispatch("user-1", "telegram", ["42"], "   ", attachment=pdf)

        mock_file_storage.upload.assert_not_awaited()
        assert telegram_sender.send_one_calls == []

    @pytest.mark.asyncio
    async def test_invalid_attachment_rejected_before_upload(self, service, mock_file_storage):
        exe = Attachment(content=b"MZ", filename="x.exe", mime_type="application/x-msdownload")

        with pytest.raises(ValidationError):
            await service.dispatch("user-1", "telegram", ["42"], "hello", attachment=exe)

        mock_file_storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_persistence_failure_is_opaque(self, service, repository, cache):
        repository.fail_saves = True

        with pytest.raises(ProcessingFailedError) as exc_info:
            await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert exc_info.value.message == "Failed to process message dispatch"
        assert "database" not in exc_info.value.message
        assert cache.deleted_patterns == []

    @pytest.mark.asyncio
    async def test_strategy_exception_is_opaque(self, repository, cache, make_sender):
        broken = make_sender(MessagePlatform.SLACK)
        broken.send_one = AsyncMock(side_effect=KeyError("boom"))
        service = MessageDispatchService(repository, SenderSelector([broken]), cache=cache)

        with pytest.raises(ProcessingFailedError):
            await service.dispatch("user-1", "slack", ["C1"], "hello")

        assert repository.save_calls == 0
