"""Tests for the message HTTP endpoints."""

import json
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from neo_messaging.app import create_app
from neo_messaging.core.exceptions import FileUploadError
from neo_messaging.features.messages.repositories.message_repository import MessageRepository
from neo_messaging.features.messages.routers.dependencies import AuthenticatedUser
from neo_messaging.features.messages.services.dispatch_service import MessageDispatchService
from neo_messaging.features.messages.services.query_service import MessageQueryService


@pytest.fixture
def app(settings, repository, cache, selector, mock_file_storage):
    """Application wired to in-memory collaborators."""
    application = create_app(settings)
    application.state.dispatch_service = MessageDispatchService(
        repository=repository, selector=selector, cache=cache, file_storage=mock_file_storage
    )
    application.state.query_service = MessageQueryService(repository=repository, cache=cache, cache_ttl=86400)

    @application.middleware("http")
    async def identity_from_header(request: Request, call_next):
        user_id = request.headers.get("X-User-Id")
        if user_id:
            request.state.user = AuthenticatedUser(user_id=user_id, username="ana")
        return await call_next(request)

    return application


@pytest.fixture
def client(app):
    return TestClient(app)


AUTH = {"X-User-Id": "user-1"}


def send(client, platform="telegram", recipients=("42",), content="hello", files=None, headers=AUTH):
    return client.post(
        "/api/v1/messages/send",
        data={"platform": platform, "content": content, "recipients": json.dumps(list(recipients))},
        files=files,
        headers=headers,
    )


class TestSendEndpoint:
    """Test POST /messages/send."""

    def test_send_message(self, client, repository):
        response = send(client, recipients=["1", "2"])

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["platform"] == "telegram"
        assert body["data"]["recipients"] == ["1", "2"]
        assert body["data"]["sent"] is True
        assert body["data"]["sent_by"] == {"id": "user-1", "username": "ana"}
        assert body["data"]["id"] == str(repository.messages[0].id)

    def test_send_with_file(self, client, mock_file_storage):
        files = {"file": ("report.pdf", b"%PDF-1.4", "application/pdf")}

        response = send(client, files=files)

        assert response.status_code == 201
        assert response.json()["data"]["file_url"] == "https://files.example.com/report.pdf"
        mock_file_storage.upload.assert_awaited_once()

    def test_unsupported_platform(self, client, repository):
        response = send(client, platform="fax")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["code"] == "UnsupportedPlatformError"
        assert repository.messages == []

    def test_invalid_recipients_json(self, client):
        response = client.post(
            "/api/v1/messages/send",
            data={"platform": "slack", "content": "hi", "recipients": "not-json"},
            headers=AUTH,
        )

        assert response.status_code == 400

    def test_boolean_recipient_rejected(self, client, repository):
        response = client.post(
            "/api/v1/messages/send",
            data={"platform": "slack", "content": "hi", "recipients": "[true]"},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert repository.messages == []

    def test_disallowed_file_type(self, client, mock_file_storage):
        files = {"file": ("x.exe", b"MZ", "application/x-msdownload")}

        response = send(client, files=files)

        assert response.status_code == 400
        mock_file_storage.upload.assert_not_awaited()

    def test_upload_failure_returns_bad_gateway(self, client, mock_file_storage):
        mock_file_storage.upload.side_effect = FileUploadError("File upload was rejected")
        files = {"file": ("report.pdf", b"%PDF-1.4", "application/pdf")}

        response = send(client, files=files)

        assert response.status_code == 502

    def test_processing_failure_is_opaque(self, client, repository):
        repository.fail_saves = True

        response = send(client)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to process message dispatch"

    def test_requires_identity(self, client):
        response = send(client, headers={})

        assert response.status_code == 401
        assert response.json()["success"] is False


class TestSentEndpoint:
    """Test GET /messages/sent."""

    def test_list_with_pagination_and_provenance(self, client, repository, make_message):
        repository.messages.extend(make_message(index=i) for i in range(3))

        first = client.get("/api/v1/messages/sent?limit=2&offset=0", headers=AUTH).json()["data"]
        second = client.get("/api/v1/messages/sent?limit=2&offset=0", headers=AUTH).json()["data"]

        assert [m["content"] for m in first["messages"]] == ["message 2", "message 1"]
        assert first["pagination"] == {
            "total": 3,
            "count": 2,
            "limit": 2,
            "offset": 0,
            "current_page": 1,
            "total_pages": 2,
            "has_next_page": True,
            "has_previous_page": False,
        }
        assert first["cache"] == {"hit": False, "ttl_seconds": 86400, "source": "database"}
        assert second["cache"]["hit"] is True
        assert second["cache"]["source"] == "cache"

    def test_send_invalidates_history(self, client, repository, make_message):
        repository.messages.append(make_message(index=0))
        client.get("/api/v1/messages/sent", headers=AUTH)

        send(client, content="newest")
        data = client.get("/api/v1/messages/sent", headers=AUTH).json()["data"]

        assert data["cache"]["hit"] is False
        assert data["messages"][0]["content"] == "newest"

    @pytest.mark.parametrize("query", ["limit=0", "limit=101", "offset=-1", "limit=abc"])
    def test_invalid_pagination(self, client, query):
        response = client.get(f"/api/v1/messages/sent?{query}", headers=AUTH)

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_empty_history(self, client):
        data = client.get("/api/v1/messages/sent", headers=AUTH).json()["data"]

        assert data["messages"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["total_pages"] == 0

    def test_configured_page_sizes(self, app, client, repository, make_message):
        app.state.settings = app.state.settings.model_copy(update={"default_page_size": 2, "max_page_size": 3})
        repository.messages.extend(make_message(index=i) for i in range(5))

        default_page = client.get("/api/v1/messages/sent", headers=AUTH).json()["data"]
        too_large = client.get("/api/v1/messages/sent?limit=4", headers=AUTH)

        assert default_page["pagination"]["limit"] == 2
        assert default_page["pagination"]["count"] == 2
        assert too_large.status_code == 400
        assert too_large.json()["errors"][0]["details"] == {"field": "limit"}


class TestStatsEndpoint:
    """Test GET /messages/stats."""

    def test_stats(self, client, repository, make_message):
        repository.messages.extend([
            make_message(index=0, sent=True),
            make_message(index=1, sent=False, platform="discord"),
        ])

        data = client.get("/api/v1/messages/stats", headers=AUTH).json()["data"]

        assert data["user"]["id"] == "user-1"
        assert data["statistics"] == {
            "total": 2,
            "sent": 1,
            "failed": 1,
            "by_platform": {"telegram": 1, "discord": 1},
        }


@pytest.fixture
def failing_store_client(app):
    """Client whose query service sits on a store that rejects every query."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(side_effect=asyncpg.PostgresError(
        'password authentication failed for user "messaging_admin"'
    ))
    context.__aexit__ = AsyncMock(return_value=False)
    database = MagicMock()
    database.acquire = MagicMock(return_value=context)
    app.state.query_service = MessageQueryService(repository=MessageRepository(database))
    return TestClient(app)


class TestStoreFailures:
    """Test that store failures reach callers without internal detail."""

    @pytest.mark.parametrize("path", ["/api/v1/messages/sent", "/api/v1/messages/stats"])
    def test_store_failure_is_opaque(self, failing_store_client, path):
        response = failing_store_client.get(path, headers=AUTH)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["code"] == "DatabaseError"
        assert "details" not in body["errors"][0]
        assert "password" not in response.text
        assert "messaging_admin" not in response.text


class TestHealthEndpoint:
    """Test GET /health."""

    def test_health_without_backends(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": False, "cache": False}
