from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.webhooks.router import router


@pytest.fixture
def app() -> FastAPI:
    """Create FastAPI test app with webhook router."""
    from src.webhooks.auth import verify_github_signature

    test_app = FastAPI()
    test_app.include_router(router, prefix="/webhooks")
    test_app.dependency_overrides[verify_github_signature] = lambda: True
    return test_app


@pytest.fixture
def valid_pr_payload() -> dict[str, object]:
    """Valid pull request webhook payload."""
    return {
        "action": "opened",
        "sender": {"login": "octocat", "id": 1, "type": "User"},
        "installation": {"id": 99},
        "repository": {"id": 123456, "name": "service", "full_name": "octocat/service"},
        "pull_request": {"number": 42, "user": {"login": "octocat"}, "head": {"sha": "abc123"}},
    }


@pytest.fixture
def valid_headers() -> dict[str, str]:
    """Valid GitHub webhook headers."""
    return {
        "X-GitHub-Event": "pull_request",
        "X-GitHub-Delivery": "delivery-1",
        "X-Hub-Signature-256": "sha256=mock_signature",
        "Content-Type": "application/json",
    }


class TestWebhookRouter:
    """Test webhook router endpoint."""

    @pytest.mark.asyncio
    async def test_github_webhook_success(
        self, app: FastAPI, valid_pr_payload: dict[str, object], valid_headers: dict[str, str]
    ) -> None:
        with patch("src.webhooks.router.dispatcher.dispatch", new_callable=AsyncMock) as mock_dispatch:
            mock_dispatch.return_value = {"status": "processed", "handler": "PullRequestEventHandler"}

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/webhooks/github", json=valid_pr_payload, headers=valid_headers)

            assert response.status_code == 200
            result = response.json()
            assert result["status"] == "event dispatched successfully"
            assert result["result"]["status"] == "processed"

            event = mock_dispatch.call_args.args[0]
            assert event.event_type.value == "pull_request"
            assert event.payload == valid_pr_payload
            assert event.delivery_id == "delivery-1"
            assert event.installation_id == 99
            assert event.repo_full_name == "octocat/service"

    @pytest.mark.asyncio
    async def test_unsupported_event_is_acknowledged(
        self, app: FastAPI, valid_pr_payload: dict[str, object], valid_headers: dict[str, str]
    ) -> None:
        valid_headers["X-GitHub-Event"] = "issues"

        with patch("src.webhooks.router.dispatcher.dispatch", new_callable=AsyncMock) as mock_dispatch:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/webhooks/github", json=valid_pr_payload, headers=valid_headers)

            assert response.status_code == 200
            assert response.json()["status"] == "event received but not supported"
            mock_dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_event_header(
        self, app: FastAPI, valid_pr_payload: dict[str, object], valid_headers: dict[str, str]
    ) -> None:
        del valid_headers["X-GitHub-Event"]

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/webhooks/github", json=valid_pr_payload, headers=valid_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_json(self, app: FastAPI, valid_headers: dict[str, str]) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/webhooks/github", content=b"{not json", headers=valid_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid JSON payload"

    @pytest.mark.asyncio
    async def test_signature_required(self, valid_pr_payload: dict[str, object], valid_headers: dict[str, str]) -> None:
        test_app = FastAPI()
        test_app.include_router(router, prefix="/webhooks")
        del valid_headers["X-Hub-Signature-256"]

        async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
            response = await client.post("/webhooks/github", json=valid_pr_payload, headers=valid_headers)

        assert response.status_code == 401
