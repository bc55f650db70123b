"""Tests for the Hangar REST client, driven through ``httpx.MockTransport``."""

import asyncio
import json

import httpx
import pytest

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import DeployPayload

DETAILS = {
    "project": {
        "id": 7,
        "name": "webapp",
        "owner": "alice",
        "source": "github",
        "source_url": "https://github.com/alice/webapp",
        "source_branch": "main",
        "deployed_image_tag": "registry/webapp:abc",
        "created_at": "2024-05-01T10:00:00Z",
    },
    "participants": ["bob"],
    "database": None,
}


def _call(handler, fn):
    """Run ``fn(client)`` against a client backed by *handler*."""

    async def scenario():
        async with ApiClient("https://hangar.test/", "tok-1234", transport=httpx.MockTransport(handler)) as client:
            return await fn(client)

    return asyncio.run(scenario())


class TestRequests:
    def test_details_parsed(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=DETAILS)

        details = _call(handler, lambda c: c.get_project_details(7))
        assert seen["url"] == "https://hangar.test/api/projects/7/details"
        assert seen["auth"] == "Bearer tok-1234"
        assert details.project.is_github
        assert details.project.source_descriptor.branch == "main"
        assert details.participants == ["bob"]
        assert details.database is None

    @pytest.mark.parametrize(
        "body, expected",
        [("running", "running"), (None, None), ({"status": "exited"}, "exited")],
    )
    def test_status_shapes(self, body, expected):
        def handler(request):
            return httpx.Response(200, content=json.dumps(body).encode())

        assert _call(handler, lambda c: c.get_project_status(7)) == expected

    def test_logs_are_raw_text(self):
        def handler(request):
            assert request.headers["Accept"] == "text/plain"
            return httpx.Response(200, text="line one\nline two")

        assert _call(handler, lambda c: c.get_project_logs(7)) == "line one\nline two"

    def test_env_update_payload(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(204)

        _call(handler, lambda c: c.update_env_vars(7, {"A": "1"}))
        assert seen == {"method": "PUT", "path": "/api/projects/7/env", "body": {"env_vars": {"A": "1"}}}

    def test_link_and_unlink_paths(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, request.content or b""))
            return httpx.Response(200)

        async def both(client):
            await client.link_database_to_project(7, 3)
            await client.unlink_database_from_project(7)

        _call(handler, both)
        assert seen[0][:2] == ("POST", "/api/projects/7/database")
        assert json.loads(seen[0][2]) == {"database_id": 3}
        assert seen[1][:2] == ("DELETE", "/api/projects/7/database/link")

    def test_deploy_payload(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json=DETAILS)

        payload = DeployPayload(project_name="webapp", image_url="ghcr.io/alice/webapp:1.0")
        details = _call(handler, lambda c: c.deploy_project(payload))
        assert seen["method"] == "POST"
        assert seen["path"] == "/api/projects"
        assert seen["body"] == {
            "project_name": "webapp",
            "participants": [],
            "image_url": "ghcr.io/alice/webapp:1.0",
        }
        assert details.project.id == 7

    def test_my_database_null(self):
        def handler(request):
            return httpx.Response(200, content=b"null")

        assert _call(handler, lambda c: c.get_my_database()) is None


class TestErrorMapping:
    def test_structured_error_body(self):
        def handler(request):
            return httpx.Response(400, json={"error_code": "IMAGE_SCAN_FAILED", "details": "CVE-2024-1"})

        with pytest.raises(ApiError) as exc_info:
            _call(handler, lambda c: c.update_project_image(7, "bad:img"))
        assert exc_info.value == ApiError("IMAGE_SCAN_FAILED", "CVE-2024-1")

    def test_plain_500(self):
        def handler(request):
            return httpx.Response(500, text="Internal Server Error")

        with pytest.raises(ApiError) as exc_info:
            _call(handler, lambda c: c.start_project(7))
        assert exc_info.value.error_code == "HTTP_ERROR_500"

    @pytest.mark.parametrize("status, code", [(401, "UNAUTHORIZED"), (404, "NOT_FOUND")])
    def test_bodyless_status_codes(self, status, code):
        def handler(request):
            return httpx.Response(status)

        with pytest.raises(ApiError) as exc_info:
            _call(handler, lambda c: c.get_project_metrics(7))
        assert exc_info.value.error_code == code

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as exc_info:
            _call(handler, lambda c: c.get_current_user())
        assert exc_info.value.error_code == "CLIENT_ERROR"

    def test_unexpected_payload(self):
        def handler(request):
            return httpx.Response(200, json={"cpu_usage": "lots"})

        with pytest.raises(ApiError) as exc_info:
            _call(handler, lambda c: c.get_project_metrics(7))
        assert exc_info.value.error_code == "CLIENT_ERROR"

    def test_not_connected(self):
        client = ApiClient("https://hangar.test")
        with pytest.raises(RuntimeError):
            asyncio.run(client.get_project_status(7))
