"""
Request Executor Tests

Verifies:
✔ Authorization header attached iff a token is held
✔ Content-Type application/json for JSON requests, absent for multipart
✔ Non-JSON-shaped text -> MalformedResponseError, never partial data
✔ Non-2xx -> ApiError with message / error / generic fallback
✔ Transport failure -> NetworkError
"""

import json

import httpx
import pytest

from tests.helpers import BASE_URL, RecordingHandler, json_response
from wasteapi import CredentialHolder, InMemoryStorage
from wasteapi.errors import ApiError, MalformedResponseError, NetworkError
from wasteapi.executor import RequestExecutor, error_message, parse_json_text
from wasteapi.schemas import ImagePart, MultipartForm


def make_executor(handler, token=None):
    holder = CredentialHolder(InMemoryStorage())
    if token:
        holder.set(token)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RequestExecutor(BASE_URL, holder, client), holder


# ─────────────────────────────────────────────────────
# Headers
# ─────────────────────────────────────────────────────


class TestExecutorHeaders:
    @pytest.mark.asyncio
    async def test_bearer_token_attached_when_held(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler, token="tok-123")

        await executor.request("/auth/profile")

        assert handler.last.headers["Authorization"] == "Bearer tok-123"

    @pytest.mark.asyncio
    async def test_no_authorization_without_token(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)

        await executor.request("/auth/profile")

        assert "Authorization" not in handler.last.headers

    @pytest.mark.asyncio
    async def test_token_change_visible_to_next_request(self):
        handler = RecordingHandler()
        executor, holder = make_executor(handler, token="old")

        await executor.request("/notifications")
        holder.set("new")
        await executor.request("/notifications")
        holder.clear()
        await executor.request("/notifications")

        assert handler.calls[0].headers["Authorization"] == "Bearer old"
        assert handler.calls[1].headers["Authorization"] == "Bearer new"
        assert "Authorization" not in handler.calls[2].headers

    @pytest.mark.asyncio
    async def test_json_request_sets_json_content_type(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)

        await executor.request("/auth/login", method="POST", json_body={"email": "a@b.c"})

        assert handler.last.headers["Content-Type"] == "application/json"
        assert json.loads(handler.last.content) == {"email": "a@b.c"}

    @pytest.mark.asyncio
    async def test_multipart_request_gets_transport_boundary(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)
        form = MultipartForm().add_field("prompt", "plastic bottle")
        form.add_file(ImagePart(filename="w.jpg", content=b"img"))

        await executor.request("/waste/classify", method="POST", form=form)

        content_type = handler.last.headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")

    @pytest.mark.asyncio
    async def test_text_only_form_is_still_multipart(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)
        form = MultipartForm().add_field("prompt", "glass jar")

        await executor.request("/waste/classify", method="POST", form=form)

        assert handler.last.headers["Content-Type"].startswith("multipart/form-data")

    @pytest.mark.asyncio
    async def test_path_joined_to_base_and_params_sent(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)

        await executor.request("/waste/history", params={"page": 2, "limit": 10})

        url = handler.last.url
        assert str(url).startswith(f"{BASE_URL}/waste/history")
        assert url.params["page"] == "2"
        assert url.params["limit"] == "10"

    @pytest.mark.asyncio
    async def test_multipart_with_content_type_header_rejected(self):
        handler = RecordingHandler()
        executor, _ = make_executor(handler)

        with pytest.raises(ValueError):
            await executor.request(
                "/cleanup",
                method="POST",
                form=MultipartForm().add_field("lat", "1"),
                headers={"Content-Type": "multipart/form-data"},
            )
        assert handler.calls == []


# ─────────────────────────────────────────────────────
# Response shape
# ─────────────────────────────────────────────────────


class TestExecutorResponseShape:
    @pytest.mark.asyncio
    async def test_object_body_parsed(self):
        handler = RecordingHandler(json_response(200, {"ok": True}))
        executor, _ = make_executor(handler)

        response = await executor.request("/auth/profile")

        assert response.status_code == 200
        assert response.data == {"ok": True}

    @pytest.mark.asyncio
    async def test_array_body_parsed(self):
        handler = RecordingHandler(json_response(200, [1, 2]))
        executor, _ = make_executor(handler)

        response = await executor.request("/cleanup/history")

        assert response.data == [1, 2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["<html>Bad Gateway</html>", "OK", "", " {\"a\": 1}"])
    async def test_non_json_text_is_malformed(self, text):
        handler = RecordingHandler(httpx.Response(200, text=text))
        executor, _ = make_executor(handler)

        with pytest.raises(MalformedResponseError) as exc_info:
            await executor.request("/auth/profile")

        assert exc_info.value.raw_text == text
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_wins_over_error_status(self):
        handler = RecordingHandler(httpx.Response(502, text="Bad Gateway"))
        executor, _ = make_executor(handler)

        with pytest.raises(MalformedResponseError) as exc_info:
            await executor.request("/auth/profile")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_broken_json_after_prefix_is_malformed(self):
        handler = RecordingHandler(httpx.Response(200, text="{not json"))
        executor, _ = make_executor(handler)

        with pytest.raises(MalformedResponseError):
            await executor.request("/auth/profile")


# ─────────────────────────────────────────────────────
# Status handling
# ─────────────────────────────────────────────────────


class TestExecutorStatus:
    @pytest.mark.asyncio
    async def test_message_field_preferred(self):
        handler = RecordingHandler(
            json_response(401, {"message": "Invalid credentials", "error": "auth"})
        )
        executor, _ = make_executor(handler)

        with pytest.raises(ApiError) as exc_info:
            await executor.request("/auth/login", method="POST", json_body={})

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.payload["error"] == "auth"

    @pytest.mark.asyncio
    async def test_error_field_used_without_message(self):
        handler = RecordingHandler(json_response(400, {"error": "Image is required"}))
        executor, _ = make_executor(handler)

        with pytest.raises(ApiError) as exc_info:
            await executor.request("/cleanup", method="POST", form=MultipartForm())

        assert str(exc_info.value) == "Image is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [300, 404, 500])
    async def test_generic_message_fallback(self, status):
        handler = RecordingHandler(json_response(status, {}))
        executor, _ = make_executor(handler)

        with pytest.raises(ApiError) as exc_info:
            await executor.request("/notifications")

        assert exc_info.value.message == f"HTTP Error: {status}"

    @pytest.mark.asyncio
    async def test_array_error_body_uses_generic_message(self):
        handler = RecordingHandler(json_response(422, ["bad"]))
        executor, _ = make_executor(handler)

        with pytest.raises(ApiError) as exc_info:
            await executor.request("/notifications")

        assert exc_info.value.message == "HTTP Error: 422"

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        executor, _ = make_executor(RecordingHandler(refuse))

        with pytest.raises(NetworkError) as exc_info:
            await executor.request("/notifications")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestExecutorHelpers:
    def test_error_message_order(self):
        assert error_message({"message": "m", "error": "e"}, 500) == "m"
        assert error_message({"message": "", "error": "e"}, 500) == "e"
        assert error_message({}, 418) == "HTTP Error: 418"
        assert error_message(None, 503) == "HTTP Error: 503"

    def test_parse_json_text_accepts_object_and_array(self):
        assert parse_json_text('{"a": 1}') == {"a": 1}
        assert parse_json_text("[]") == []

    def test_parse_json_text_rejects_scalar_json(self):
        with pytest.raises(MalformedResponseError):
            parse_json_text("42")
