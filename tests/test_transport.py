"""Tests for transport layer."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from gdocgen.transport import (
    APIError,
    AuthenticationError,
    DocumentData,
    GoogleDocsTransport,
    NotFoundError,
    RecordingTransport,
    TransportError,
)


def test_transport_error_hierarchy() -> None:
    """Test that transport errors have correct inheritance."""
    assert issubclass(AuthenticationError, TransportError)
    assert issubclass(NotFoundError, TransportError)
    assert issubclass(APIError, TransportError)


def test_api_error_has_status_code() -> None:
    """Test that APIError stores status code."""
    error = APIError("Test error", status_code=500)
    assert error.status_code == 500
    assert "Test error" in str(error)


def test_document_data_is_frozen() -> None:
    """Test that DocumentData is immutable."""
    data = DocumentData(document_id="doc1", title="T", raw={"documentId": "doc1"})
    with pytest.raises(AttributeError):
        data.document_id = "modified"  # type: ignore[misc]


def _transport(handler) -> GoogleDocsTransport:
    return GoogleDocsTransport("token", http_transport=httpx.MockTransport(handler))


class TestGoogleDocsTransport:
    @pytest.mark.asyncio
    async def test_batch_update_posts_requests(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"replies": [{}]})

        transport = _transport(handler)
        requests = [{"insertText": {"location": {"index": 1}, "text": "x"}}]
        response = await transport.batch_update("doc1", requests)
        await transport.close()

        assert response == {"replies": [{}]}
        (request,) = seen
        assert request.method == "POST"
        assert str(request.url) == "https://docs.googleapis.com/v1/documents/doc1:batchUpdate"
        assert request.headers["Authorization"] == "Bearer token"
        assert json.loads(request.content) == {"requests": requests}

    @pytest.mark.asyncio
    async def test_create_document(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(200, json={"documentId": "new1", "title": body["title"]})

        transport = _transport(handler)
        document = await transport.create_document("Report")
        await transport.close()

        assert document.document_id == "new1"
        assert document.title == "Report"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
            (500, APIError),
        ],
    )
    async def test_http_errors(self, status: int, error: type[Exception]) -> None:
        transport = _transport(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(error):
            await transport.batch_update("doc1", [])
        await transport.close()

    @pytest.mark.asyncio
    async def test_api_error_status(self) -> None:
        transport = _transport(lambda request: httpx.Response(400, text="bad request"))
        with pytest.raises(APIError) as exc_info:
            await transport.batch_update("doc1", [])
        await transport.close()
        assert exc_info.value.status_code == 400
        assert "bad request" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = _transport(handler)
        with pytest.raises(TransportError, match="Network error"):
            await transport.batch_update("doc1", [])
        await transport.close()

    @pytest.mark.asyncio
    async def test_upload_image(self, tmp_path: Path) -> None:
        image = tmp_path / "chart.png"
        image.write_bytes(b"\x89PNG fake")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.startswith("/upload/"):
                return httpx.Response(200, json={"id": "file1"})
            return httpx.Response(200, json={"id": "perm1"})

        transport = _transport(handler)
        url = await transport.upload_image(image)
        await transport.close()

        assert url == "https://drive.google.com/uc?export=view&id=file1"
        upload, permission = seen
        assert upload.url.params["uploadType"] == "multipart"
        assert upload.headers["Content-Type"].startswith("multipart/related; boundary=")
        assert b"image/png" in upload.content
        assert b"\x89PNG fake" in upload.content
        assert permission.url.path == "/drive/v3/files/file1/permissions"
        assert json.loads(permission.content) == {"role": "reader", "type": "anyone"}

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, tmp_path: Path) -> None:
        transport = _transport(lambda request: httpx.Response(200, json={}))
        with pytest.raises(TransportError, match="not found"):
            await transport.upload_image(tmp_path / "missing.png")
        await transport.close()


class TestRecordingTransport:
    @pytest.mark.asyncio
    async def test_fabricates_segment_ids(self) -> None:
        transport = RecordingTransport()
        response = await transport.batch_update(
            "doc1",
            [{"createHeader": {"type": "DEFAULT"}}, {"createFooter": {"type": "DEFAULT"}}],
        )
        assert response["replies"] == [
            {"createHeader": {"headerId": "kix.header0"}},
            {"createFooter": {"footerId": "kix.footer1"}},
        ]
        assert len(transport.batches) == 1

    @pytest.mark.asyncio
    async def test_fail_on_batch(self) -> None:
        transport = RecordingTransport(fail_on_batch=2)
        await transport.batch_update("doc1", [])
        with pytest.raises(APIError):
            await transport.batch_update("doc1", [])
        assert len(transport.batches) == 1

    @pytest.mark.asyncio
    async def test_create_and_upload(self) -> None:
        transport = RecordingTransport(document_id="abc")
        document = await transport.create_document("T")
        url = await transport.upload_image("a.png")
        await transport.close()
        assert document.document_id == "abc"
        assert transport.created_titles == ["T"]
        assert transport.uploaded == ["a.png"]
        assert url.endswith("recorded-1")
        assert transport.closed
