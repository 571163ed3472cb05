"""Transport layer for creating and updating Google Docs.

Defines the Transport protocol and implementations:
- GoogleDocsTransport: Production transport using the Docs and Drive APIs
- RecordingTransport: Offline transport that records batches for tests and dry runs
"""

from __future__ import annotations

import json
import ssl
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import certifi
import httpx

# API constants
API_BASE = "https://docs.googleapis.com/v1/documents"
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3/files"
DRIVE_UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3/files"
DEFAULT_TIMEOUT = 60

IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


class TransportError(Exception):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when a document or file is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class DocumentData:
    """A document as returned by the Docs API."""

    document_id: str
    title: str
    raw: dict[str, Any]  # Full API response


def public_image_url(file_id: str) -> str:
    """URL insertInlineImage can fetch for a publicly shared Drive file."""
    return f"https://drive.google.com/uc?export=view&id={file_id}"


class Transport(ABC):
    """Abstract base class for document transport.

    Implementations create documents, apply batchUpdate requests and make
    local images reachable by URL.
    """

    @abstractmethod
    async def create_document(self, title: str) -> DocumentData:
        """Create an empty document.

        Args:
            title: Document title

        Returns:
            DocumentData for the new document
        """
        ...

    @abstractmethod
    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply batchUpdate requests to a document.

        Args:
            document_id: The document identifier
            requests: List of batchUpdate request objects

        Returns:
            API response containing replies for each request
        """
        ...

    @abstractmethod
    async def upload_image(self, path: str | Path) -> str:
        """Upload a local image and return a publicly fetchable URL.

        Args:
            path: Local image file

        Returns:
            URL usable by insertInlineImage
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleDocsTransport(Transport):
    """Production transport talking to the Docs and Drive APIs.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with documents and drive.file scopes
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            transport=http_transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def create_document(self, title: str) -> DocumentData:
        """Create an empty document via the Docs API."""
        response = await self._post_request(API_BASE, {"title": title})
        return DocumentData(
            document_id=response["documentId"],
            title=response.get("title", title),
            raw=response,
        )

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply batchUpdate requests to Google Docs API."""
        url = f"{API_BASE}/{document_id}:batchUpdate"
        body = {"requests": requests}
        return await self._post_request(url, body)

    async def upload_image(self, path: str | Path) -> str:
        """Upload to Drive, share with anyone as reader, return the view URL."""
        path = Path(path)
        if not path.is_file():
            raise TransportError(f"Image file not found: {path}")
        mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")

        boundary = f"gdocgen-{uuid.uuid4().hex}"
        metadata = json.dumps({"name": path.name, "mimeType": mime_type})
        body = b"".join(
            [
                f"--{boundary}\r\n".encode(),
                b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
                metadata.encode(),
                f"\r\n--{boundary}\r\n".encode(),
                f"Content-Type: {mime_type}\r\n\r\n".encode(),
                path.read_bytes(),
                f"\r\n--{boundary}--\r\n".encode(),
            ]
        )
        uploaded = await self._send(
            "POST",
            f"{DRIVE_UPLOAD_BASE}?uploadType=multipart&fields=id",
            content=body,
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
        )
        file_id = uploaded.get("id")
        if not file_id:
            raise TransportError(f"Drive upload of {path.name} returned no file id")

        await self._post_request(
            f"{DRIVE_API_BASE}/{file_id}/permissions",
            {"role": "reader", "type": "anyone"},
        )
        return public_image_url(file_id)

    async def _post_request(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        """Make an authenticated POST request with a JSON body."""
        return await self._send("POST", url, json=body)

    async def _send(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            self._handle_http_error(e)
            raise  # unreachable, but makes type checker happy
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> None:
        """Handle HTTP errors and raise appropriate exceptions."""
        status = e.response.status_code
        if status == 401:
            raise AuthenticationError("Invalid or expired access token") from e
        if status == 403:
            raise AuthenticationError(
                "Access denied. Check your scopes and permissions."
            ) from e
        if status == 404:
            raise NotFoundError(
                "Document not found. Check the ID and sharing permissions."
            ) from e
        body = e.response.text
        raise APIError(f"API error ({status}): {body}", status_code=status) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


@dataclass
class RecordingTransport(Transport):
    """Offline transport that records every call.

    createHeader/createFooter replies carry generated segment ids so the
    deferred header/footer batch can be resolved. ``fail_on_batch`` makes the
    n-th batch_update call (1-based) raise an APIError.
    """

    fail_on_batch: int | None = None
    document_id: str = "recorded-document"
    batches: list[list[dict[str, Any]]] = field(default_factory=list)
    created_titles: list[str] = field(default_factory=list)
    uploaded: list[str] = field(default_factory=list)
    closed: bool = False

    async def create_document(self, title: str) -> DocumentData:
        """Record the title and return a fixed document id."""
        self.created_titles.append(title)
        raw = {"documentId": self.document_id, "title": title}
        return DocumentData(document_id=self.document_id, title=title, raw=raw)

    async def batch_update(
        self,
        document_id: str,
        requests: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Record the batch and fabricate replies."""
        if self.fail_on_batch is not None and len(self.batches) + 1 == self.fail_on_batch:
            raise APIError(f"Batch {self.fail_on_batch} rejected", status_code=400)
        self.batches.append(requests)

        replies: list[dict[str, Any]] = []
        for i, request in enumerate(requests):
            if "createHeader" in request:
                replies.append({"createHeader": {"headerId": f"kix.header{i}"}})
            elif "createFooter" in request:
                replies.append({"createFooter": {"footerId": f"kix.footer{i}"}})
            else:
                replies.append({})
        return {"documentId": document_id, "replies": replies}

    async def upload_image(self, path: str | Path) -> str:
        """Record the path and return a stable fake URL."""
        self.uploaded.append(str(path))
        return public_image_url(f"recorded-{len(self.uploaded)}")

    async def close(self) -> None:
        """Mark the transport closed."""
        self.closed = True
