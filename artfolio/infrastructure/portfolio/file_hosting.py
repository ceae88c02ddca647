"""
Adapters: File hosting.

Implements the FileHostingPort. The local adapter writes files into a
directory served by the app itself; the HTTP adapter posts them to an
external upload service and reads back the public URL.
"""

import logging
import mimetypes
import uuid
from pathlib import Path, PurePath
from typing import Any, Optional

import httpx

from artfolio.domain.portfolio.entities import UploadedFile
from artfolio.domain.portfolio.errors import FileHostingError
from artfolio.domain.portfolio.ports import FileHostingPort

logger = logging.getLogger(__name__)


def stored_name(file: UploadedFile) -> str:
    """Return a collision-free file name keeping the original extension."""
    suffix = PurePath(file.filename or "").suffix.lower()
    if not suffix:
        suffix = mimetypes.guess_extension(file.content_type or "") or ""
    return f"{uuid.uuid4().hex}{suffix}"


class LocalFileHostingAdapter(FileHostingPort):
    """Stores uploads on local disk under ``upload_dir``."""

    def __init__(self, upload_dir: str | Path, public_base_url: str) -> None:
        self._upload_dir = Path(upload_dir)
        self._public_base_url = public_base_url.rstrip("/")

    def upload(self, file: UploadedFile) -> str:
        name = stored_name(file)
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
            (self._upload_dir / name).write_bytes(file.content)
        except OSError as exc:
            raise FileHostingError(file.filename, str(exc)) from exc
        logger.info("Stored upload %s as %s (%d bytes)", file.filename, name, file.size)
        return f"{self._public_base_url}/{name}"


def _extract_url(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    if isinstance(payload.get("url"), str):
        return payload["url"]
    data = payload.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        url = data[0].get("url")
        if isinstance(url, str):
            return url
    if isinstance(payload.get("fileUrl"), str):
        return payload["fileUrl"]
    return None


class HttpFileHostingAdapter(FileHostingPort):
    """Posts uploads as multipart form data to an external file host.

    The host's response may carry the URL as ``url``, ``data[0].url`` or
    ``fileUrl``.
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._url = url
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.Client(headers=headers, timeout=timeout)

    def upload(self, file: UploadedFile) -> str:
        files = {"file": (file.filename, file.content, file.content_type)}
        try:
            response = self._client.post(self._url, files=files)
        except httpx.HTTPError as exc:
            raise FileHostingError(file.filename, f"{type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            raise FileHostingError(file.filename, f"file host returned {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FileHostingError(file.filename, "file host returned invalid JSON") from exc

        url = _extract_url(payload)
        if not url:
            raise FileHostingError(file.filename, "file host response has no URL")
        logger.info("Uploaded %s to file host", file.filename)
        return url

    def close(self) -> None:
        self._client.close()
