"""
File ingestion for incident attachments.

Uploads are embedded in the incident record itself as `data:` URLs, so an
attachment can be offered for download again without any file server.
Reading and base64-encoding happen in a worker thread, keeping the event
loop responsive while large scans are processed.
"""
# dentalcare/files.py

import asyncio
import base64
import binascii
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dentalcare.errors import FileReadError
from dentalcare.ids import IdGenerator
from dentalcare.logging_config import get_logger
from dentalcare.models import FileAttachment

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class FileBlob:
    """An in-memory or on-disk file awaiting upload.

    Attributes:
        name (str): Display name.
        type (str): MIME type, empty when unknown.
        data (bytes, optional): Content held in memory.
        path (Path, optional): Content read lazily from disk.
    """
    name: str
    type: str = ""
    data: Optional[bytes] = None
    path: Optional[Path] = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path, mime_type=None):
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, type=mime_type or guessed or "", path=path)

    @property
    def size(self):
        if self.data is not None:
            return len(self.data)
        if self.path is not None and self.path.exists():
            return self.path.stat().st_size
        return None

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise OSError(f"No content for '{self.name}'")
        return self.path.read_bytes()


@dataclass
class UploadBatch:
    """Outcome of a multi-file upload.

    Attributes:
        attachments (list[FileAttachment]): Files that were ingested, in input order.
        failures (list[FileReadError]): One error per file that could not be read.
    """
    attachments: list = field(default_factory=list)
    failures: list = field(default_factory=list)


def encode_data_url(mime_type: str, payload: bytes) -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


def decode_data_url(url: str):
    """Splits a base64 `data:` URL into its MIME type and decoded bytes.

    Args:
        url (str): A URL of the form `data:<mime>;base64,<payload>`.

    Returns:
        tuple: (mime_type, payload bytes).

    Raises:
        ValueError: If the URL is not a base64 data URL.
    """
    if not url.startswith("data:") or "," not in url:
        raise ValueError("Not a data URL")
    header, payload = url[len("data:"):].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URLs are supported")
    mime_type = header[: -len(";base64")] or DEFAULT_MIME_TYPE
    try:
        return mime_type, base64.b64decode(payload)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def _read_bytes(blob) -> bytes:
    # Streamlit's UploadedFile exposes the full buffer through getvalue().
    getvalue = getattr(blob, "getvalue", None)
    if callable(getvalue):
        return getvalue()
    return blob.read()


class FileIngestor:
    """Turns uploaded blobs into `FileAttachment` records."""

    def __init__(self):
        self._ids = IdGenerator("file_")

    async def upload_file(self, blob) -> FileAttachment:
        """Reads and encodes one blob.

        Args:
            blob: Any object with `name` and `read()` or `getvalue()`; `type` and
                `size` are used when present.

        Returns:
            FileAttachment: The attachment carrying the encoded content.

        Raises:
            FileReadError: If reading the blob fails for any reason.
        """
        name = getattr(blob, "name", None) or "upload"
        mime_type = getattr(blob, "type", None) or ""
        try:
            payload = await asyncio.to_thread(_read_bytes, blob)
        except Exception as e:
            logger.warning("file_read_failed", name=name, error=str(e))
            raise FileReadError(name, f"Could not read file '{name}': {e}") from e

        url = await asyncio.to_thread(encode_data_url, mime_type, payload)
        size = getattr(blob, "size", None)
        attachment = FileAttachment(
            id=self._ids(),
            name=name,
            type=mime_type,
            url=url,
            size=size if isinstance(size, int) else len(payload),
        )
        logger.info("file_ingested", file_id=attachment.id, name=name, size=attachment.size)
        return attachment

    async def upload_files(self, blobs) -> UploadBatch:
        """Uploads several blobs concurrently; a failing file does not stop the rest."""
        results = await asyncio.gather(
            *(self.upload_file(blob) for blob in blobs),
            return_exceptions=True,
        )
        batch = UploadBatch()
        for result in results:
            if isinstance(result, FileReadError):
                batch.failures.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                batch.attachments.append(result)
        return batch
