from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePath
from uuid import uuid4


logger = logging.getLogger(__name__)

_FALLBACK_FILENAME = "audio"
_NAME_MAX_BYTES = 255
_MAX_SUFFIX_BYTES = 16
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


class UploadError(ValueError):
    """Base class for uploads rejected before reaching a provider."""


class MissingInputError(UploadError):
    """Raised when a request carries no audio file."""


class UnsupportedMediaTypeError(UploadError):
    """Raised when the upload MIME type is not allow-listed."""


class StorageFailureError(UploadError):
    """Raised when the upload could not be written to the recordings directory."""


@dataclass(frozen=True, slots=True)
class AudioUpload:
    """One audio blob received over HTTP, scoped to a single request."""

    filename: str
    content_type: str | None
    content: bytes
    received_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


class TemporaryAudioStorage:
    """Materialize uploads into the recordings directory for the duration of a request."""

    def __init__(self, directory: Path, allowed_content_types: Iterable[str]) -> None:
        self._directory = directory
        self._allowed = {_normalize_content_type(item) for item in allowed_content_types}

    def validate(self, upload: AudioUpload) -> None:
        content_type = _normalize_content_type(upload.content_type or "")
        if content_type not in self._allowed:
            allowed = ", ".join(sorted(self._allowed))
            raise UnsupportedMediaTypeError(
                f"Invalid file type '{upload.content_type or 'unknown'}', only {allowed} allowed."
            )

    def build_filename(self, upload: AudioUpload) -> str:
        """Combine arrival time, a random token and the client filename."""
        timestamp_ms = int(upload.received_at.timestamp() * 1000)
        prefix = f"{timestamp_ms}-{uuid4().hex[:8]}-"
        original = _sanitize_filename(upload.filename)
        return prefix + _truncate_filename(original, _NAME_MAX_BYTES - len(prefix.encode("utf-8")))

    @asynccontextmanager
    async def stored(self, upload: AudioUpload) -> AsyncIterator[Path]:
        """Write the upload to disk and always remove it on exit."""
        path = self._directory / self.build_filename(upload)
        try:
            await asyncio.to_thread(self._write, path, upload.content)
        except (OSError, ValueError) as exc:
            logger.error("Failed to write upload %s", path, exc_info=exc)
            self._discard(path)
            raise StorageFailureError("File was not saved on the server.") from exc

        if not path.exists():
            logger.error("File was not saved: %s", path)
            raise StorageFailureError("File was not saved on the server.")

        try:
            yield path
        finally:
            self._discard(path)

    def _write(self, path: Path, content: bytes) -> None:
        if not self._directory.exists():
            self._directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created recordings folder %s", self._directory)
        path.write_bytes(content)

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete temporary upload %s", path, exc_info=exc)


def _normalize_content_type(value: str) -> str:
    return value.split(";", 1)[0].strip().lower()


def _sanitize_filename(filename: str) -> str:
    """Reduce a client filename to a printable base name."""
    cleaned = _CONTROL_CHARACTERS.sub("", filename).replace("\\", "/")
    name = PurePath(cleaned).name.strip()
    if name in {"", ".", ".."}:
        return _FALLBACK_FILENAME
    return name


def _truncate_filename(name: str, limit: int) -> str:
    """Shorten the stem so the UTF-8 encoded name fits in `limit` bytes."""
    if len(name.encode("utf-8")) <= limit:
        return name
    suffix = PurePath(name).suffix
    if len(suffix.encode("utf-8")) > _MAX_SUFFIX_BYTES:
        suffix = ""
    stem = name[: len(name) - len(suffix)]
    budget = limit - len(suffix.encode("utf-8"))
    # errors="ignore" drops a multi-byte character cut in half
    stem = stem.encode("utf-8")[:budget].decode("utf-8", errors="ignore")
    return f"{stem}{suffix}" if stem else _FALLBACK_FILENAME
