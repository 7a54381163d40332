from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

AudioLocation = Union[str, os.PathLike, bytes]


class ProviderError(RuntimeError):
    """Raised when a transcription provider cannot produce a transcript."""


class NoSpeechDetected(ProviderError):
    """Raised when the provider heard no recognizable speech."""

    def __init__(self, message: str = "Speech could not be recognized.") -> None:
        super().__init__(message)


class RecognitionCanceled(ProviderError):
    """Raised when the provider aborted recognition, e.g. on auth or transport errors."""

    def __init__(self, reason: str, details: str | None = None) -> None:
        self.reason = reason
        self.details = details
        message = f"CANCELED: {reason}"
        if details:
            message = f"{message} ({details})"
        super().__init__(message)


class TransportError(ProviderError):
    """Raised when the SDK or network call to the provider fails."""


class TranscriptionClient(ABC):
    """Speech-to-text backend exposing a single `transcribe` call."""

    @abstractmethod
    async def transcribe(self, location: AudioLocation) -> str:
        """Return the transcript for a file path, media URI or raw bytes.

        Raises ProviderError on recognition or transport failure.
        """
        ...


def read_audio(location: AudioLocation) -> bytes:
    """Load audio content from a local path, or pass raw bytes through."""
    if isinstance(location, bytes):
        return location
    try:
        return Path(location).read_bytes()
    except OSError as exc:
        raise TransportError(f"Unable to read audio file '{location}': {exc}") from exc
