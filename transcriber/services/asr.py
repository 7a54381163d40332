from __future__ import annotations

import logging

from transcriber.integrations.base import ProviderError, TranscriptionClient, TransportError
from transcriber.services.uploads import AudioUpload, MissingInputError, TemporaryAudioStorage


logger = logging.getLogger(__name__)


class ProviderNotConfiguredError(RuntimeError):
    """Raised when no transcription provider was wired at startup."""


class AutomaticSpeechRecognitionService:
    """Coordinate one upload through temporary storage and the transcription provider."""

    def __init__(
        self,
        storage: TemporaryAudioStorage,
        client: TranscriptionClient | None,
    ) -> None:
        self._storage = storage
        self._client = client

    async def transcribe_upload(self, upload: AudioUpload | None) -> str:
        """Return the provider transcript for an upload.

        Raises UploadError subclasses for rejected input or storage failures,
        ProviderNotConfiguredError when no provider is wired, and ProviderError
        when recognition fails. The temporary file never outlives this call.
        """
        if upload is None or not upload.content:
            raise MissingInputError("No file received.")
        self._storage.validate(upload)
        if self._client is None:
            raise ProviderNotConfiguredError("Server speech recognition is not configured.")

        async with self._storage.stored(upload) as path:
            logger.info("Transcribing upload %s (%d bytes)", path.name, len(upload.content))
            try:
                return await self._client.transcribe(str(path))
            except ProviderError as exc:
                logger.info("Transcription failed for %s: %s", path.name, exc)
                raise
            except Exception as exc:
                logger.exception("Unexpected transcription failure for %s", path.name)
                raise TransportError(str(exc) or exc.__class__.__name__) from exc
