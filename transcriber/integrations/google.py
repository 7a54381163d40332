from __future__ import annotations

import logging

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import speech

from transcriber.core.config import AppSettings
from transcriber.integrations.base import (
    AudioLocation,
    NoSpeechDetected,
    TranscriptionClient,
    TransportError,
    read_audio,
)


logger = logging.getLogger(__name__)


class GoogleSpeechClient(TranscriptionClient):
    """One blocking Google Cloud Speech `recognize` call per file."""

    def __init__(
        self,
        settings: AppSettings,
        client: speech.SpeechAsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client

    async def transcribe(self, location: AudioLocation) -> str:
        audio = speech.RecognitionAudio(content=read_audio(location))
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.ENCODING_UNSPECIFIED,
            sample_rate_hertz=self._settings.sample_rate_hertz,
            language_code=self._settings.language_code,
            enable_automatic_punctuation=self._settings.enable_automatic_punctuation,
            use_enhanced=self._settings.google_use_enhanced,
        )

        try:
            response = await self._get_client().recognize(config=config, audio=audio)
        except (GoogleAPIError, GoogleAuthError) as exc:
            logger.warning("Google speech recognition failed", exc_info=exc)
            raise TransportError(f"Google Speech request failed: {exc}") from exc

        transcription = "\n".join(
            result.alternatives[0].transcript
            for result in response.results
            if result.alternatives
        )
        if not transcription.strip():
            raise NoSpeechDetected()

        logger.info("Google speech recognized %d result(s)", len(response.results))
        return transcription

    def _get_client(self) -> speech.SpeechAsyncClient:
        if self._client is None:
            credentials_file = self._settings.google_application_credentials
            try:
                if credentials_file:
                    self._client = speech.SpeechAsyncClient.from_service_account_file(
                        credentials_file
                    )
                else:
                    self._client = speech.SpeechAsyncClient()
            except GoogleAuthError as exc:
                raise TransportError(f"Google credentials are not usable: {exc}") from exc
        return self._client
