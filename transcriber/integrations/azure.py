from __future__ import annotations

import asyncio
import logging
from typing import Iterator

import azure.cognitiveservices.speech as speechsdk

from transcriber.core.config import AppSettings
from transcriber.integrations.base import (
    AudioLocation,
    NoSpeechDetected,
    RecognitionCanceled,
    TranscriptionClient,
    TransportError,
    read_audio,
)


logger = logging.getLogger(__name__)

CHUNK_SIZE = 32 * 1024


class AzureSpeechStreamingClient(TranscriptionClient):
    """Stream audio into an Azure Speech push stream and await one recognition."""

    def __init__(self, settings: AppSettings) -> None:
        if not settings.azure_speech_key or not (
            settings.azure_speech_region or settings.azure_speech_endpoint
        ):
            raise ValueError("Azure Speech credentials are not configured.")

        subscription = settings.azure_speech_key.get_secret_value()
        if settings.azure_speech_endpoint:
            self._speech_config = speechsdk.SpeechConfig(
                subscription=subscription, endpoint=settings.azure_speech_endpoint
            )
        else:
            self._speech_config = speechsdk.SpeechConfig(
                subscription=subscription, region=settings.azure_speech_region
            )
        self._speech_config.speech_recognition_language = settings.language_code
        self._sample_rate = settings.sample_rate_hertz

    async def transcribe(self, location: AudioLocation) -> str:
        audio = read_audio(location)
        return await asyncio.to_thread(self._recognize, audio)

    def _recognize(self, audio: bytes) -> str:
        stream_format = speechsdk.audio.AudioStreamFormat(
            samples_per_second=self._sample_rate,
            bits_per_sample=16,
            channels=1,
        )
        push_stream = speechsdk.audio.PushAudioInputStream(stream_format=stream_format)
        for chunk in _chunks(audio):
            push_stream.write(chunk)
        push_stream.close()

        audio_config = speechsdk.audio.AudioConfig(stream=push_stream)
        recognizer = speechsdk.SpeechRecognizer(
            speech_config=self._speech_config,
            audio_config=audio_config,
        )

        logger.debug("Starting Azure speech recognition (%d bytes)", len(audio))
        try:
            result = recognizer.recognize_once_async().get()
        except RuntimeError as exc:
            raise TransportError(f"Azure Speech request failed: {exc}") from exc

        if result.reason == speechsdk.ResultReason.RecognizedSpeech:
            logger.info("Azure speech recognized (%d chars)", len(result.text))
            return result.text
        if result.reason == speechsdk.ResultReason.NoMatch:
            logger.info("Azure speech could not be recognized")
            raise NoSpeechDetected()
        if result.reason == speechsdk.ResultReason.Canceled:
            cancellation = result.cancellation_details
            details = None
            if cancellation.reason == speechsdk.CancellationReason.Error:
                details = cancellation.error_details
            logger.warning("Azure speech recognition canceled: %s %s", cancellation.reason, details or "")
            raise RecognitionCanceled(str(cancellation.reason), details)

        raise TransportError(f"Unexpected Azure Speech result: {result.reason}")


def _chunks(audio: bytes) -> Iterator[bytes]:
    view = memoryview(audio)
    for offset in range(0, len(view), CHUNK_SIZE):
        yield bytes(view[offset : offset + CHUNK_SIZE])
