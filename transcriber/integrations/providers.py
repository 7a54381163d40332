from __future__ import annotations

from transcriber.core.config import AppSettings, TranscriptionProvider
from transcriber.integrations.aws import AwsTranscribeJobClient
from transcriber.integrations.azure import AzureSpeechStreamingClient
from transcriber.integrations.base import TranscriptionClient
from transcriber.integrations.google import GoogleSpeechClient


def create_transcription_client(
    settings: AppSettings,
    provider: TranscriptionProvider | None = None,
) -> TranscriptionClient:
    """Build the client for the configured provider.

    Raises ValueError when the provider is unknown or its credentials are missing.
    """
    selected = provider or settings.transcription_provider
    if selected == "aws":
        return AwsTranscribeJobClient(settings)
    if selected == "azure":
        return AzureSpeechStreamingClient(settings)
    if selected == "google":
        return GoogleSpeechClient(settings)
    raise ValueError(f"Unknown transcription provider '{selected}'.")
