import logging

from transcriber.core.config import get_settings
from transcriber.integrations.providers import create_transcription_client
from transcriber.services.asr import AutomaticSpeechRecognitionService
from transcriber.services.uploads import TemporaryAudioStorage

logger = logging.getLogger(__name__)

_asr_service: AutomaticSpeechRecognitionService | None = None


async def get_asr_service() -> AutomaticSpeechRecognitionService:
    """Provide the AutomaticSpeechRecognitionService singleton."""
    global _asr_service
    if _asr_service is None:
        settings = get_settings()
        try:
            client = create_transcription_client(settings)
        except ValueError as exc:
            logger.warning(
                "Transcription provider '%s' unavailable: %s",
                settings.transcription_provider,
                exc,
            )
            client = None
        storage = TemporaryAudioStorage(
            settings.recordings_dir,
            settings.allowed_content_types,
        )
        _asr_service = AutomaticSpeechRecognitionService(storage, client)
    return _asr_service
