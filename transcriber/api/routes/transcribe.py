from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse

from transcriber.api.deps import get_asr_service
from transcriber.integrations.base import ProviderError
from transcriber.schemas.transcription import TranscriptionErrorResponse, TranscriptionResponse
from transcriber.services.asr import (
    AutomaticSpeechRecognitionService,
    ProviderNotConfiguredError,
)
from transcriber.services.uploads import (
    AudioUpload,
    MissingInputError,
    StorageFailureError,
    UnsupportedMediaTypeError,
)

router = APIRouter()

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": TranscriptionErrorResponse},
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: {"model": TranscriptionErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": TranscriptionErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": TranscriptionErrorResponse},
}


def _error(status_code: int, message: str) -> JSONResponse:
    payload = TranscriptionErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse | TranscriptionErrorResponse,
    responses=_ERROR_RESPONSES,
    summary="Transcribe uploaded audio using the configured provider.",
    status_code=status.HTTP_200_OK,
)
async def transcribe_audio(
    audio: UploadFile | None = File(default=None),
    service: AutomaticSpeechRecognitionService = Depends(get_asr_service),
) -> TranscriptionResponse | TranscriptionErrorResponse | JSONResponse:
    upload = None
    if audio is not None:
        upload = AudioUpload(
            filename=audio.filename or "",
            content_type=audio.content_type,
            content=await audio.read(),
            received_at=datetime.now(timezone.utc),
        )

    try:
        text = await service.transcribe_upload(upload)
    except MissingInputError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except UnsupportedMediaTypeError as exc:
        return _error(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(exc))
    except StorageFailureError as exc:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    except ProviderNotConfiguredError as exc:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
    except ProviderError as exc:
        return TranscriptionErrorResponse(error=str(exc))

    return TranscriptionResponse(text=text)
