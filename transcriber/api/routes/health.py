from datetime import datetime, timezone

from fastapi import APIRouter

from transcriber.core.config import get_settings

router = APIRouter()


@router.get("/healthz")
async def healthcheck() -> dict[str, str]:
    """Liveness probe; also reports which transcription provider is wired."""
    return {
        "status": "ok",
        "provider": get_settings().transcription_provider,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
