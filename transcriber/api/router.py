from fastapi import APIRouter

from transcriber.api.routes import health, transcribe

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(transcribe.router, tags=["transcription"])
