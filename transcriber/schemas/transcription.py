from pydantic import BaseModel, Field


class TranscriptionResponse(BaseModel):
    """Response payload for a successful upload transcription."""

    text: str = Field(..., description="Recognized transcript for the uploaded audio.")


class TranscriptionErrorResponse(BaseModel):
    """Response payload when the upload or the provider call failed."""

    error: str = Field(..., description="Human readable reason the transcription failed.")
