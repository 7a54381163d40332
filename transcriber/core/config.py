from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


TranscriptionProvider = Literal["aws", "azure", "google"]


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="Audio Transcription API")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=3001, alias="SERVER_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    transcription_provider: TranscriptionProvider = Field(
        default="azure", alias="TRANSCRIPTION_PROVIDER"
    )
    recordings_folder_name: str = Field(default="recordings", alias="RECORDINGS_FOLDER_NAME")
    allowed_content_types: list[str] = Field(
        default_factory=lambda: ["audio/wav", "audio/x-wav", "audio/webm"],
        alias="ALLOWED_CONTENT_TYPES",
    )

    language_code: str = Field(default="en-US", alias="LANGUAGE_CODE")
    sample_rate_hertz: int = Field(default=16000, alias="SAMPLE_RATE_HERTZ")
    enable_automatic_punctuation: bool = Field(
        default=True, alias="ENABLE_AUTOMATIC_PUNCTUATION"
    )
    google_use_enhanced: bool = Field(default=True, alias="GOOGLE_USE_ENHANCED")
    google_application_credentials: Optional[str] = Field(
        default=None, alias="GOOGLE_APPLICATION_CREDENTIALS"
    )
    show_speaker_labels: bool = Field(default=True, alias="SHOW_SPEAKER_LABELS")
    max_speaker_labels: int = Field(default=3, alias="MAX_SPEAKER_LABELS")

    aws_region: Optional[str] = Field(default=None, alias="AWS_REGION")
    aws_access_key_id: Optional[SecretStr] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[SecretStr] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    aws_output_bucket: Optional[str] = Field(default=None, alias="AWS_BUCKET")
    aws_media_bucket: Optional[str] = Field(default=None, alias="AWS_MEDIA_BUCKET")
    aws_media_prefix: str = Field(default="recordings/", alias="AWS_MEDIA_PREFIX")
    aws_media_format: str = Field(default="mp3", alias="AWS_MEDIA_FORMAT")
    aws_transcription_job_prefix: str = Field(
        default="transcribe", alias="AWS_TRANSCRIPTION_JOB_PREFIX"
    )

    azure_speech_key: Optional[SecretStr] = Field(default=None, alias="AZURE_SPEECH_KEY")
    azure_speech_region: Optional[str] = Field(default=None, alias="AZURE_SPEECH_REGION")
    azure_speech_endpoint: Optional[str] = Field(default=None, alias="AZURE_SPEECH_ENDPOINT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def recordings_dir(self) -> Path:
        """Recordings folder resolved against the working directory."""
        return Path.cwd() / self.recordings_folder_name


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
