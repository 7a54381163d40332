from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import uuid4

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from transcriber.core.config import AppSettings
from transcriber.integrations.base import (
    AudioLocation,
    TranscriptionClient,
    TransportError,
    read_audio,
)


logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = ("s3://", "https://")
_MEDIA_FORMATS = {"mp3", "mp4", "wav", "flac", "ogg", "amr", "webm", "m4a"}


class AwsTranscribeJobClient(TranscriptionClient):
    """Submit named AWS Transcribe batch jobs; results land in the output bucket."""

    def __init__(self, settings: AppSettings) -> None:
        if not settings.aws_region:
            raise ValueError("AWS region is not configured.")
        self._settings = settings

    async def transcribe(self, location: AudioLocation) -> str:
        job_name = self._build_job_name()
        media_uri = await self._resolve_media_uri(location, job_name)

        params: dict[str, Any] = {
            "TranscriptionJobName": job_name,
            "LanguageCode": self._settings.language_code,
            "MediaFormat": self._media_format(media_uri),
            "Media": {"MediaFileUri": media_uri},
        }
        if self._settings.aws_output_bucket:
            params["OutputBucketName"] = self._settings.aws_output_bucket
        if self._settings.show_speaker_labels:
            params["Settings"] = {
                "ShowSpeakerLabels": True,
                "MaxSpeakerLabels": self._settings.max_speaker_labels,
            }

        try:
            async with self._session().client("transcribe") as client:
                response = await client.start_transcription_job(**params)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to start transcription job %s", job_name, exc_info=exc)
            raise TransportError(f"AWS Transcribe request failed: {exc}") from exc

        job = response.get("TranscriptionJob") or {}
        status = job.get("TranscriptionJobStatus", "UNKNOWN")
        logger.info("Started transcription job %s for %s (%s)", job_name, media_uri, status)
        return f"Transcription job {job_name} submitted ({status})."

    async def _resolve_media_uri(self, location: AudioLocation, job_name: str) -> str:
        if isinstance(location, str) and location.startswith(_REMOTE_SCHEMES):
            return location

        bucket = self._settings.aws_media_bucket
        if not bucket:
            raise TransportError(
                "AWS Transcribe needs an s3:// media URI; set AWS_MEDIA_BUCKET to stage local files."
            )

        suffix = "" if isinstance(location, bytes) else PurePosixPath(os.fspath(location)).suffix
        if not suffix:
            suffix = f".{self._settings.aws_media_format}"
        prefix = self._settings.aws_media_prefix.rstrip("/")
        key = f"{prefix}/{job_name}{suffix}" if prefix else f"{job_name}{suffix}"
        body = read_audio(location)

        try:
            async with self._session().client("s3") as client:
                await client.put_object(Bucket=bucket, Key=key, Body=body)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to stage audio at s3://%s/%s", bucket, key, exc_info=exc)
            raise TransportError(f"Unable to upload audio to S3: {exc}") from exc

        logger.info("Staged audio for transcription at s3://%s/%s", bucket, key)
        return f"s3://{bucket}/{key}"

    def _media_format(self, media_uri: str) -> str:
        extension = PurePosixPath(media_uri).suffix.lstrip(".").lower()
        if extension in _MEDIA_FORMATS:
            return extension
        return self._settings.aws_media_format

    def _build_job_name(self) -> str:
        timestamp = datetime.now(tz=timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"{self._settings.aws_transcription_job_prefix}-{timestamp}-{uuid4().hex[:8]}"

    def _session(self) -> aioboto3.Session:
        session_kwargs: dict[str, Any] = {"region_name": self._settings.aws_region}
        if self._settings.aws_access_key_id and self._settings.aws_secret_access_key:
            session_kwargs["aws_access_key_id"] = self._settings.aws_access_key_id.get_secret_value()
            session_kwargs["aws_secret_access_key"] = (
                self._settings.aws_secret_access_key.get_secret_value()
            )
        return aioboto3.Session(**session_kwargs)
