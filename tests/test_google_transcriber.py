from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from google.api_core.exceptions import ServiceUnavailable
from google.auth.exceptions import RefreshError
from google.cloud import speech

from transcriber.core.config import AppSettings
from transcriber.integrations.base import NoSpeechDetected, TransportError
from transcriber.integrations.google import GoogleSpeechClient


def _result(*transcripts: str) -> SimpleNamespace:
    return SimpleNamespace(
        alternatives=[SimpleNamespace(transcript=text, confidence=0.9) for text in transcripts]
    )


class StubSpeechClient:
    def __init__(self, results: list[Any] | None = None, error: Exception | None = None) -> None:
        self.results = results or []
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def recognize(self, *, config: speech.RecognitionConfig, audio: speech.RecognitionAudio) -> Any:
        self.calls.append({"config": config, "audio": audio})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(results=self.results)


@pytest.mark.asyncio
async def test_joins_first_alternative_of_each_result(tmp_path: Path) -> None:
    audio_file = tmp_path / "clip.wav"
    audio_file.write_bytes(b"RIFF0000WAVE")
    stub = StubSpeechClient([_result("hello world", "hello word"), _result("how are you")])
    client = GoogleSpeechClient(AppSettings(), client=stub)  # type: ignore[arg-type]

    text = await client.transcribe(str(audio_file))

    assert text == "hello world\nhow are you"
    call = stub.calls[0]
    assert call["audio"].content == b"RIFF0000WAVE"
    config = call["config"]
    assert config.language_code == "en-US"
    assert config.sample_rate_hertz == 16000
    assert config.enable_automatic_punctuation is True
    assert config.use_enhanced is True
    assert config.encoding == speech.RecognitionConfig.AudioEncoding.ENCODING_UNSPECIFIED


@pytest.mark.asyncio
async def test_results_without_alternatives_are_skipped() -> None:
    stub = StubSpeechClient([_result(), _result("only this")])
    client = GoogleSpeechClient(AppSettings(), client=stub)  # type: ignore[arg-type]

    assert await client.transcribe(b"\x00\x01") == "only this"


@pytest.mark.asyncio
async def test_empty_results_raise_no_speech_detected() -> None:
    client = GoogleSpeechClient(AppSettings(), client=StubSpeechClient([]))  # type: ignore[arg-type]

    with pytest.raises(NoSpeechDetected):
        await client.transcribe(b"\x00\x01")


@pytest.mark.asyncio
async def test_api_error_becomes_transport_error() -> None:
    stub = StubSpeechClient(error=ServiceUnavailable("backend unavailable"))
    client = GoogleSpeechClient(AppSettings(), client=stub)  # type: ignore[arg-type]

    with pytest.raises(TransportError, match="backend unavailable"):
        await client.transcribe(b"\x00\x01")


@pytest.mark.asyncio
async def test_expired_credentials_become_transport_error() -> None:
    stub = StubSpeechClient(error=RefreshError("token expired"))
    client = GoogleSpeechClient(AppSettings(), client=stub)  # type: ignore[arg-type]

    with pytest.raises(TransportError, match="token expired"):
        await client.transcribe(b"\x00\x01")


@pytest.mark.asyncio
async def test_missing_file_becomes_transport_error(tmp_path: Path) -> None:
    stub = StubSpeechClient([_result("unused")])
    client = GoogleSpeechClient(AppSettings(), client=stub)  # type: ignore[arg-type]

    with pytest.raises(TransportError):
        await client.transcribe(str(tmp_path / "missing.wav"))

    assert stub.calls == []


@pytest.mark.asyncio
async def test_client_is_created_once_from_service_account(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = StubSpeechClient([_result("hi")])
    created: list[str] = []

    def from_service_account_file(path: str) -> StubSpeechClient:
        created.append(path)
        return stub

    monkeypatch.setattr(
        "transcriber.integrations.google.speech.SpeechAsyncClient.from_service_account_file",
        from_service_account_file,
    )
    client = GoogleSpeechClient(AppSettings(GOOGLE_APPLICATION_CREDENTIALS="/etc/keys/speech.json"))

    await client.transcribe(b"\x00")
    await client.transcribe(b"\x00")

    assert created == ["/etc/keys/speech.json"]
    assert len(stub.calls) == 2
