"""Transcribe a single audio file or media URI with one of the configured providers."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from transcriber.core.config import get_settings
from transcriber.integrations.base import ProviderError
from transcriber.integrations.providers import create_transcription_client

_REMOTE_PREFIXES = ("s3://", "https://")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcribe-file",
        description="Send one audio file to a speech-to-text provider and print the transcript.",
    )
    parser.add_argument(
        "audio",
        nargs="?",
        help="Local audio file path, or an s3:// / https:// media URI for the aws provider.",
    )
    parser.add_argument(
        "--provider",
        choices=("aws", "azure", "google"),
        default=None,
        help="Provider to use (default: TRANSCRIPTION_PROVIDER setting).",
    )
    return parser


async def _run(location: str, provider: str | None) -> int:
    settings = get_settings()
    try:
        client = create_transcription_client(settings, provider)  # type: ignore[arg-type]
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        text = await client.transcribe(location)
    except ProviderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print("Transcription:")
    print(text)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.audio:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: an audio file path or URI is required", file=sys.stderr)
        raise SystemExit(1)

    location = args.audio
    if not location.startswith(_REMOTE_PREFIXES):
        path = Path(location).expanduser().resolve()
        if not path.is_file():
            print(f"{parser.prog}: error: audio file '{location}' does not exist", file=sys.stderr)
            raise SystemExit(1)
        location = str(path)

    exit_code = asyncio.run(_run(location, args.provider))
    raise SystemExit(exit_code)


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
