import logging

import uvicorn

from transcriber.core.app import create_app
from transcriber.core.config import get_settings

logger = logging.getLogger(__name__)

app = create_app()


def run() -> None:
    """Entrypoint for `transcriber-api` script."""
    settings = get_settings()
    logger.info(
        "Serving %s transcription on http://%s:%s (recordings in %s)",
        settings.transcription_provider,
        settings.api_host,
        settings.api_port,
        settings.recordings_dir,
    )
    uvicorn.run(
        "transcriber.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
