"""
Transcription gateway.

Converts recorded audio into plain text through the OpenAI
speech-to-text endpoint.
"""

from typing import Optional, Protocol

from voicenotes.openai_client import OpenAIClient
from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import TranscriptionError
from voicenotes.utils.logger import get_logger

logger = get_logger("transcription")

DEFAULT_MIME_TYPE = "audio/wav"

# File extensions the endpoint uses to detect the container format
MIME_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/m4a": "m4a",
    "audio/x-m4a": "m4a",
    "audio/aac": "m4a",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/flac": "flac",
}


class TranscriptionBackend(Protocol):
    """Common interface for transcription backends."""

    def transcribe(self, audio: bytes, mime_hint: str = DEFAULT_MIME_TYPE) -> str:
        """Return the transcript text for an audio payload."""


class Transcriber:
    """
    Speech-to-text gateway backed by the OpenAI transcription API.

    An empty transcript is a valid result. Failures raise
    TranscriptionError and are not retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the transcriber.

        Args:
            api_key: OpenAI API key. Defaults to config value.
            model: Transcription model. Defaults to config value.
            api_url: OpenAI API base URL. Defaults to config value.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self.model = model or settings.openai.transcription_model
        self._client = OpenAIClient(
            api_key=api_key,
            api_url=api_url,
            timeout=timeout,
            error_cls=TranscriptionError,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def transcribe(self, audio: bytes, mime_hint: str = DEFAULT_MIME_TYPE) -> str:
        """
        Transcribe an audio payload.

        Args:
            audio: Raw audio bytes as recorded
            mime_hint: MIME type of the payload

        Returns:
            Transcript text, possibly empty

        Raises:
            TranscriptionError: If the service is unreachable, rejects the
                request, or credentials are missing
        """
        mime_type = (mime_hint or DEFAULT_MIME_TYPE).split(";")[0].strip().lower()
        extension = MIME_EXTENSIONS.get(mime_type, "wav")
        logger.info(f"Transcribing {len(audio)} bytes ({mime_type})")

        data = self._client.request(
            "POST",
            "/audio/transcriptions",
            data={"model": self.model},
            files={"file": (f"speech.{extension}", audio, mime_type)},
        )

        text = data.get("text")
        if text is None:
            raise TranscriptionError(
                "Transcription response has no text",
                response_body=str(data),
                endpoint="/audio/transcriptions",
            )
        if not isinstance(text, str):
            raise TranscriptionError(
                "Transcription text is not a string",
                response_body=str(data),
                endpoint="/audio/transcriptions",
            )

        text = text.strip()
        logger.debug(f"Transcribed: {text!r}")
        return text
