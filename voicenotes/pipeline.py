"""
Voice note pipeline facade.

Runs one completed recording through transcription, classification
and routing, strictly in sequence, against a placeholder note that
the caller created when recording stopped.
"""

import time
from typing import Optional

from voicenotes.classification import DecisionClassifier, build_classifier
from voicenotes.models.decision import Decision
from voicenotes.models.records import RoutingOutcome
from voicenotes.routing import Router
from voicenotes.store import CollectionStore, build_store
from voicenotes.transcription import DEFAULT_MIME_TYPE, Transcriber, TranscriptionBackend
from voicenotes.utils.config import Settings, get_settings
from voicenotes.utils.exceptions import VoiceNotesError
from voicenotes.utils.logger import get_contextual_logger, get_logger

logger = get_logger("pipeline")


class VoiceNotePipeline:
    """
    Orchestrates transcription, classification and routing.

    Components not passed in are built lazily from settings, so a
    pipeline used only for listings never opens an OpenAI client.
    """

    def __init__(
        self,
        store: Optional[CollectionStore] = None,
        transcriber: Optional[TranscriptionBackend] = None,
        classifier: Optional[DecisionClassifier] = None,
        router: Optional[Router] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            store: Collection store. Defaults to the configured backend.
            transcriber: Speech-to-text backend. Defaults to OpenAI.
            classifier: Decision classifier. Defaults to the configured backend.
            router: Routing engine. Defaults to a Router over `store`.
            settings: Settings used for defaults. Defaults to get_settings().
        """
        self.settings = settings or get_settings()
        self._store = store
        self._transcriber = transcriber
        self._classifier = classifier
        self._router = router

    @property
    def store(self) -> CollectionStore:
        """Lazy load the collection store."""
        if self._store is None:
            self._store = build_store(self.settings)
        return self._store

    @property
    def transcriber(self) -> TranscriptionBackend:
        """Lazy load the transcriber."""
        if self._transcriber is None:
            self._transcriber = Transcriber(
                api_key=self.settings.openai.api_key,
                model=self.settings.openai.transcription_model,
                api_url=self.settings.openai.api_url,
                timeout=self.settings.openai.timeout,
            )
        return self._transcriber

    @property
    def classifier(self) -> DecisionClassifier:
        """Lazy load the classifier."""
        if self._classifier is None:
            self._classifier = build_classifier(self.settings)
        return self._classifier

    @property
    def router(self) -> Router:
        """Lazy load the router."""
        if self._router is None:
            self._router = Router(self.store)
        return self._router

    def classify(self, text: str) -> Decision:
        """Classify text without touching the store."""
        return self.classifier.classify(text)

    def process_transcript(
        self,
        placeholder_id: str,
        audio: bytes,
        mime_hint: str = DEFAULT_MIME_TYPE,
    ) -> RoutingOutcome:
        """
        Run the pipeline for a recording whose placeholder already exists.

        Args:
            placeholder_id: Pending note created when recording stopped
            audio: Recorded audio bytes
            mime_hint: MIME type of the audio

        Returns:
            RoutingOutcome once routing committed

        Raises:
            TranscriptionError: Speech-to-text failed; placeholder untouched
            ClassificationError: No valid decision; placeholder untouched
            RoutingError: A store step failed mid-routing
        """
        log = get_contextual_logger("pipeline", placeholder_id=placeholder_id)
        start = time.monotonic()

        try:
            text = self.transcriber.transcribe(audio, mime_hint)
            log.info(f"Transcript: {text!r}")

            decision = self.classifier.classify(text)
            log.info(
                f"Classified as {decision.kind.value} "
                f"({decision.routing_action.value})"
            )

            outcome = self.router.route(placeholder_id, decision)
        except VoiceNotesError as e:
            log.error(f"Pipeline failed: {e}")
            raise

        log.info(f"Processed in {time.monotonic() - start:.2f} seconds")
        return outcome

    def capture(self, audio: bytes, mime_hint: str = DEFAULT_MIME_TYPE) -> RoutingOutcome:
        """
        Create a placeholder for a finished recording and process it.

        Raises:
            StoreError: If the placeholder cannot be created
        """
        placeholder_id = self.store.create_placeholder()
        logger.debug(f"Created placeholder {placeholder_id}")
        return self.process_transcript(placeholder_id, audio, mime_hint)

    def close(self) -> None:
        """Close any HTTP clients the pipeline owns."""
        for component in (self._transcriber, self._classifier):
            close = getattr(component, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> "VoiceNotePipeline":
        return self

    def __exit__(self, *args) -> None:
        self.close()
