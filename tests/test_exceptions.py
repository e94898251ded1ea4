"""
Tests for the exception hierarchy.
"""

from voicenotes.utils.exceptions import (
    ClassificationError,
    ConfigurationError,
    RateLimitError,
    RoutingError,
    StoreError,
    TranscriptionError,
    UpstreamAPIError,
    VoiceNotesError,
)


class TestExceptions:
    """Test suite for custom exceptions."""

    def test_hierarchy(self) -> None:
        """Test that every error can be caught as VoiceNotesError."""
        assert issubclass(TranscriptionError, UpstreamAPIError)
        assert issubclass(ClassificationError, UpstreamAPIError)
        assert issubclass(RateLimitError, StoreError)
        for cls in (UpstreamAPIError, StoreError, RoutingError, ConfigurationError):
            assert issubclass(cls, VoiceNotesError)

    def test_upstream_error_details(self) -> None:
        """Test that upstream status and body are kept."""
        error = TranscriptionError(
            "OpenAI API error: 401",
            status_code=401,
            response_body="x" * 1000,
            endpoint="/audio/transcriptions",
        )

        assert error.is_auth_error
        assert not error.is_server_error
        assert error.response_body == "x" * 1000
        assert len(error.details["response_body"]) == 500
        assert error.details["endpoint"] == "/audio/transcriptions"

    def test_str_includes_details_and_cause(self) -> None:
        """Test string representation."""
        cause = ValueError("boom")
        error = StoreError("Write failed", collection="notes", cause=cause)

        text = str(error)
        assert "Write failed" in text
        assert "collection=notes" in text
        assert "caused by: boom" in text

    def test_store_error_not_found(self) -> None:
        """Test not-found detection by status and by Notion code."""
        assert StoreError("x", status_code=404).is_not_found
        assert StoreError("x", error_code="object_not_found").is_not_found
        assert not StoreError("x", error_code="conflict").is_not_found

    def test_rate_limit_defaults(self) -> None:
        """Test rate limit errors default to HTTP 429."""
        error = RateLimitError(service="notion", retry_after=30)

        assert error.status_code == 429
        assert error.service == "notion"
        assert error.details["retry_after"] == 30

    def test_routing_error_to_dict(self) -> None:
        """Test serialization of routing errors."""
        cause = StoreError("Todo write failed", collection="todos")
        error = RoutingError(
            "Failed to create todo",
            placeholder_id="n_1",
            stage="create_todo",
            cause=cause,
        )

        data = error.to_dict()

        assert data["error_type"] == "RoutingError"
        assert data["details"] == {"placeholder_id": "n_1", "stage": "create_todo"}
        assert "Todo write failed" in data["cause"]

    def test_configuration_error_missing_keys(self) -> None:
        """Test missing keys are recorded."""
        error = ConfigurationError("Missing config", missing_keys=["OPENAI_API_KEY"])
        assert error.missing_keys == ["OPENAI_API_KEY"]
        assert error.details["missing_keys"] == ["OPENAI_API_KEY"]
