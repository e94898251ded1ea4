"""
Custom exception classes for the voice note routing pipeline.

Provides a hierarchy of exceptions for different error categories:
- Upstream API errors (transcription, classification)
- Collection store errors
- Routing errors
- Configuration errors
"""

from typing import Any, Optional


class VoiceNotesError(Exception):
    """
    Base exception for all voicenotes errors.

    All custom exceptions in this project inherit from this class,
    so callers can report any pipeline failure with one handler.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional error details as key-value pairs
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base = f"{base} ({details_str})"
        if self.cause:
            base = f"{base} [caused by: {self.cause}]"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class UpstreamAPIError(VoiceNotesError):
    """
    Exception for failures of an external HTTP capability.

    Carries the upstream status and body so the original message
    survives for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        endpoint: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize upstream API error.

        Args:
            message: Error message
            status_code: HTTP status code from the API
            response_body: Raw response body
            endpoint: API endpoint that was called
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        if response_body is not None:
            details["response_body"] = response_body[:500]  # Truncate long responses
        if endpoint is not None:
            details["endpoint"] = endpoint

        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code
        self.response_body = response_body
        self.endpoint = endpoint

    @property
    def is_auth_error(self) -> bool:
        """Check if this is an authentication error."""
        return self.status_code in (401, 403)

    @property
    def is_rate_limited(self) -> bool:
        """Check if we hit rate limits."""
        return self.status_code == 429

    @property
    def is_server_error(self) -> bool:
        """Check if this is a server-side error."""
        return self.status_code is not None and self.status_code >= 500


class TranscriptionError(UpstreamAPIError):
    """
    Raised when speech-to-text fails.

    Covers unreachable services, non-success statuses and missing
    credentials. Fatal for the current recording.
    """


class ClassificationError(UpstreamAPIError):
    """
    Raised when a transcript cannot be turned into a Decision.

    Covers call failures, timeouts and responses lacking exactly one
    well-formed structured result. No partial decision is ever accepted.
    """


class StoreError(VoiceNotesError):
    """
    Exception for collection store errors.

    Raised by folder, todo and note operations of any store backend.
    """

    def __init__(
        self,
        message: str,
        *,
        collection: Optional[str] = None,
        record_id: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize store error.

        Args:
            message: Error message
            collection: Collection being accessed (notes, todos, folders)
            record_id: Record the operation targeted
            status_code: HTTP status code for remote stores
            error_code: Backend-specific error code (e.g., 'object_not_found')
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", {})
        if collection is not None:
            details["collection"] = collection
        if record_id is not None:
            details["record_id"] = record_id
        if status_code is not None:
            details["status_code"] = status_code
        if error_code is not None:
            details["error_code"] = error_code

        super().__init__(message, details=details, **kwargs)
        self.collection = collection
        self.record_id = record_id
        self.status_code = status_code
        self.error_code = error_code

    @property
    def is_not_found(self) -> bool:
        """Check if the target record does not exist."""
        return self.status_code == 404 or self.error_code == "object_not_found"


class RateLimitError(StoreError):
    """
    Exception for rate limit errors.

    Raised when a remote store rejects a request before performing it.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        service: str = "unknown",
        retry_after: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize rate limit error.

        Args:
            message: Error message
            service: Service that rate limited us (e.g. notion)
            retry_after: Suggested wait time in seconds before retry
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", {})
        details["service"] = service
        if retry_after is not None:
            details["retry_after"] = retry_after

        kwargs.setdefault("status_code", 429)
        super().__init__(message, details=details, **kwargs)
        self.service = service
        self.retry_after = retry_after


class RoutingError(VoiceNotesError):
    """
    Exception for failures while committing a Decision.

    Wraps the StoreError hit mid-routing. The placeholder is left in
    the last state that was successfully reached.
    """

    def __init__(
        self,
        message: str,
        *,
        placeholder_id: Optional[str] = None,
        stage: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize routing error.

        Args:
            message: Error message
            placeholder_id: Placeholder being routed
            stage: Routing step that failed
                   (e.g., 'create_todo', 'delete_placeholder', 'resolve_folder', 'finalize')
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", {})
        if placeholder_id is not None:
            details["placeholder_id"] = placeholder_id
        if stage is not None:
            details["stage"] = stage

        super().__init__(message, details=details, **kwargs)
        self.placeholder_id = placeholder_id
        self.stage = stage


class ConfigurationError(VoiceNotesError):
    """
    Exception for configuration errors.

    Raised when required configuration is missing or invalid.
    """

    def __init__(
        self,
        message: str,
        *,
        missing_keys: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            missing_keys: List of required configuration keys that are missing
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys

        super().__init__(message, details=details, **kwargs)
        self.missing_keys = missing_keys or []
