"""
Thin OpenAI HTTP client shared by transcription and classification.

Provides:
- Bearer authentication and base URL handling
- Mapping of timeouts, network errors and error statuses to the
  caller's exception type, with the upstream body preserved
"""

from typing import Any, Optional

import httpx

from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import UpstreamAPIError
from voicenotes.utils.logger import get_logger

logger = get_logger("openai")


class OpenAIClient:
    """
    Client for the OpenAI REST API.

    Each component owns one client and passes its own error class, so a
    transcription failure surfaces as TranscriptionError and a
    classification failure as ClassificationError. Requests are never
    retried here.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        error_cls: type[UpstreamAPIError] = UpstreamAPIError,
    ) -> None:
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key. Defaults to config value.
            api_url: OpenAI API base URL. Defaults to config value.
            timeout: Request timeout in seconds. Defaults to config value.
            error_cls: Exception type raised for every failure.
        """
        settings = get_settings()
        self.api_key = api_key or settings.openai.api_key
        self.api_url = (api_url or settings.openai.api_url).rstrip("/")
        self.timeout = timeout or settings.openai.timeout
        self.error_cls = error_cls

        if not self.api_key:
            logger.warning("OpenAI API key not configured")

        self._client = httpx.Client(
            base_url=self.api_url,
            headers=self._build_headers(),
            timeout=self.timeout,
        )

    def _build_headers(self) -> dict[str, str]:
        """Build request headers with authentication."""
        # Content-Type is left to httpx so multipart uploads get their boundary
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "OpenAIClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        """
        Make an HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Decoded JSON object

        Raises:
            UpstreamAPIError: The configured subclass, on any failure
        """
        if not self.api_key:
            raise self.error_cls(
                "OpenAI API key not configured",
                status_code=401,
                endpoint=endpoint,
            )

        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        logger.debug(f"Making {method} request to {url}")

        try:
            response = self._client.request(method, endpoint, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {url}")
            raise self.error_cls(
                "Request timed out",
                endpoint=endpoint,
                cause=e,
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error: {url} - {e}")
            raise self.error_cls(
                "Network error occurred",
                endpoint=endpoint,
                cause=e,
            )

        if response.status_code >= 400:
            error_body = response.text
            logger.error(f"API error {response.status_code}: {error_body[:200]}")
            raise self.error_cls(
                f"OpenAI API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
                endpoint=endpoint,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise self.error_cls(
                "OpenAI API returned a non-JSON body",
                status_code=response.status_code,
                response_body=response.text,
                endpoint=endpoint,
                cause=e,
            )
        if not isinstance(data, dict):
            raise self.error_cls(
                "OpenAI API returned an unexpected body",
                status_code=response.status_code,
                response_body=str(data),
                endpoint=endpoint,
            )
        return data
