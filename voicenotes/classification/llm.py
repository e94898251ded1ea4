"""
Model-backed transcript classifier.

Sends the transcript to a chat model with a single forced function
(tool) whose parameters are the Decision schema, then validates the
one structured result that comes back.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from voicenotes.classification.prompts import (
    CLASSIFICATION_PROMPT,
    DECISION_PARAMETERS,
    DECISION_TOOL,
    DECISION_TOOL_NAME,
)
from voicenotes.models.decision import Decision
from voicenotes.openai_client import OpenAIClient
from voicenotes.utils.config import get_settings
from voicenotes.utils.exceptions import ClassificationError
from voicenotes.utils.logger import get_logger
from voicenotes.utils.text import clean_content

logger = get_logger("classification")

CHAT_ENDPOINT = "/chat/completions"


class LLMClassifier:
    """
    Classifies transcripts with OpenAI function calling.

    The model is called with temperature 0 and a forced tool choice so
    identical input yields the same decision as often as the service
    allows.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the classifier.

        Args:
            api_key: OpenAI API key. Defaults to config value.
            model: Chat model. Defaults to config value.
            api_url: OpenAI API base URL. Defaults to config value.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self.model = model or settings.openai.classification_model
        self._client = OpenAIClient(
            api_key=api_key,
            api_url=api_url,
            timeout=timeout,
            error_cls=ClassificationError,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def build_request(self, text: str) -> dict[str, Any]:
        """Build the chat completion request body."""
        return {
            "model": self.model,
            "temperature": 0,
            "tools": [DECISION_TOOL],
            "tool_choice": {
                "type": "function",
                "function": {"name": DECISION_TOOL_NAME},
            },
            "messages": [
                {"role": "system", "content": CLASSIFICATION_PROMPT},
                {"role": "user", "content": text},
            ],
        }

    def classify(self, text: str) -> Decision:
        """
        Classify transcript text into a Decision.

        Args:
            text: Transcript text

        Returns:
            Validated Decision

        Raises:
            ClassificationError: If the call fails or the response does not
                carry exactly one well-formed decision
        """
        if not text or not text.strip():
            logger.info("Empty transcript, filing as blank note")
            return Decision.empty()

        data = self._client.request("POST", CHAT_ENDPOINT, json=self.build_request(text))
        decision = parse_decision_response(data)
        logger.info(
            f"Decision: kind={decision.kind.value} "
            f"action={decision.routing_action.value} folder={decision.folder_name!r}"
        )
        return decision


def parse_decision_response(data: dict[str, Any]) -> Decision:
    """
    Extract and validate the single decision in a chat completion.

    Args:
        data: Decoded chat completion response

    Returns:
        Validated Decision with cleaned content

    Raises:
        ClassificationError: On zero or several tool calls, a call to an
            unknown function, undecodable arguments or a schema violation
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ClassificationError(
            "Response has no choices",
            response_body=json.dumps(data, default=str),
            endpoint=CHAT_ENDPOINT,
        )

    tool_calls: list[Any] = []
    for choice in choices:
        message = (choice or {}).get("message") or {}
        tool_calls.extend(message.get("tool_calls") or [])

    if not tool_calls:
        raise ClassificationError(
            "No valid function call in response",
            response_body=json.dumps(data, default=str),
            endpoint=CHAT_ENDPOINT,
        )
    if len(tool_calls) > 1:
        raise ClassificationError(
            f"Expected exactly one function call, got {len(tool_calls)}",
            response_body=json.dumps(data, default=str),
            endpoint=CHAT_ENDPOINT,
        )

    function = (tool_calls[0] or {}).get("function") or {}
    if function.get("name") != DECISION_TOOL_NAME:
        raise ClassificationError(
            f"Unexpected function call: {function.get('name')!r}",
            endpoint=CHAT_ENDPOINT,
        )

    raw_arguments = function.get("arguments")
    try:
        arguments = (
            json.loads(raw_arguments) if isinstance(raw_arguments, str) else raw_arguments
        )
    except json.JSONDecodeError as e:
        raise ClassificationError(
            "Function arguments are not valid JSON",
            response_body=str(raw_arguments),
            endpoint=CHAT_ENDPOINT,
            cause=e,
        )
    if not isinstance(arguments, dict):
        raise ClassificationError(
            "Function arguments are not an object",
            response_body=str(raw_arguments),
            endpoint=CHAT_ENDPOINT,
        )

    # The model applies defaults for in-process construction; the wire payload may not rely on them
    missing = [key for key in DECISION_PARAMETERS["required"] if key not in arguments]
    if missing:
        raise ClassificationError(
            f"Decision is missing required fields: {', '.join(missing)}",
            response_body=str(raw_arguments),
            endpoint=CHAT_ENDPOINT,
            details={"missing": missing},
        )

    try:
        decision = Decision.model_validate(arguments)
    except ValidationError as e:
        raise ClassificationError(
            "Decision does not match the schema",
            response_body=str(raw_arguments),
            endpoint=CHAT_ENDPOINT,
            details={"errors": e.error_count()},
            cause=e,
        )

    content = clean_content(decision.content)
    if not content:
        raise ClassificationError(
            "Decision content is empty",
            response_body=str(raw_arguments),
            endpoint=CHAT_ENDPOINT,
        )
    return decision.model_copy(update={"content": content})
