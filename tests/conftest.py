"""
Pytest configuration and shared fixtures for the test suite.
"""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from voicenotes.classification.rules import RuleBasedClassifier
from voicenotes.models.decision import Decision, NoteKind, RoutingAction
from voicenotes.pipeline import VoiceNotePipeline
from voicenotes.store.memory import InMemoryStore
from voicenotes.utils.config import get_settings


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Any:
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables."""
    env_vars = {
        "OPENAI_API_KEY": "sk-test-openai-key",
        "OPENAI_API_URL": "https://api.openai.test/v1",
        "NOTION_API_KEY": "secret_test_notion_key",
        "NOTION_NOTES_DATABASE_ID": "notes_db",
        "NOTION_TODOS_DATABASE_ID": "todos_db",
        "NOTION_FOLDERS_DATABASE_ID": "folders_db",
        "STORE_BACKEND": "memory",
        "CLASSIFIER_BACKEND": "rules",
        "LOG_LEVEL": "WARNING",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Create an empty in-memory collection store."""
    return InMemoryStore()


@pytest.fixture
def placeholder_id(memory_store: InMemoryStore) -> str:
    """Create a pending placeholder in the memory store."""
    return memory_store.create_placeholder()


# =============================================================================
# Decision Fixtures
# =============================================================================


@pytest.fixture
def todo_decision() -> Decision:
    """Decision for "remind me to buy milk"."""
    return Decision(kind=NoteKind.TODO, content="buy milk")


@pytest.fixture
def plain_note_decision() -> Decision:
    """Decision for an unfiled note."""
    return Decision(kind=NoteKind.NOTE, content="the sky is blue today")


@pytest.fixture
def create_folder_decision() -> Decision:
    """Decision that creates a Groceries folder."""
    return Decision(
        kind=NoteKind.NOTE,
        routing_action=RoutingAction.CREATE_FOLDER,
        folder_name="Groceries",
        content="I need eggs",
    )


@pytest.fixture
def categorize_decision() -> Decision:
    """Decision that files a note under an existing Groceries folder."""
    return Decision(
        kind=NoteKind.NOTE,
        routing_action=RoutingAction.CATEGORIZE_NOTE,
        folder_name="Groceries",
        content="buy spinach",
    )


# =============================================================================
# Pipeline Fixtures
# =============================================================================


@pytest.fixture
def mock_transcriber() -> MagicMock:
    """Create a transcriber stub; set transcribe.return_value per test."""
    transcriber = MagicMock()
    transcriber.transcribe.return_value = ""
    return transcriber


@pytest.fixture
def pipeline(
    memory_store: InMemoryStore, mock_transcriber: MagicMock
) -> VoiceNotePipeline:
    """Pipeline over the memory store with the rule-based classifier."""
    return VoiceNotePipeline(
        store=memory_store,
        transcriber=mock_transcriber,
        classifier=RuleBasedClassifier(),
    )


# =============================================================================
# Helper Functions
# =============================================================================


def chat_response(*tool_arguments: Any, name: str = "decide") -> dict[str, Any]:
    """Build a chat completion carrying one tool call per argument payload."""
    tool_calls = [
        {
            "id": f"call_{i}",
            "type": "function",
            "function": {
                "name": name,
                "arguments": args if isinstance(args, str) else json.dumps(args),
            },
        }
        for i, args in enumerate(tool_arguments)
    ]
    message: dict[str, Optional[Any]] = {"role": "assistant", "content": None}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": message, "finish_reason": "tool_calls"}],
    }


def http_response(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
    """Build a mocked httpx response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = text or json.dumps(payload)
    return response


@pytest.fixture
def make_chat_response() -> Any:
    """Factory fixture for chat completion payloads."""
    return chat_response


@pytest.fixture
def make_http_response() -> Any:
    """Factory fixture for mocked httpx responses."""
    return http_response
