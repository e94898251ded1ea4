"""
Configuration management for the voice note routing pipeline.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(str, Enum):
    """Where notes, todos and folders are persisted."""

    JSON = "json"
    NOTION = "notion"
    MEMORY = "memory"


class ClassifierBackend(str, Enum):
    """Which decision capability classifies transcripts."""

    OPENAI = "openai"
    RULES = "rules"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OpenAISettings(BaseSettings):
    """OpenAI API configuration for transcription and classification."""

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    api_key: str = Field(default="", description="OpenAI API key")
    api_url: str = Field(
        default="https://api.openai.com/v1", description="OpenAI API base URL"
    )
    transcription_model: str = Field(
        default="gpt-4o-transcribe", description="Speech-to-text model"
    )
    classification_model: str = Field(
        default="gpt-4.1-nano-2025-04-14",
        description="Model used for the structured decision",
    )
    timeout: float = Field(
        default=60.0, gt=0.0, description="Request timeout in seconds"
    )


class NotionSettings(BaseSettings):
    """Notion store configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTION_")

    api_key: str = Field(default="", description="Notion integration token")
    notes_database_id: str = Field(default="", description="Notes database ID")
    todos_database_id: str = Field(default="", description="Todos database ID")
    folders_database_id: str = Field(default="", description="Folders database ID")


class StoreSettings(BaseSettings):
    """Collection store configuration."""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    backend: StoreBackend = Field(
        default=StoreBackend.JSON, description="Store backend"
    )
    data_dir: Path = Field(
        default=Path("./data"), description="Directory for the JSON store"
    )

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        """Accept backend names in any case."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("data_dir", mode="before")
    @classmethod
    def ensure_path(cls, v: str | Path) -> Path:
        """Ensure data directory is a Path object."""
        return Path(v) if isinstance(v, str) else v


class ClassifierSettings(BaseSettings):
    """Classification engine configuration."""

    model_config = SettingsConfigDict(env_prefix="CLASSIFIER_")

    backend: ClassifierBackend = Field(
        default=ClassifierBackend.OPENAI, description="Classifier backend"
    )

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        """Accept backend names in any case."""
        return v.lower() if isinstance(v, str) else v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    dir: Optional[Path] = Field(
        default=None, description="Log directory; file logging is off when unset"
    )
    json_format: bool = Field(default=False, description="Use JSON log format")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept level names in any case."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("dir", mode="before")
    @classmethod
    def ensure_path(cls, v: str | Path | None) -> Optional[Path]:
        """Ensure log directory is a Path object."""
        if v in (None, ""):
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides a unified interface.
    Configuration is loaded from environment variables and .env files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Component settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    notion: NotionSettings = Field(default_factory=NotionSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Direct access fields (loaded from env)
    openai_api_key: str = Field(default="")
    openai_api_url: str = Field(default="https://api.openai.com/v1")
    openai_transcription_model: str = Field(default="gpt-4o-transcribe")
    openai_classification_model: str = Field(default="gpt-4.1-nano-2025-04-14")
    openai_timeout: float = Field(default=60.0)
    notion_api_key: str = Field(default="")
    notion_notes_database_id: str = Field(default="")
    notion_todos_database_id: str = Field(default="")
    notion_folders_database_id: str = Field(default="")
    store_backend: str = Field(default="json")
    store_data_dir: str = Field(default="./data")
    classifier_backend: str = Field(default="openai")
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="")
    log_json_format: bool = Field(default=False)

    def model_post_init(self, __context) -> None:
        """Sync nested settings with flat environment variables."""
        self.openai = OpenAISettings(
            api_key=self.openai_api_key or self.openai.api_key,
            api_url=self.openai_api_url or self.openai.api_url,
            transcription_model=(
                self.openai_transcription_model or self.openai.transcription_model
            ),
            classification_model=(
                self.openai_classification_model or self.openai.classification_model
            ),
            timeout=self.openai_timeout,
        )

        self.notion = NotionSettings(
            api_key=self.notion_api_key or self.notion.api_key,
            notes_database_id=(
                self.notion_notes_database_id or self.notion.notes_database_id
            ),
            todos_database_id=(
                self.notion_todos_database_id or self.notion.todos_database_id
            ),
            folders_database_id=(
                self.notion_folders_database_id or self.notion.folders_database_id
            ),
        )

        self.store = StoreSettings(
            backend=StoreBackend(self.store_backend.lower()),
            data_dir=Path(self.store_data_dir),
        )

        self.classifier = ClassifierSettings(
            backend=ClassifierBackend(self.classifier_backend.lower()),
        )

        self.logging = LoggingSettings(
            level=LogLevel(self.log_level.upper()),
            dir=self.log_dir or None,
            json_format=self.log_json_format,
        )

    def validate_required(self) -> list[str]:
        """
        Validate that required configuration is present.

        Only the backends actually selected are checked.

        Returns:
            List of missing required configuration keys.
        """
        missing = []

        # Transcription always goes through OpenAI
        if not self.openai.api_key:
            missing.append("OPENAI_API_KEY")

        if self.store.backend == StoreBackend.NOTION:
            if not self.notion.api_key:
                missing.append("NOTION_API_KEY")
            if not self.notion.notes_database_id:
                missing.append("NOTION_NOTES_DATABASE_ID")
            if not self.notion.todos_database_id:
                missing.append("NOTION_TODOS_DATABASE_ID")
            if not self.notion.folders_database_id:
                missing.append("NOTION_FOLDERS_DATABASE_ID")

        return missing


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Singleton Settings instance loaded from environment.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings instance.
    """
    get_settings.cache_clear()
    return get_settings()
