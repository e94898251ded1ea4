"""
Transcript classification.

This package provides:
- LLMClassifier: OpenAI function-calling classifier
- RuleBasedClassifier: offline keyword and pattern rules
- parse_decision_response: strict validation of a tool-call response
"""

from typing import Optional

from voicenotes.classification.base import DecisionClassifier
from voicenotes.classification.llm import LLMClassifier, parse_decision_response
from voicenotes.classification.rules import RuleBasedClassifier
from voicenotes.utils.config import ClassifierBackend, Settings, get_settings


def build_classifier(settings: Optional[Settings] = None) -> DecisionClassifier:
    """Create the classifier selected by CLASSIFIER_BACKEND."""
    settings = settings or get_settings()

    if settings.classifier.backend == ClassifierBackend.RULES:
        return RuleBasedClassifier()
    return LLMClassifier(
        api_key=settings.openai.api_key,
        model=settings.openai.classification_model,
        api_url=settings.openai.api_url,
        timeout=settings.openai.timeout,
    )


__all__ = [
    "DecisionClassifier",
    "LLMClassifier",
    "RuleBasedClassifier",
    "build_classifier",
    "parse_decision_response",
]
