"""
Classification engine interface.
"""

from typing import Protocol

from voicenotes.models.decision import Decision


class DecisionClassifier(Protocol):
    """Anything that turns transcript text into a Decision."""

    def classify(self, text: str) -> Decision:
        """Classify text; empty text yields Decision.empty()."""
