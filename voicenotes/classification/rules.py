"""
Rule-based transcript classifier.

Applies the same lexical rules the model is instructed with, using
regular expressions. Works offline and deterministically, so it backs
the `rules` classifier backend and serves as a stand-in for the model
in tests.
"""

import re
from typing import NamedTuple, Optional

from voicenotes.models.decision import Decision, NoteKind, RoutingAction
from voicenotes.utils.logger import get_logger
from voicenotes.utils.text import clean_content

logger = get_logger("classification")


# Explicit reminder/task phrases; the text after the earliest one is the todo
TODO_CUE_PATTERNS: list[str] = [
    r"\bdon['’]?t\s+let\s+me\s+forget(?:\s+to)?\b",
    r"\bremind\s+me\s+to\b",
    r"\bremember\s+to\b",
    r"\bi\s+(?:need|have)\s+to\b",
    r"\bwe\s+should\b",
    r"\bto[- ]?dos?\b",
    r"\btasks?\b",
]

# Verbs that make a bare imperative a todo ("buy milk", "call mom")
IMPERATIVE_VERBS = {
    "book", "bring", "buy", "call", "cancel", "check", "clean", "email",
    "feed", "finish", "fix", "get", "grab", "order", "pay", "pick",
    "read", "renew", "return", "review", "schedule", "send", "submit",
    "text", "wash", "water",
}

_FOLDER_NAME = r"(?P<name>[^\W_][\w'&\-]*(?:\s+[\w'&\-]+)*?)"
_NAME_END = r"(?:\s+folder)?(?=\s*(?:[:;,.!?]|$)|\s+(?:and|then)\b)"

CREATE_FOLDER_PATTERNS: list[str] = [
    r"\b(?:create|make|start)\s+(?:a\s+)?(?:new\s+)?folder\s+(?:called|named|for)\s+"
    + _FOLDER_NAME + _NAME_END,
    r"\bnew\s+folder\s+(?:called\s+|named\s+)?" + _FOLDER_NAME + _NAME_END,
]

CATEGORIZE_PATTERNS: list[str] = [
    r"\b(?:put|save|file)\s+(?:(?:this|it|that)\s+)?(?:in|into|under|to)\s+"
    r"(?:the\s+|my\s+)?(?:folder\s+)?" + _FOLDER_NAME + _NAME_END,
]

_LEADING_CONNECTOR = re.compile(
    r"^[\s:;,.\-]*(?:(?:and|then)\s+)?(?:(?:note|write\s+down)(?:\s+that)?\b[\s:,]*)?",
    re.IGNORECASE,
)
_TRAILING_CONNECTOR = re.compile(r"[\s:;,\-]*(?:\b(?:and|then))?[\s:;,\-]*$", re.IGNORECASE)
_LEADING_TO = re.compile(r"^[\s:;,\-]*(?:to\s+)?", re.IGNORECASE)
_POLITE_PREFIX = re.compile(r"^(?:please|hey|okay|ok|so)\b[\s,]*", re.IGNORECASE)


class FolderDirective(NamedTuple):
    """A folder instruction found in a transcript."""

    action: RoutingAction
    name: str
    start: int
    end: int


class RuleBasedClassifier:
    """
    Classifies transcripts with keyword and pattern rules.

    Rule order:
    1. An explicit todo cue makes a todo; any folder instruction is dropped.
    2. A folder instruction makes a note routed to that folder. The
       instruction already addresses the assistant, so it does not count
       as a bare imperative.
    3. Otherwise a leading imperative verb makes a todo.
    4. Everything else is an unfiled note.
    """

    def __init__(self) -> None:
        self._todo_cues = [re.compile(p, re.IGNORECASE) for p in TODO_CUE_PATTERNS]
        self._create_patterns = [
            re.compile(p, re.IGNORECASE) for p in CREATE_FOLDER_PATTERNS
        ]
        self._categorize_patterns = [
            re.compile(p, re.IGNORECASE) for p in CATEGORIZE_PATTERNS
        ]

    def classify(self, text: str) -> Decision:
        """
        Classify transcript text into a Decision.

        Args:
            text: Transcript text

        Returns:
            Decision following the rule order above
        """
        cleaned = clean_content(text)
        if not cleaned:
            return Decision.empty()

        cue = self._find_todo_cue(cleaned)
        if cue is not None:
            content = self._todo_content(cleaned, cue)
            logger.debug("Todo cue %r in %r", cue.group(0), cleaned)
            return Decision(kind=NoteKind.TODO, content=content)

        directive = self.find_folder_directive(cleaned)
        if directive is not None:
            residual = cleaned[: directive.start] + " " + cleaned[directive.end :]
            content = self._strip_connectors(residual) or cleaned
            return Decision(
                kind=NoteKind.NOTE,
                routing_action=directive.action,
                folder_name=directive.name,
                content=content,
            )

        if self._is_imperative(cleaned):
            return Decision(kind=NoteKind.TODO, content=cleaned)

        return Decision(kind=NoteKind.NOTE, content=cleaned)

    def find_folder_directive(self, text: str) -> Optional[FolderDirective]:
        """Find the first folder instruction, preferring explicit creation."""
        for action, patterns in (
            (RoutingAction.CREATE_FOLDER, self._create_patterns),
            (RoutingAction.CATEGORIZE_NOTE, self._categorize_patterns),
        ):
            for pattern in patterns:
                match = pattern.search(text)
                if match:
                    return FolderDirective(
                        action=action,
                        name=match.group("name"),
                        start=match.start(),
                        end=match.end(),
                    )
        return None

    def _find_todo_cue(self, text: str) -> Optional[re.Match]:
        matches = [m for m in (p.search(text) for p in self._todo_cues) if m]
        if not matches:
            return None
        return min(matches, key=lambda m: m.start())

    def _todo_content(self, text: str, cue: re.Match) -> str:
        after = _LEADING_TO.sub("", text[cue.end() :]).strip()
        if after:
            return after
        # Cue at the end ("buy milk, remind me to"): keep what came before
        before = _TRAILING_CONNECTOR.sub("", text[: cue.start()]).strip()
        return before or text

    def _strip_connectors(self, text: str) -> str:
        text = _LEADING_CONNECTOR.sub("", text.strip())
        text = _TRAILING_CONNECTOR.sub("", text)
        return clean_content(text)

    def _is_imperative(self, text: str) -> bool:
        words = _POLITE_PREFIX.sub("", text).split(maxsplit=1)
        return bool(words) and words[0].lower().strip(",.!?") in IMPERATIVE_VERBS
