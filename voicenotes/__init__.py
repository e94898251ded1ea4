"""
Voice note routing pipeline.

Transcribes recorded speech, classifies each transcript as a todo or a
note, and routes it into todos, unfiled notes or folders.
"""

__version__ = "0.1.0"
__author__ = "voicenotes team"

from voicenotes.folders import FolderResolver
from voicenotes.pipeline import VoiceNotePipeline
from voicenotes.routing import Router

__all__ = [
    "FolderResolver",
    "Router",
    "VoiceNotePipeline",
]
