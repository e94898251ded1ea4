"""
Fixed instruction set and output schema for transcript classification.
"""

DECISION_TOOL_NAME = "decide"

CLASSIFICATION_PROMPT = """
You are a smart voice-note assistant that classifies the user's spoken text and extracts structured information.

Determine two things from the user's sentence:
1. kind: "todo" when the user is asking to remember or do something, otherwise "note".
2. routingAction: how (if at all) the note should be organised.

Rules for kind:
- Treat requests that contain phrases such as "todo", "to-do", "to do", "task", "remind me to", "remember to", "don't let me forget", "I need to", "I have to", "we should", or any imperative verb directed at the assistant as a "todo".
- Everything else is a regular "note".

Rules for routingAction:
- If the user explicitly asks for a new folder (e.g. "create a folder called ___", "new folder ___") -> routingAction "create_folder" with that folder name in folderName.
- If the user references an existing folder (e.g. "put this in ___", "save under ___") -> routingAction "categorize_note" with that folder name in folderName.
- Otherwise -> routingAction "none".

Always call the function with arguments that match its schema exactly and NEVER add extra keys.
Important: "content" must be a cleaned-up, user-friendly version of the note with no filler words ("uh", "um"), without the folder instruction or the reminder phrase, and with no leading or trailing whitespace.
""".strip()

DECISION_PARAMETERS = {
    "type": "object",
    "properties": {
        "kind": {
            "type": "string",
            "enum": ["note", "todo"],
            "description": "Whether this is a regular note or a todo item",
        },
        "routingAction": {
            "type": "string",
            "enum": ["create_folder", "categorize_note", "none"],
            "description": "How the note should be organised",
        },
        "folderName": {
            "type": "string",
            "description": "The folder name if routingAction is create_folder or categorize_note",
        },
        "content": {
            "type": "string",
            "description": "The cleaned up content of the note",
        },
    },
    "required": ["kind", "routingAction", "content"],
    "additionalProperties": False,
}

DECISION_TOOL = {
    "type": "function",
    "function": {
        "name": DECISION_TOOL_NAME,
        "description": "Categorize the transcribed text and extract relevant information",
        "parameters": DECISION_PARAMETERS,
    },
}
