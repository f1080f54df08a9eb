"""Intent parser module for converting player input to structured intents.

This module turns one line of free-form player input into a structured
Intent (verb, arguments, quantity, movement, confidence), or a
clarification question when the input is ambiguous.

Main Components:
    - Intent: Dataclass representing one parsed input
    - ParseContext: Inventory, nearby entities and directions for a parse
    - CommandRegistry: Command definitions and exact/prefix/fuzzy matching
    - IntentParser: Main parser facade
    - PendingIntentResolver: Validates answers to clarifications
"""

from trailparse.parser.exceptions import (
    CommandDefinitionError,
    ContextFileError,
    TrailparseError,
)
from trailparse.parser.intent_types import (
    ClarifyQuestion,
    CommandDef,
    Intent,
    IntentKind,
    MissingField,
    MovementCondition,
    MovementScale,
    ParseContext,
    PendingIntent,
    Quantity,
    Verb,
    intent_to_command_string,
)
from trailparse.parser.normalize import normalize, tokenize
from trailparse.parser.movement import extract_movement, parse_movement_text
from trailparse.parser.registry import CommandRegistry
from trailparse.parser.intent_parser import IntentParser
from trailparse.parser.pending import (
    PendingIntentResolver,
    PendingOutcome,
    PendingState,
    pending_from_intent,
)

__all__ = [
    # Core types
    "ClarifyQuestion",
    "CommandDef",
    "Intent",
    "IntentKind",
    "MissingField",
    "MovementCondition",
    "MovementScale",
    "ParseContext",
    "PendingIntent",
    "Quantity",
    "Verb",
    # Parser classes
    "CommandRegistry",
    "IntentParser",
    "PendingIntentResolver",
    "PendingOutcome",
    "PendingState",
    # Functions
    "extract_movement",
    "intent_to_command_string",
    "normalize",
    "parse_movement_text",
    "pending_from_intent",
    "tokenize",
    # Errors
    "CommandDefinitionError",
    "ContextFileError",
    "TrailparseError",
]
