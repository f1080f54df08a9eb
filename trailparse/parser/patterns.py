"""Free-text heuristics for input the command registry cannot match.

These rules map common phrasings ("check my bag", "i need a fire",
"where am i") straight to intents. They only run when command matching
fails outright, and are tried in table order.
"""

import logging

from trailparse.parser.argument_resolver import resolve_entity
from trailparse.parser.clarification import did_you_mean_question, option_intent
from trailparse.parser.intent_types import (
    Intent,
    IntentKind,
    MovementScale,
    ParseContext,
    Verb,
)
from trailparse.parser.movement import DEFAULT_TILE_METERS, extract_movement
from trailparse.parser.normalize import (
    ARTICLES,
    contains_any_phrase,
    contains_phrase,
    map_direction,
    tokenize,
)

logger = logging.getLogger(__name__)


# Phrase rules, most specific first
# Format: (phrases, kind, verb, args, confidence)
PHRASE_PATTERNS: list[tuple[tuple[str, ...], IntentKind, Verb, tuple[str, ...], float]] = [
    (
        (
            "check my bag",
            "check bag",
            "what do i have",
            "what i have",
            "what have i got",
            "my inventory",
            "open bag",
        ),
        IntentKind.QUERY,
        Verb.INVENTORY,
        (),
        0.92,
    ),
    (
        (
            "i need a fire",
            "i need fire",
            "make a fire",
            "build fire",
            "build a fire",
            "starting fire",
            "start fire",
            "start a fire",
            "im freezing",
            "i m freezing",
        ),
        IntentKind.COMMAND,
        Verb.FIRE,
        ("build",),
        0.84,
    ),
    (
        ("smoke meat", "preserve meat", "cure meat", "dry meat", "keep meat from spoiling"),
        IntentKind.COMMAND,
        Verb.PRESERVE,
        (),
        0.8,
    ),
    (
        ("where am i", "look around", "look about", "where i am"),
        IntentKind.QUERY,
        Verb.LOOK,
        (),
        0.88,
    ),
]

# Whole-input matches
EXACT_PATTERNS: dict[str, tuple[IntentKind, Verb, float]] = {
    "inventory": (IntentKind.QUERY, Verb.INVENTORY, 0.98),
    "inv": (IntentKind.QUERY, Verb.INVENTORY, 0.98),
}

# Bare verbs that count anywhere in the sentence as whole words
# Format: (words, verb, confidence)
WORD_PATTERNS: list[tuple[tuple[str, ...], Verb, float]] = [
    (("eat",), Verb.EAT, 0.78),
    (("drink",), Verb.DRINK, 0.78),
    (("sleep", "rest"), Verb.SLEEP, 0.8),
]

TRAVEL_WORDS = frozenset({"go", "walk", "head", "travel", "move"})
DIRECTION_CONFIDENCE = 0.86

PICKUP_PHRASES = ("pick up", "pickup")
LITERAL_TAKE_CONFIDENCE = 0.62


def infer_direction_from_text(normalized: str) -> str:
    """Find a direction the text asks to travel in ("walk north", "go n").

    A direction counts when it follows a travel word, or is the whole input.
    """
    tokens = tokenize(normalized)
    for i, token in enumerate(tokens):
        mapped = map_direction(token)
        if not mapped:
            continue
        if i > 0 and tokens[i - 1] in TRAVEL_WORDS:
            return mapped
        if i == 0 and len(tokens) == 1:
            return mapped
    return ""


def _pickup_remainder(normalized: str) -> str:
    """Text after the pick-up phrase, without leading articles."""
    tokens = tokenize(normalized)
    for i, token in enumerate(tokens):
        if token == "pickup" or token == "grab":
            rest = tokens[i + 1 :]
            break
        if token == "pick" and i + 1 < len(tokens) and tokens[i + 1] == "up":
            rest = tokens[i + 2 :]
            break
    else:
        return ""
    while rest and rest[0] in ARTICLES:
        rest = rest[1:]
    return " ".join(rest)


class FreeTextInferencer:
    """Maps common free-text phrasings directly to intents.

    Example:
        inferencer = FreeTextInferencer()
        intent = inferencer.infer(ParseContext(), "i need to check my bag",
                                  "i need to check my bag")
        # -> Intent(kind=QUERY, verb="inventory", confidence=0.92)
    """

    def __init__(self, tile_meters: float = DEFAULT_TILE_METERS) -> None:
        self.tile_meters = tile_meters

    def infer(self, context: ParseContext, raw: str, normalized: str) -> Intent | None:
        """Try each heuristic in order.

        Args:
            context: Host-supplied snapshot (used for pick-up targets).
            raw: Raw input.
            normalized: Normalized input.

        Returns:
            An Intent (possibly carrying a clarification), or None if no
            heuristic applies.
        """

        def make(
            kind: IntentKind,
            verb: Verb,
            args: tuple[str, ...] = (),
            confidence: float = 0.0,
            movement: MovementScale | None = None,
        ) -> Intent:
            logger.debug(f"Free-text inference {normalized!r} -> {verb.value}")
            return Intent(
                raw=raw,
                normalized=normalized,
                kind=kind,
                verb=verb.value,
                args=args,
                movement=movement,
                confidence=confidence,
            )

        n = normalized
        if n in EXACT_PATTERNS:
            kind, verb, confidence = EXACT_PATTERNS[n]
            return make(kind, verb, (), confidence)

        for phrases, kind, verb, args, confidence in PHRASE_PATTERNS:
            if contains_any_phrase(n, *phrases):
                return make(kind, verb, args, confidence)

        if direction := infer_direction_from_text(n):
            scan = extract_movement(tokenize(n), self.tile_meters)
            return make(
                IntentKind.COMMAND,
                Verb.GO,
                (direction,),
                DIRECTION_CONFIDENCE,
                movement=scan.movement,
            )

        for words, verb, confidence in WORD_PATTERNS:
            if any(contains_phrase(n, word) for word in words):
                return make(IntentKind.COMMAND, verb, (), confidence)

        if contains_any_phrase(n, *PICKUP_PHRASES) or n.startswith("grab "):
            if entity := _pickup_remainder(n):
                return self._infer_take(context, raw, normalized, entity)

        return None

    def _infer_take(
        self, context: ParseContext, raw: str, normalized: str, entity: str
    ) -> Intent:
        """Resolve the target of a free-text pick-up."""
        verb = Verb.TAKE.value
        match = resolve_entity(entity, context, verb)
        if match.tie:
            options = [
                option_intent(verb, [value], match.score - idx * 0.01)
                for idx, value in enumerate(match.values[:2])
            ]
            return Intent(
                raw=raw,
                normalized=normalized,
                kind=IntentKind.COMMAND,
                verb=verb,
                confidence=0.5,
                clarify=did_you_mean_question(options),
            )
        if match.best:
            return Intent(
                raw=raw,
                normalized=normalized,
                kind=IntentKind.COMMAND,
                verb=verb,
                args=(match.best,),
                confidence=match.score,
            )
        return Intent(
            raw=raw,
            normalized=normalized,
            kind=IntentKind.COMMAND,
            verb=verb,
            args=(entity,),
            confidence=LITERAL_TAKE_CONFIDENCE,
        )
