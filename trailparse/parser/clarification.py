"""Confidence blending and clarification building.

Every clarification the parser returns is built here so that the
confidence of a clarifying intent always stays below the acceptance
threshold.
"""

import logging
from dataclasses import replace

from trailparse.parser.intent_types import (
    INTERACTIVE_TARGET_VERBS,
    ClarifyQuestion,
    CommandDef,
    Intent,
    IntentKind,
    MissingField,
    MovementScale,
    ParseContext,
    Verb,
    command_kind,
    intent_to_command_string,
)
from trailparse.parser.normalize import DEFAULT_DIRECTIONS, normalize

logger = logging.getLogger(__name__)


MATCH_WEIGHT = 0.75
ARGS_WEIGHT = 0.25
MAX_OPTIONS = 4
TRUNCATION_PENALTY = 0.05
OPTION_CONFIDENCE = 0.88

# Confidence assigned to each kind of clarification
PRONOUN_CONFIDENCE = 0.4
TIE_CONFIDENCE = 0.5
RESOLVER_CONFIDENCE = 0.45
MISSING_TARGET_CONFIDENCE = 0.46
MISSING_ARGS_CONFIDENCE = 0.42
HOW_FAR_CONFIDENCE = 0.48
UNIT_CONFIDENCE = 0.44
DIRECTION_CONFIDENCE = 0.47

EMPTY_INPUT_PROMPT = "Enter a command or intent."
UNMAPPED_PROMPT = (
    "I couldn't map that to a command. Try help, inventory, look, take, drop, "
    "use, craft, eat, drink, sleep, go, inspect."
)
LOW_CONFIDENCE_PROMPT = (
    "I have low confidence in that parse. Please rephrase or pick a clearer command."
)
DID_YOU_MEAN_PROMPT = "Did you mean:"
PRONOUN_PROMPT = "What does that pronoun refer to?"
DIRECTION_PROMPT = "Which direction?"
HOW_FAR_PROMPT = "How far or how long? (e.g. 500m, 1km, 10min, until dark)"


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 1]."""
    return max(0.0, min(1.0, value))


def blend_confidence(match_score: float, args_score: float) -> float:
    """Weighted blend of command-match and argument-resolution scores."""
    return clamp_score(MATCH_WEIGHT * match_score + ARGS_WEIGHT * args_score)


def option_intent(
    verb: str,
    args: list[str] | tuple[str, ...] = (),
    confidence: float = OPTION_CONFIDENCE,
    movement: MovementScale | None = None,
) -> Intent:
    """Build a candidate intent offered as a clarification option."""
    option = Intent(
        kind=command_kind(verb),
        verb=verb,
        args=tuple(args),
        movement=movement,
        confidence=clamp_score(confidence),
    )
    text = intent_to_command_string(option)
    return replace(option, raw=text, normalized=text)


def with_clarification(
    intent: Intent,
    clarify: ClarifyQuestion,
    confidence: float,
    acceptance_threshold: float,
) -> Intent:
    """Attach a clarification, keeping confidence below the threshold."""
    capped = min(clamp_score(confidence), max(0.0, acceptance_threshold - 0.01))
    logger.debug(
        f"Clarifying {intent.normalized!r}: {clarify.prompt!r} "
        f"({len(clarify.options)} options, expects {clarify.expects.value})"
    )
    return replace(
        intent,
        clarify=replace(clarify, options=clarify.options[:MAX_OPTIONS]),
        confidence=capped,
    )


def entity_options(
    context: ParseContext, verb: str, limit: int = MAX_OPTIONS
) -> list[Intent]:
    """Offer targets from live context: nearby for take, inventory otherwise."""
    pool = context.nearby if verb == Verb.TAKE.value else context.inventory
    options: list[Intent] = []
    seen: set[str] = set()
    for entity in pool:
        n = normalize(entity)
        if not n or n in seen:
            continue
        seen.add(n)
        options.append(option_intent(verb, [n]))
        if len(options) >= min(limit, MAX_OPTIONS):
            break
    return options


def missing_args_question(
    command: CommandDef, context: ParseContext, limit: int = MAX_OPTIONS
) -> tuple[ClarifyQuestion, float]:
    """Ask for a missing target, preferring a choice from live context."""
    if command.min_args > 0 and command.canonical in INTERACTIVE_TARGET_VERBS:
        options = entity_options(context, command.canonical, limit)
        if options:
            return (
                ClarifyQuestion(
                    prompt=f"What should I {command.canonical}?",
                    options=tuple(options),
                    expects=MissingField.ENTITY,
                ),
                MISSING_TARGET_CONFIDENCE,
            )
    return (
        ClarifyQuestion(
            prompt=f"{command.canonical} needs at least {command.min_args} argument(s).",
            expects=MissingField.ARGUMENT,
        ),
        MISSING_ARGS_CONFIDENCE,
    )


def did_you_mean_question(options: list[Intent]) -> ClarifyQuestion:
    """Offer competing commands or targets as a forced choice."""
    return ClarifyQuestion(
        prompt=DID_YOU_MEAN_PROMPT,
        options=tuple(options),
        expects=MissingField.SELECTION,
    )


def unit_question(number: str) -> ClarifyQuestion:
    """Ask what unit a bare travel number is in."""
    return ClarifyQuestion(
        prompt=f"{number} what: meters, km, tiles, or minutes?",
        expects=MissingField.UNIT,
    )


def how_far_question() -> ClarifyQuestion:
    """Ask how far or how long to travel."""
    return ClarifyQuestion(prompt=HOW_FAR_PROMPT, expects=MissingField.DISTANCE)


def direction_question(
    movement: MovementScale | None,
    directions: tuple[str, ...] | list[str] = DEFAULT_DIRECTIONS,
) -> ClarifyQuestion:
    """Ask which way to travel, offering directions with the movement attached."""
    options = [
        option_intent(Verb.GO.value, [direction], movement=movement)
        for direction in directions[:MAX_OPTIONS]
    ]
    return ClarifyQuestion(
        prompt=DIRECTION_PROMPT,
        options=tuple(options),
        expects=MissingField.DIRECTION,
    )


def unresolved_intent(raw: str, normalized: str, prompt: str) -> Intent:
    """An intent that could not be mapped to any command."""
    return Intent(
        raw=raw,
        normalized=normalized,
        kind=IntentKind.UNKNOWN,
        confidence=0.0,
        clarify=ClarifyQuestion(prompt=prompt),
    )
