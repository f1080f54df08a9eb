"""Follow-up answers to clarifications.

When a parse comes back with a clarification, the host keeps a
PendingIntent and feeds the player's next line to PendingIntentResolver
instead of parsing it from scratch. The answer is checked against the
field the clarification asked for:

    idle -> awaiting_answer -> resolved
                            -> retry (answer rejected, same question)
                            -> cancelled
                            -> escalated (answer raised a new question)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from trailparse.parser.argument_resolver import merge_unique, resolve_direction
from trailparse.parser.clarification import (
    HOW_FAR_PROMPT,
    direction_question,
)
from trailparse.parser.intent_parser import IntentParser
from trailparse.parser.intent_types import (
    Intent,
    IntentKind,
    MissingField,
    MovementScale,
    ParseContext,
    PendingIntent,
    Verb,
    intent_to_command_string,
)
from trailparse.parser.movement import NUMBER_PATTERN, is_unit_word, parse_movement_text
from trailparse.parser.normalize import DEFAULT_DIRECTIONS, normalize, tokenize

logger = logging.getLogger(__name__)


CANCEL_WORDS = frozenset({"cancel", "nevermind", "never mind", "stop", "abort", "forget it"})
YES_WORDS = frozenset({"yes", "y", "yeah", "yep", "sure", "ok", "okay", "confirm"})
NO_WORDS = frozenset({"no", "n", "nope", "nah"})

# Confidence of an intent completed by a validated answer
ANSWER_CONFIDENCE = 0.98

CANCELLED_MESSAGE = "Cancelled."
DIRECTION_RETRY = "Which direction? Answer north, south, east, or west."
DISTANCE_UNIT_RETRY = "Distance needs a unit, e.g. 500m, 1km, 10min."
DISTANCE_RETRY = "Distance required (e.g. 500m, 3km, 5 tiles, 10min, until dark)."
UNIT_RETRY = "Please answer with a unit: meters, km, tiles, or minutes."
CONFIRM_RETRY = "Please answer yes or no."


class PendingState(str, Enum):
    """Where a clarification exchange stands."""

    IDLE = "idle"  # Nothing to hold
    AWAITING_ANSWER = "awaiting_answer"
    RESOLVED = "resolved"
    RETRY = "retry"  # Answer rejected, ask again
    CANCELLED = "cancelled"
    ESCALATED = "escalated"  # Answer led to a different question


@dataclass(frozen=True)
class PendingOutcome:
    """Result of feeding one answer to a pending intent.

    Attributes:
        state: New state of the exchange.
        intent: Completed intent when resolved.
        pending: PendingIntent to keep for the next answer, if any.
        message: Text to show the player.
    """

    state: PendingState
    intent: Intent | None = None
    pending: PendingIntent | None = None
    message: str = ""


def _first_number(normalized: str) -> str:
    for token in tokenize(normalized):
        if NUMBER_PATTERN.match(token):
            return token
    return ""


def pending_from_intent(intent: Intent) -> PendingIntent | None:
    """Build the PendingIntent for a clarifying intent.

    Returns None when there is nothing to hold: no clarification, or a
    clarification tied to no command and offering no options.
    """
    clarify = intent.clarify
    if clarify is None:
        return None
    if not intent.verb and not clarify.options:
        return None

    fields = [clarify.expects]
    partial_value = ""
    if intent.verb == Verb.GO.value:
        if clarify.expects == MissingField.UNIT:
            partial_value = _first_number(intent.normalized)
            if not intent.args:
                fields.append(MissingField.DIRECTION)
        elif clarify.expects == MissingField.DIRECTION and intent.movement is None:
            fields.append(MissingField.DISTANCE)

    return PendingIntent(
        original_kind=intent.kind,
        original_verb=intent.verb,
        filled_args=intent.args,
        missing_fields=tuple(fields),
        prompt=clarify.prompt,
        options=clarify.options,
        movement=intent.movement,
        quantity=intent.quantity,
        partial_value=partial_value,
    )


def select_option(answer: str, options: tuple[Intent, ...]) -> Intent | None:
    """Pick an option by 1-based number or by a prefix of its command string."""
    n = normalize(answer)
    if not n:
        return None
    if n.isdigit() and len(n) <= len(str(len(options))):
        idx = int(n) - 1
        if 0 <= idx < len(options):
            return options[idx]
    for option in options:
        command = intent_to_command_string(option)
        if command and command.startswith(n):
            return option
    return None


class PendingIntentResolver:
    """Validates answers to clarifications and completes the intent.

    Example:
        resolver = PendingIntentResolver(parser)
        intent = parser.parse(context, "go north")
        outcome = resolver.begin(intent)          # awaiting_answer, "How far..."
        outcome = resolver.answer(outcome.pending, context, "500m")
        # outcome.state == RESOLVED, outcome.intent -> go north 500m
    """

    def __init__(self, parser: IntentParser | None = None) -> None:
        self.parser = parser or IntentParser()

    @property
    def tile_meters(self) -> float:
        return self.parser.settings.tile_meters

    def begin(self, intent: Intent) -> PendingOutcome:
        """Start an exchange for a freshly parsed intent."""
        if intent.is_resolved:
            return PendingOutcome(state=PendingState.RESOLVED, intent=intent)
        pending = pending_from_intent(intent)
        message = intent.clarify.prompt if intent.clarify else ""
        if pending is None:
            return PendingOutcome(state=PendingState.IDLE, intent=intent, message=message)
        logger.debug(f"Awaiting {[f.value for f in pending.missing_fields]} for {intent.verb!r}")
        return PendingOutcome(
            state=PendingState.AWAITING_ANSWER, pending=pending, message=message
        )

    def answer(
        self, pending: PendingIntent, context: ParseContext | None, raw: str
    ) -> PendingOutcome:
        """Apply the player's answer to a pending intent.

        Args:
            pending: The held PendingIntent.
            context: Current context snapshot.
            raw: The player's answer.

        Returns:
            PendingOutcome describing the new state.
        """
        context = context or ParseContext()
        text = normalize(raw)

        if text in CANCEL_WORDS:
            logger.debug(f"Pending {pending.original_verb!r} cancelled")
            return PendingOutcome(state=PendingState.CANCELLED, message=CANCELLED_MESSAGE)
        if not text:
            return self._retry(pending, pending.prompt)

        if pending.options:
            if selected := select_option(text, pending.options):
                return self._selected(pending, context, selected)

        field = pending.next_field
        if field == MissingField.DIRECTION:
            return self._answer_direction(pending, context, text)
        if field == MissingField.DISTANCE:
            return self._answer_distance(pending, context, text)
        if field == MissingField.UNIT:
            return self._answer_unit(pending, context, text)
        if field == MissingField.CONFIRM:
            return self._answer_confirm(pending, text)
        return self._answer_reparse(pending, context, text)

    def _answer_direction(
        self, pending: PendingIntent, context: ParseContext, text: str
    ) -> PendingOutcome:
        tokens = tokenize(text)
        if len(tokens) > 1 and tokens[0] == Verb.GO.value:
            tokens = tokens[1:]
        if len(tokens) != 1:
            return self._retry(pending, DIRECTION_RETRY)

        match = resolve_direction(tokens[0], context.known_directions)
        if match.tie:
            question = direction_question(pending.movement, match.values)
            escalated = replace(
                pending, prompt=question.prompt, options=question.options
            )
            logger.debug(f"Direction answer {text!r} tied: {match.values}")
            return PendingOutcome(
                state=PendingState.ESCALATED, pending=escalated, message=question.prompt
            )
        if not match.best:
            return self._retry(pending, DIRECTION_RETRY)

        args = (match.best, *pending.filled_args)
        return self._advance(pending, context, args, pending.movement)

    def _answer_distance(
        self, pending: PendingIntent, context: ParseContext, text: str
    ) -> PendingOutcome:
        movement = parse_movement_text(text, self.tile_meters)
        if movement is not None:
            return self._advance(pending, context, pending.filled_args, movement)
        if NUMBER_PATTERN.match(text):
            return self._retry(pending, DISTANCE_UNIT_RETRY)
        return self._retry(pending, DISTANCE_RETRY)

    def _answer_unit(
        self, pending: PendingIntent, context: ParseContext, text: str
    ) -> PendingOutcome:
        movement: MovementScale | None = None
        if pending.partial_value and is_unit_word(text):
            movement = parse_movement_text(f"{pending.partial_value} {text}", self.tile_meters)
        else:
            movement = parse_movement_text(text, self.tile_meters)
        if movement is None:
            return self._retry(pending, UNIT_RETRY)
        return self._advance(
            replace(pending, partial_value=""), context, pending.filled_args, movement
        )

    def _answer_confirm(self, pending: PendingIntent, text: str) -> PendingOutcome:
        if text in YES_WORDS:
            intent = self._complete(
                pending, pending.filled_args, pending.movement, risk_confirmed=True
            )
            return PendingOutcome(state=PendingState.RESOLVED, intent=intent)
        if text in NO_WORDS:
            return PendingOutcome(state=PendingState.CANCELLED, message=CANCELLED_MESSAGE)
        return self._retry(pending, CONFIRM_RETRY)

    def _answer_reparse(
        self, pending: PendingIntent, context: ParseContext, text: str
    ) -> PendingOutcome:
        """Fold the answer into the original command and parse it again."""
        verb = pending.original_verb
        tokens = tokenize(text)
        if not verb or (tokens and tokens[0] == verb):
            line = text
        else:
            line = " ".join([verb, *pending.filled_args, text])

        intent = self.parser.parse(context, line)
        if intent.clarify is None and intent.verb:
            if intent.quantity is None and pending.quantity is not None:
                intent = replace(intent, quantity=pending.quantity)
            return PendingOutcome(state=PendingState.RESOLVED, intent=intent)

        follow_up = pending_from_intent(intent)
        message = intent.clarify.prompt if intent.clarify else pending.prompt
        if follow_up is None:
            return self._retry(pending, message)
        logger.debug(f"Answer {text!r} escalated to {follow_up.prompt!r}")
        return PendingOutcome(
            state=PendingState.ESCALATED, pending=follow_up, message=message
        )

    def _advance(
        self,
        pending: PendingIntent,
        context: ParseContext,
        args: tuple[str, ...],
        movement: MovementScale | None,
    ) -> PendingOutcome:
        """Fill the current field, then resolve or ask for the next one."""
        remaining = pending.missing_fields[1:]
        if not remaining:
            intent = self._complete(pending, args, movement)
            logger.debug(f"Pending resolved -> {intent_to_command_string(intent)!r}")
            return PendingOutcome(state=PendingState.RESOLVED, intent=intent)

        prompt = pending.prompt
        options: tuple[Intent, ...] = ()
        if remaining[0] == MissingField.DIRECTION:
            directions = merge_unique(context.known_directions) or list(DEFAULT_DIRECTIONS)
            question = direction_question(movement, directions)
            prompt, options = question.prompt, question.options
        elif remaining[0] == MissingField.DISTANCE:
            prompt = HOW_FAR_PROMPT

        following = replace(
            pending,
            filled_args=args,
            missing_fields=remaining,
            prompt=prompt,
            options=options,
            movement=movement,
        )
        return PendingOutcome(
            state=PendingState.AWAITING_ANSWER, pending=following, message=prompt
        )

    def _complete(
        self,
        pending: PendingIntent,
        args: tuple[str, ...],
        movement: MovementScale | None,
        risk_confirmed: bool = False,
    ) -> Intent:
        intent = Intent(
            kind=pending.original_kind,
            verb=pending.original_verb,
            args=args,
            quantity=pending.quantity,
            movement=movement,
            confidence=ANSWER_CONFIDENCE,
            risk_confirmed=risk_confirmed,
        )
        text = intent_to_command_string(intent)
        return replace(intent, raw=text, normalized=text)

    def _selected(
        self, pending: PendingIntent, context: ParseContext, selected: Intent
    ) -> PendingOutcome:
        if (
            selected.quantity is None
            and pending.quantity is not None
            and selected.verb == pending.original_verb
        ):
            selected = replace(selected, quantity=pending.quantity)
        if selected.kind == IntentKind.UNKNOWN or not selected.verb:
            return self._retry(pending, pending.prompt)
        if (
            selected.verb == Verb.GO.value
            and selected.movement is None
            and MissingField.DISTANCE in pending.missing_fields[1:]
        ):
            return self._advance(pending, context, selected.args, None)
        logger.debug(f"Option selected -> {intent_to_command_string(selected)!r}")
        return PendingOutcome(state=PendingState.RESOLVED, intent=selected)

    def _retry(self, pending: PendingIntent, message: str) -> PendingOutcome:
        return PendingOutcome(state=PendingState.RETRY, pending=pending, message=message)
