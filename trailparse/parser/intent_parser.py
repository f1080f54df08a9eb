"""Main intent parser for converting player input to structured intents.

This module provides the IntentParser class which is the primary interface
for parsing player input. It matches the input against the command
registry, resolves arguments against the host's context snapshot, and
falls back to free-text heuristics when no command matches.
"""

import logging
from dataclasses import replace

from trailparse.config import ParserSettings, get_settings
from trailparse.parser.argument_resolver import ArgumentResolver, merge_unique
from trailparse.parser.clarification import (
    DIRECTION_CONFIDENCE,
    EMPTY_INPUT_PROMPT,
    HOW_FAR_CONFIDENCE,
    LOW_CONFIDENCE_PROMPT,
    TRUNCATION_PENALTY,
    UNIT_CONFIDENCE,
    UNMAPPED_PROMPT,
    blend_confidence,
    clamp_score,
    did_you_mean_question,
    direction_question,
    how_far_question,
    missing_args_question,
    option_intent,
    unit_question,
    unresolved_intent,
    with_clarification,
)
from trailparse.parser.intent_types import (
    ClarifyQuestion,
    CommandDef,
    Intent,
    IntentKind,
    ParseContext,
    Verb,
    command_kind,
)
from trailparse.parser.movement import extract_movement
from trailparse.parser.normalize import (
    DEFAULT_DIRECTIONS,
    normalize,
    split_quantity,
    tokenize,
)
from trailparse.parser.patterns import FreeTextInferencer
from trailparse.parser.registry import CommandRegistry

logger = logging.getLogger(__name__)


# Competing commands of equal span closer than this are offered as a choice
COMMAND_TIE_MARGIN = 0.05
COMMAND_TIE_FLOOR = 0.65


class IntentParser:
    """Parser for converting player input to structured intents.

    The parser uses a multi-stage approach:
    1. Normalize and tokenize the input
    2. Match the leading words against registered command phrases
       (exact, prefix, then fuzzy)
    3. Pull out a quantity, or a movement phrase for travel
    4. Resolve pronouns, directions and entity names against the context
    5. Fall back to free-text heuristics when no command matches

    Ambiguity never raises: it comes back as an Intent whose clarify field
    holds a prompt and ranked options, with confidence below the
    acceptance threshold.

    Example:
        parser = IntentParser()
        context = ParseContext(nearby=("stick", "stone"))

        result = parser.parse(context, "pick up stic")
        # -> Intent(verb="take", args=("stick",), confidence=0.95)

        result = parser.parse(context, "take")
        # -> Intent(verb="take", clarify=ClarifyQuestion(
        #        prompt="What should I take?", options=(take stick, take stone)))
    """

    def __init__(
        self,
        registry: CommandRegistry | None = None,
        settings: ParserSettings | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            registry: Command registry. Defaults to the built-in command table.
            settings: Parser settings. Defaults to the cached environment settings.
        """
        self.settings = settings or get_settings()
        self.registry = registry or CommandRegistry.default()
        self.resolver = ArgumentResolver()
        self.inferencer = FreeTextInferencer(tile_meters=self.settings.tile_meters)

    def register_command(self, command: CommandDef) -> CommandDef:
        """Register (or replace) a command definition.

        Raises:
            CommandDefinitionError: If the definition is invalid.
        """
        return self.registry.register_command(command)

    def parse(self, context: ParseContext | None, text: str) -> Intent:
        """Parse one line of player input.

        Args:
            context: Snapshot of inventory, nearby entities, directions and
                the last referenced entity. None means an empty context.
            text: Raw player input.

        Returns:
            Intent. Never raises; problems are reported through clarify.
        """
        context = context or ParseContext()
        normalized = normalize(text)
        if not normalized:
            return self._clarify(
                Intent(raw=text, normalized=normalized),
                ClarifyQuestion(prompt=EMPTY_INPUT_PROMPT),
                0.0,
            )

        tokens = tokenize(normalized)
        best, alternates = self.registry.match_command(tokens)
        if best is None or best.score < self.settings.match_floor:
            return self._infer(context, text, normalized)

        if (
            alternates
            and alternates[0].consumed == best.consumed
            and best.score - alternates[0].score < COMMAND_TIE_MARGIN
            and alternates[0].score > COMMAND_TIE_FLOOR
        ):
            options = [
                option_intent(best.canonical, confidence=best.score),
                option_intent(alternates[0].canonical, confidence=alternates[0].score),
            ]
            return self._clarify(
                Intent(raw=text, normalized=normalized),
                did_you_mean_question(options),
                0.0,
            )

        command = self.registry.get(best.canonical)
        verb = command.canonical
        intent = Intent(
            raw=text,
            normalized=normalized,
            kind=command_kind(verb),
            verb=verb,
            confidence=clamp_score(best.score),
        )

        arg_tokens = tokens[best.consumed :]
        ambiguous_number = ""
        if verb == Verb.GO.value:
            scan = extract_movement(arg_tokens, self.settings.tile_meters)
            arg_tokens = scan.remaining
            ambiguous_number = scan.ambiguous_number
            intent = replace(intent, movement=scan.movement)
        else:
            arg_tokens, quantity = split_quantity(arg_tokens)
            intent = replace(intent, quantity=quantity)

        resolution = self.resolver.resolve(context, command, arg_tokens)
        if resolution.clarify is not None:
            return self._clarify(
                replace(intent, args=tuple(resolution.args)),
                resolution.clarify,
                resolution.score,
            )

        intent = replace(
            intent,
            args=tuple(resolution.args),
            confidence=blend_confidence(best.score, resolution.score),
        )

        if verb == Verb.GO.value:
            if clarified := self._complete_movement(intent, context, ambiguous_number):
                return clarified

        if intent.kind == IntentKind.COMMAND and len(intent.args) < command.min_args:
            question, confidence = missing_args_question(
                command, context, self.settings.max_entity_options
            )
            return self._clarify(intent, question, confidence)

        if len(intent.args) > command.max_args:
            logger.debug(f"Truncating {verb} args to {command.max_args}")
            intent = replace(
                intent,
                args=intent.args[: command.max_args],
                confidence=clamp_score(intent.confidence - TRUNCATION_PENALTY),
            )

        return self._apply_floor(intent)

    def _infer(self, context: ParseContext, text: str, normalized: str) -> Intent:
        """Run free-text heuristics after command matching failed."""
        inferred = self.inferencer.infer(context, text, normalized)
        if inferred is None:
            return unresolved_intent(text, normalized, UNMAPPED_PROMPT)
        if inferred.verb not in self.registry:
            logger.debug(f"Inferred verb {inferred.verb!r} is not registered")
            return unresolved_intent(text, normalized, UNMAPPED_PROMPT)

        if inferred.clarify is not None:
            return self._clarify(inferred, inferred.clarify, inferred.confidence)
        if inferred.verb == Verb.GO.value:
            if clarified := self._complete_movement(inferred, context, ""):
                return clarified
        return self._apply_floor(inferred)

    def _complete_movement(
        self, intent: Intent, context: ParseContext, ambiguous_number: str
    ) -> Intent | None:
        """Ask for whatever a travel intent is still missing.

        Returns the clarifying intent, or None if the movement is complete.
        """
        if ambiguous_number:
            return self._clarify(intent, unit_question(ambiguous_number), UNIT_CONFIDENCE)
        if not intent.args:
            directions = merge_unique(context.known_directions) or list(DEFAULT_DIRECTIONS)
            return self._clarify(
                intent,
                direction_question(intent.movement, directions),
                DIRECTION_CONFIDENCE,
            )
        if intent.movement is None:
            return self._clarify(intent, how_far_question(), HOW_FAR_CONFIDENCE)
        return None

    def _apply_floor(self, intent: Intent) -> Intent:
        """Ask for a rephrase when confidence is under the acceptance floor."""
        if intent.confidence < self.settings.acceptance_threshold and intent.clarify is None:
            return self._clarify(
                intent, ClarifyQuestion(prompt=LOW_CONFIDENCE_PROMPT), intent.confidence
            )
        return intent

    def _clarify(
        self, intent: Intent, clarify: ClarifyQuestion, confidence: float
    ) -> Intent:
        return with_clarification(
            intent, clarify, confidence, self.settings.acceptance_threshold
        )
