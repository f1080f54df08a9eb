"""Tests for the pending-intent protocol (answers to clarifications)."""

import pytest

from trailparse.parser.intent_types import (
    Intent,
    IntentKind,
    MissingField,
    MovementCondition,
    ParseContext,
    PendingIntent,
)
from trailparse.parser.pending import (
    CANCELLED_MESSAGE,
    CONFIRM_RETRY,
    DIRECTION_RETRY,
    DISTANCE_RETRY,
    DISTANCE_UNIT_RETRY,
    UNIT_RETRY,
    PendingState,
    pending_from_intent,
    select_option,
)


def _begin(parser, resolver, context, text):
    """Parse text and start an exchange, asserting it awaits an answer."""
    outcome = resolver.begin(parser.parse(context, text))
    assert outcome.state == PendingState.AWAITING_ANSWER
    return outcome.pending


# =============================================================================
# Building pending intents
# =============================================================================


class TestPendingFromIntent:
    """Tests for pending_from_intent()."""

    def test_resolved_intent_has_nothing_pending(self, parser, empty_context):
        """Resolved intents need no follow-up."""
        assert pending_from_intent(parser.parse(empty_context, "inventory")) is None

    def test_unmapped_intent_has_nothing_pending(self, parser, empty_context):
        """A clarification with no verb and no options is not held."""
        assert pending_from_intent(parser.parse(empty_context, "xyzzy")) is None

    def test_go_north(self, parser, empty_context):
        """'go north' waits for a distance."""
        pending = pending_from_intent(parser.parse(empty_context, "go north"))
        assert pending.original_verb == "go"
        assert pending.filled_args == ("north",)
        assert pending.missing_fields == (MissingField.DISTANCE,)

    def test_go_bare_number(self, parser, empty_context):
        """'go 5' waits for a unit, then a direction, keeping the number."""
        pending = pending_from_intent(parser.parse(empty_context, "go 5"))
        assert pending.missing_fields == (MissingField.UNIT, MissingField.DIRECTION)
        assert pending.partial_value == "5"

    def test_go_alone(self, parser, empty_context):
        """'go' waits for a direction, then a distance."""
        pending = pending_from_intent(parser.parse(empty_context, "go"))
        assert pending.missing_fields == (MissingField.DIRECTION, MissingField.DISTANCE)
        assert len(pending.options) == 4

    def test_command_choice(self, parser, empty_context):
        """A verb-less choice between commands is held for its options."""
        pending = pending_from_intent(parser.parse(empty_context, "in"))
        assert pending.original_verb == ""
        assert pending.next_field == MissingField.SELECTION
        assert len(pending.options) == 2


class TestSelectOption:
    """Tests for select_option()."""

    def test_by_number_and_prefix(self, parser, camp_context):
        """Options are picked by 1-based number or command prefix."""
        options = parser.parse(camp_context, "take").clarify.options
        assert select_option("2", options).args == ("stone",)
        assert select_option("take sti", options).args == ("stick",)
        assert select_option("9", options) is None
        assert select_option("stick", options) is None

    def test_long_number_selects_nothing(self, parser, camp_context):
        """Numbers far past the option count are not read as choices."""
        options = parser.parse(camp_context, "take").clarify.options
        assert select_option("9" * 5000, options) is None


# =============================================================================
# Answering
# =============================================================================


class TestBegin:
    """Tests for PendingIntentResolver.begin()."""

    def test_resolved(self, parser, resolver, empty_context):
        """Resolved intents pass straight through."""
        outcome = resolver.begin(parser.parse(empty_context, "inventory"))
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.verb == "inventory"

    def test_idle(self, parser, resolver, empty_context):
        """Unmapped input leaves nothing to hold."""
        outcome = resolver.begin(parser.parse(empty_context, "xyzzy"))
        assert outcome.state == PendingState.IDLE
        assert outcome.pending is None


class TestCancel:
    """Tests for cancel keywords."""

    @pytest.mark.parametrize("answer", ["cancel", "Never mind", "forget it", "abort"])
    def test_cancel(self, parser, resolver, empty_context, answer):
        """Cancel keywords end the exchange."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, answer)
        assert outcome.state == PendingState.CANCELLED
        assert outcome.message == CANCELLED_MESSAGE
        assert outcome.pending is None


class TestDistanceAnswers:
    """Tests for distance answers."""

    def test_distance_completes_go(self, parser, resolver, empty_context):
        """A distance answer completes the travel intent."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, "500m")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.verb == "go"
        assert outcome.intent.args == ("north",)
        assert outcome.intent.movement.distance_meters == 500.0
        assert outcome.intent.confidence == pytest.approx(0.98)
        assert outcome.intent.normalized == "go north 500m"

    def test_condition_answer(self, parser, resolver, empty_context):
        """Open-ended answers are accepted."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, "until dark")
        assert outcome.intent.movement.condition == MovementCondition.DARK

    def test_bare_number_retries(self, parser, resolver, empty_context):
        """A number without a unit is rejected."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, "5")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == DISTANCE_UNIT_RETRY
        assert outcome.pending == pending

    def test_invalid_retries(self, parser, resolver, empty_context):
        """Anything else is rejected."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, "far")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == DISTANCE_RETRY

    def test_empty_answer_repeats_prompt(self, parser, resolver, empty_context):
        """A blank answer repeats the question."""
        pending = _begin(parser, resolver, empty_context, "go north")
        outcome = resolver.answer(pending, empty_context, "  ")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == pending.prompt


class TestUnitAnswers:
    """Tests for unit answers to 'go 5'."""

    def test_unit_then_direction(self, parser, resolver, empty_context):
        """The unit completes the distance, then the direction is asked."""
        pending = _begin(parser, resolver, empty_context, "go 5")

        outcome = resolver.answer(pending, empty_context, "km")
        assert outcome.state == PendingState.AWAITING_ANSWER
        assert outcome.message == "Which direction?"
        assert outcome.pending.missing_fields == (MissingField.DIRECTION,)
        assert outcome.pending.movement.distance_meters == 5000.0

        outcome = resolver.answer(outcome.pending, empty_context, "north")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.normalized == "go north 5000m"

    def test_direction_by_option_number(self, parser, resolver, empty_context):
        """Direction options carry the movement."""
        pending = _begin(parser, resolver, empty_context, "go 5")
        pending = resolver.answer(pending, empty_context, "tiles").pending

        outcome = resolver.answer(pending, empty_context, "2")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.args == ("south",)
        assert outcome.intent.movement.tiles == 5

    def test_invalid_unit_retries(self, parser, resolver, empty_context):
        """Non-units are rejected."""
        pending = _begin(parser, resolver, empty_context, "go 5")
        outcome = resolver.answer(pending, empty_context, "bananas")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == UNIT_RETRY

    def test_oversized_number_retries(self, parser, resolver, empty_context):
        """A number too large to measure is rejected with the unit hint."""
        pending = _begin(parser, resolver, empty_context, "go " + "9" * 400)
        outcome = resolver.answer(pending, empty_context, "km")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == UNIT_RETRY

    def test_follow_up_offers_known_directions(self, parser, resolver):
        """The direction asked after the unit comes from the known exits."""
        context = ParseContext(known_directions=("Riverbank", "ridge"))
        pending = _begin(parser, resolver, context, "go 5")

        outcome = resolver.answer(pending, context, "km")
        assert outcome.state == PendingState.AWAITING_ANSWER
        assert [o.args for o in outcome.pending.options] == [("riverbank",), ("ridge",)]

        outcome = resolver.answer(outcome.pending, context, "1")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.normalized == "go riverbank 5000m"


class TestDirectionAnswers:
    """Tests for direction answers."""

    def test_short_direction(self, parser, resolver, empty_context):
        """Short direction words complete the travel intent."""
        pending = _begin(parser, resolver, empty_context, "walk 10 minutes")
        outcome = resolver.answer(pending, empty_context, "e")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.normalized == "go east 10min"

    def test_direction_then_distance(self, parser, resolver, empty_context):
        """'go' alone asks direction, then distance."""
        pending = _begin(parser, resolver, empty_context, "go")

        outcome = resolver.answer(pending, empty_context, "north")
        assert outcome.state == PendingState.AWAITING_ANSWER
        assert outcome.message.startswith("How far or how long?")
        assert outcome.pending.filled_args == ("north",)

        outcome = resolver.answer(outcome.pending, empty_context, "2 km")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.normalized == "go north 2000m"

    def test_direction_option_then_distance(self, parser, resolver, empty_context):
        """Picking a direction option without a movement still asks how far."""
        pending = _begin(parser, resolver, empty_context, "go")
        outcome = resolver.answer(pending, empty_context, "3")
        assert outcome.state == PendingState.AWAITING_ANSWER
        assert outcome.pending.filled_args == ("east",)
        assert outcome.pending.missing_fields == (MissingField.DISTANCE,)

    def test_invalid_direction_retries(self, parser, resolver, empty_context):
        """Unknown directions are rejected."""
        pending = _begin(parser, resolver, empty_context, "walk 10 minutes")
        outcome = resolver.answer(pending, empty_context, "purple")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == DIRECTION_RETRY

    def test_tied_direction_escalates(self, parser, resolver):
        """An answer matching two exits asks again with just those two."""
        context = ParseContext(known_directions=("ridge", "ridgeline"))
        pending = _begin(parser, resolver, context, "walk 10 minutes")

        outcome = resolver.answer(pending, context, "ridg")
        assert outcome.state == PendingState.ESCALATED
        assert [o.args for o in outcome.pending.options] == [("ridge",), ("ridgeline",)]


class TestConfirmAnswers:
    """Tests for yes/no confirmation."""

    @pytest.fixture
    def risky(self) -> PendingIntent:
        return PendingIntent(
            original_kind=IntentKind.COMMAND,
            original_verb="hunt",
            filled_args=("deer",),
            missing_fields=(MissingField.CONFIRM,),
            prompt="Hunting at night is risky. Continue?",
        )

    def test_yes(self, resolver, empty_context, risky):
        """Yes completes the intent with the risk confirmed."""
        outcome = resolver.answer(risky, empty_context, "yes")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.risk_confirmed
        assert outcome.intent.args == ("deer",)

    def test_no(self, resolver, empty_context, risky):
        """No cancels."""
        outcome = resolver.answer(risky, empty_context, "no")
        assert outcome.state == PendingState.CANCELLED

    def test_other(self, resolver, empty_context, risky):
        """Anything else asks again."""
        outcome = resolver.answer(risky, empty_context, "maybe")
        assert outcome.state == PendingState.RETRY
        assert outcome.message == CONFIRM_RETRY


class TestReparseAnswers:
    """Tests for answers folded back into the command."""

    def test_option_number(self, parser, resolver, camp_context):
        """A numbered option resolves directly."""
        pending = _begin(parser, resolver, camp_context, "take")
        outcome = resolver.answer(pending, camp_context, "2")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.args == ("stone",)

    def test_entity_name(self, parser, resolver, camp_context):
        """A bare entity name completes the command."""
        pending = _begin(parser, resolver, camp_context, "take")
        outcome = resolver.answer(pending, camp_context, "stick")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.verb == "take"
        assert outcome.intent.args == ("stick",)

    def test_full_command_answer(self, parser, resolver, camp_context):
        """Repeating the verb (with an article) in the answer is fine."""
        pending = _begin(parser, resolver, camp_context, "take")
        outcome = resolver.answer(pending, camp_context, "take the stone")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.args == ("stone",)

    def test_referent(self, parser, resolver, empty_context, referent_context):
        """Naming the referent completes a pronoun command."""
        pending = _begin(parser, resolver, empty_context, "use it")
        assert pending.next_field == MissingField.REFERENT

        outcome = resolver.answer(pending, referent_context, "ferro rod")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.args == ("ferro rod",)

    def test_ambiguous_answer_escalates(self, parser, resolver):
        """An answer that is itself ambiguous raises a new question."""
        context = ParseContext(nearby=("stick", "stone", "stove"))
        pending = _begin(parser, resolver, context, "take")

        outcome = resolver.answer(pending, context, "sto")
        assert outcome.state == PendingState.ESCALATED
        assert outcome.message == "Did you mean take?"
        assert len(outcome.pending.options) == 2

    def test_command_choice(self, parser, resolver, empty_context):
        """A verb-less choice resolves by option number."""
        pending = _begin(parser, resolver, empty_context, "in")
        outcome = resolver.answer(pending, empty_context, "1")
        assert outcome.state == PendingState.RESOLVED
        assert isinstance(outcome.intent, Intent)
        assert outcome.intent.verb == "inspect"

    def test_quantity_carried_over(self, parser, resolver, camp_context):
        """A quantity from the original input survives the answer."""
        pending = _begin(parser, resolver, camp_context, "drop 2")
        outcome = resolver.answer(pending, camp_context, "knife")
        assert outcome.state == PendingState.RESOLVED
        assert outcome.intent.args == ("knife",)
        assert outcome.intent.quantity.n == 2
