"""Tests for CLI display functions."""

from trailparse.cli.display import console, display_intent, display_options
from trailparse.parser.clarification import option_intent
from trailparse.parser.intent_types import Intent, IntentKind


class TestDisplayOptions:
    """Tests for display_options()."""

    def test_numbered(self):
        """Options are listed with 1-based numbers."""
        options = (option_intent("take", ["stick"]), option_intent("take", ["stone"]))
        with console.capture() as capture:
            display_options(options)
        output = capture.get()
        assert "1." in output
        assert "take stick" in output
        assert "2." in output
        assert "take stone" in output


class TestDisplayIntent:
    """Tests for display_intent()."""

    def test_shows_command(self):
        """The rebuilt command string is shown."""
        intent = Intent(
            raw="pick up stic",
            normalized="pick up stic",
            kind=IntentKind.COMMAND,
            verb="take",
            args=("stick",),
            confidence=0.95,
        )
        with console.capture() as capture:
            display_intent(intent)
        output = capture.get()
        assert "take stick" in output
        assert "0.95" in output
