"""Core test fixtures for trailparse tests."""

import pytest

from trailparse.config import ParserSettings
from trailparse.parser.intent_parser import IntentParser
from trailparse.parser.intent_types import ParseContext
from trailparse.parser.pending import PendingIntentResolver


@pytest.fixture
def settings() -> ParserSettings:
    """Default settings, ignoring any .env file."""
    return ParserSettings(_env_file=None)


@pytest.fixture
def parser(settings: ParserSettings) -> IntentParser:
    """Parser with the built-in command table."""
    return IntentParser(settings=settings)


@pytest.fixture
def resolver(parser: IntentParser) -> PendingIntentResolver:
    """Pending-intent resolver sharing the parser."""
    return PendingIntentResolver(parser)


@pytest.fixture
def empty_context() -> ParseContext:
    """Context with nothing carried or in reach."""
    return ParseContext()


@pytest.fixture
def camp_context() -> ParseContext:
    """A small camp: a few tools carried, a stick and a stone on the ground."""
    return ParseContext(
        inventory=("ferro rod", "knife", "water flask"),
        nearby=("stick", "stone"),
    )


@pytest.fixture
def referent_context() -> ParseContext:
    """Context where the player last talked about the ferro rod."""
    return ParseContext(
        inventory=("ferro rod",),
        last_entity="ferro rod",
    )
