"""Tests for movement extraction (distance, duration, conditions)."""

import pytest

from trailparse.parser.intent_types import MovementCondition, MovementScale
from trailparse.parser.movement import (
    extract_movement,
    is_unit_word,
    parse_movement_text,
)


class TestExtractMovement:
    """Tests for extract_movement()."""

    def test_meters_suffix(self):
        """'500m' reads as 500 meters and is removed from the tokens."""
        scan = extract_movement(["north", "500m"])
        assert scan.movement.distance_meters == 500.0
        assert scan.remaining == ["north"]
        assert scan.ambiguous_number == ""

    def test_decimal_kilometers(self):
        """'1.5km' reads as 1500 meters."""
        scan = extract_movement(["south", "1.5km"])
        assert scan.movement.distance_meters == 1500.0

    def test_separate_unit_word(self):
        """A number followed by a unit word is one phrase."""
        scan = extract_movement(["3", "km", "north"])
        assert scan.movement.distance_meters == 3000.0
        assert scan.remaining == ["north"]

    def test_for_duration(self):
        """'for 2 hours' reads as 120 minutes, consuming 'for'."""
        scan = extract_movement(["east", "for", "2", "hours"])
        assert scan.movement.duration_minutes == 120
        assert scan.movement.distance_meters == 0.0
        assert scan.remaining == ["east"]

    def test_minutes(self):
        """'10 minutes' reads as a duration."""
        scan = extract_movement(["10", "minutes"])
        assert scan.movement.duration_minutes == 10
        assert scan.remaining == []

    def test_tiles_use_tile_size(self):
        """Tiles convert to meters with the configured tile size."""
        scan = extract_movement(["5", "tiles"])
        assert scan.movement.tiles == 5
        assert scan.movement.distance_meters == 500.0

        scan = extract_movement(["2", "tiles"], tile_meters=50.0)
        assert scan.movement.distance_meters == 100.0

    def test_until_dark(self):
        """'until dark' is an open-ended dark condition."""
        scan = extract_movement(["west", "until", "dark"])
        assert scan.movement.condition == MovementCondition.DARK
        assert scan.movement.is_open_ended
        assert scan.remaining == ["west"]

    def test_until_exhausted(self):
        """'until exhausted' is an open-ended tired condition."""
        scan = extract_movement(["north", "until", "exhausted"])
        assert scan.movement.condition == MovementCondition.TIRED

    def test_until_without_condition_is_ignored(self):
        """'until' followed by an unknown word is not a movement phrase."""
        scan = extract_movement(["until", "noon"])
        assert scan.movement is None
        assert scan.remaining == ["until", "noon"]

    def test_bare_number_is_ambiguous(self):
        """A number with no unit is reported rather than guessed."""
        scan = extract_movement(["5"])
        assert scan.movement is None
        assert scan.ambiguous_number == "5"
        assert scan.remaining == []

    def test_zero_distance_is_not_movement(self):
        """Zero distances are rejected."""
        scan = extract_movement(["0m"])
        assert scan.movement is None

    def test_no_movement(self):
        """Tokens without a movement phrase pass through."""
        scan = extract_movement(["north"])
        assert scan.movement is None
        assert scan.remaining == ["north"]

    def test_first_phrase_wins(self):
        """Scanning stops at the first valid phrase."""
        scan = extract_movement(["500m", "2km"])
        assert scan.movement.distance_meters == 500.0
        assert scan.remaining == ["2km"]

    @pytest.mark.parametrize(
        "tokens",
        [
            ["9" * 400 + "min"],
            ["9" * 400, "tiles"],
            ["9" * 400 + "km"],
            ["1" + "0" * 307 + "km"],
            ["1" + "0" * 307, "hours"],
        ],
    )
    def test_overflowing_numbers_are_not_movement(self, tokens):
        """Numbers too large to measure are left as plain tokens."""
        scan = extract_movement(tokens)
        assert scan.movement is None


class TestParseMovementText:
    """Tests for parse_movement_text() (whole-answer parsing)."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("500m", MovementScale(raw="500m", distance_meters=500.0)),
            ("3 km", MovementScale(raw="3 km", distance_meters=3000.0)),
            ("10min", MovementScale(raw="10min", duration_minutes=10)),
            ("until dark", MovementScale(raw="until dark", condition=MovementCondition.DARK)),
        ],
    )
    def test_movement_answers(self, text, expected):
        """Whole movement phrases parse to a scale."""
        assert parse_movement_text(text) == expected

    @pytest.mark.parametrize("text", ["banana", "north 500m", "5", ""])
    def test_rejects_other_text(self, text):
        """Anything but a lone movement phrase is rejected."""
        assert parse_movement_text(text) is None


class TestUnitWords:
    """Tests for is_unit_word()."""

    def test_units(self):
        """Distance, tile and duration units are recognized."""
        assert is_unit_word("m")
        assert is_unit_word("km")
        assert is_unit_word("tiles")
        assert is_unit_word("minutes")
        assert not is_unit_word("stick")
