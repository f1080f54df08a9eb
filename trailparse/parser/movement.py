"""Distance, duration and stopping-condition extraction for travel.

Movement phrases ("500m", "2 km", "1.5km", "for 2 hours", "until dark",
"until exhausted") are read from the tokens left after the verb is
matched. The first valid phrase wins, scanning left to right.
"""

import logging
import math
import re
from dataclasses import dataclass, field

from trailparse.parser.intent_types import MovementCondition, MovementScale
from trailparse.parser.normalize import normalize, tokenize

logger = logging.getLogger(__name__)


NUMBER_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")
NUMBER_WITH_UNIT_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-z]+)$")

# Unit word -> meters per unit ("tile" is scaled by the configured tile size)
DISTANCE_UNITS: dict[str, float] = {
    "m": 1.0,
    "meter": 1.0,
    "meters": 1.0,
    "metre": 1.0,
    "metres": 1.0,
    "km": 1000.0,
    "kms": 1000.0,
    "kilometer": 1000.0,
    "kilometers": 1000.0,
    "kilometre": 1000.0,
    "kilometres": 1000.0,
}

TILE_UNITS = frozenset({"tile", "tiles", "step", "steps"})

# Unit word -> minutes per unit
DURATION_UNITS: dict[str, int] = {
    "min": 1,
    "mins": 1,
    "minute": 1,
    "minutes": 1,
    "h": 60,
    "hr": 60,
    "hrs": 60,
    "hour": 60,
    "hours": 60,
}

CONDITION_WORDS: dict[str, MovementCondition] = {
    "dark": MovementCondition.DARK,
    "dusk": MovementCondition.DARK,
    "night": MovementCondition.DARK,
    "nightfall": MovementCondition.DARK,
    "sunset": MovementCondition.DARK,
    "exhausted": MovementCondition.TIRED,
    "exhaustion": MovementCondition.TIRED,
    "tired": MovementCondition.TIRED,
    "spent": MovementCondition.TIRED,
}

DEFAULT_TILE_METERS = 100.0


@dataclass(frozen=True)
class MovementScan:
    """Result of scanning tokens for a movement phrase.

    Attributes:
        movement: The movement scale found, if any.
        remaining: Tokens not consumed by the phrase.
        ambiguous_number: A bare number with no unit ("go 5"), if that
            was the first thing found.
    """

    movement: MovementScale | None = None
    remaining: list[str] = field(default_factory=list)
    ambiguous_number: str = ""


def is_unit_word(token: str) -> bool:
    """Whether the token is a distance, tile or duration unit."""
    return token in DISTANCE_UNITS or token in TILE_UNITS or token in DURATION_UNITS


def _scale_for(
    value: float, unit: str, raw: str, tile_meters: float
) -> MovementScale | None:
    if not math.isfinite(value) or value <= 0:
        return None
    if unit in DISTANCE_UNITS:
        meters = value * DISTANCE_UNITS[unit]
        if not math.isfinite(meters):
            return None
        return MovementScale(raw=raw, distance_meters=meters)
    if unit in TILE_UNITS:
        meters = round(value) * tile_meters
        if not math.isfinite(meters):
            return None
        tiles = int(round(value))
        return MovementScale(raw=raw, distance_meters=meters, tiles=tiles)
    if unit in DURATION_UNITS:
        minutes = value * DURATION_UNITS[unit]
        if not math.isfinite(minutes):
            return None
        return MovementScale(raw=raw, duration_minutes=int(round(minutes)))
    return None


def _read_measure(
    tokens: list[str], i: int, tile_meters: float
) -> tuple[MovementScale, int] | None:
    """Read "<num><unit>" or "<num> <unit>" at position i.

    Returns the scale and the number of tokens consumed.
    """
    token = tokens[i]
    if match := NUMBER_WITH_UNIT_PATTERN.match(token):
        scale = _scale_for(float(match.group(1)), match.group(2), token, tile_meters)
        if scale is not None:
            return scale, 1
        return None
    if NUMBER_PATTERN.match(token) and i + 1 < len(tokens):
        unit = tokens[i + 1]
        raw = f"{token} {unit}"
        scale = _scale_for(float(token), unit, raw, tile_meters)
        if scale is not None:
            return scale, 2
    return None


def extract_movement(
    tokens: list[str], tile_meters: float = DEFAULT_TILE_METERS
) -> MovementScan:
    """Find the first movement phrase in a token stream.

    Args:
        tokens: Normalized argument tokens (verb already removed).
        tile_meters: Meters per map tile.

    Returns:
        MovementScan with the phrase removed from the remaining tokens.

    Examples:
        >>> extract_movement(["north", "2km"]).movement.distance_meters
        2000.0
        >>> extract_movement(["east", "for", "2", "hours"]).movement.duration_minutes
        120
    """
    for i, token in enumerate(tokens):
        if token == "until" and i + 1 < len(tokens):
            if condition := CONDITION_WORDS.get(tokens[i + 1]):
                movement = MovementScale(
                    raw=f"until {tokens[i + 1]}", condition=condition
                )
                return MovementScan(
                    movement=movement, remaining=tokens[:i] + tokens[i + 2 :]
                )
            continue

        start = i
        at = i
        if token == "for" and i + 1 < len(tokens):
            at = i + 1

        if measured := _read_measure(tokens, at, tile_meters):
            movement, consumed = measured
            end = at + consumed
            logger.debug(f"Movement phrase {tokens[start:end]} -> {movement}")
            return MovementScan(movement=movement, remaining=tokens[:start] + tokens[end:])

        if NUMBER_PATTERN.match(token):
            return MovementScan(
                remaining=tokens[:i] + tokens[i + 1 :], ambiguous_number=token
            )

    return MovementScan(remaining=list(tokens))


def parse_movement_text(
    text: str, tile_meters: float = DEFAULT_TILE_METERS
) -> MovementScale | None:
    """Read a whole answer ("500m", "3 km", "until dark") as a movement scale.

    Returns None unless the text is a movement phrase and nothing else.
    """
    scan = extract_movement(tokenize(normalize(text)), tile_meters)
    if scan.movement is None or scan.remaining:
        return None
    return scan.movement
