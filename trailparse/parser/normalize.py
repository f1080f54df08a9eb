"""Input normalization and token-level helpers.

Everything here is a pure function over strings; the rest of the parser
only ever sees normalized text.
"""

import re
import unicodedata

from trailparse.parser.intent_types import Quantity


# Characters that split words
SEPARATORS = frozenset(" \t\r\n-_/'")
DIGITS = frozenset("0123456789")

PRONOUNS = frozenset({"it", "that", "them", "this", "those"})

# Filler words dropped in front of an entity name
ARTICLES = frozenset({"the", "a", "an", "some", "my"})

# Short and long direction words
DIRECTION_WORDS: dict[str, str] = {
    "n": "north",
    "north": "north",
    "s": "south",
    "south": "south",
    "e": "east",
    "east": "east",
    "w": "west",
    "west": "west",
}

DEFAULT_DIRECTIONS: tuple[str, ...] = ("north", "south", "east", "west")

# Quantities are at most 18 digits long
COUNT_PATTERN = re.compile(r"^\d{1,18}$")
HOURS_PATTERN = re.compile(r"^(\d{1,18})(?:h|hr|hours)$")
MINUTES_PATTERN = re.compile(r"^(\d{1,18})(?:m|min|mins)$")


def _fold(text: str) -> str:
    """Fold accented characters to their ASCII base letters."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """Normalize raw input for matching.

    Lower-cases, keeps letters and digits, turns separators into single
    spaces and drops everything else. A point between two digits is kept
    so decimal distances ("1.5km") survive.

    Args:
        text: Raw player input.

    Returns:
        Normalized text. normalize(normalize(x)) == normalize(x).

    Examples:
        >>> normalize("pick-up   STIC!!")
        'pick up stic'
        >>> normalize("walk 1.5km.")
        'walk 1.5km'
    """
    if not text:
        return ""
    raw = _fold(text).lower().strip()
    out: list[str] = []
    last_space = False
    for i, ch in enumerate(raw):
        if ("a" <= ch <= "z") or ("0" <= ch <= "9"):
            out.append(ch)
            last_space = False
        elif ch in SEPARATORS:
            if not last_space:
                out.append(" ")
            last_space = True
        elif (
            ch == "."
            and out
            and out[-1] in DIGITS
            and i + 1 < len(raw)
            and raw[i + 1] in DIGITS
        ):
            out.append(ch)
            last_space = False
    return " ".join("".join(out).split())


def tokenize(normalized: str) -> list[str]:
    """Split normalized text into words. Empty input gives an empty list."""
    if not normalized or not normalized.strip():
        return []
    return normalized.split()


def parse_quantity_token(token: str) -> Quantity | None:
    """Read a single token as a quantity.

    Recognizes "all", "some", bare non-negative integers, and hour/minute
    suffixed numbers ("2h", "3hr", "4hours", "10m", "10min", "10mins").

    Examples:
        >>> parse_quantity_token("all")
        Quantity(raw='all', n=-1, unit='all')
        >>> parse_quantity_token("2h")
        Quantity(raw='2h', n=2, unit='hours')
    """
    token = token.strip().lower()
    if not token:
        return None
    if token == "all":
        return Quantity(raw=token, n=-1, unit="all")
    if token == "some":
        return Quantity(raw=token, n=0, unit="some")
    if COUNT_PATTERN.match(token):
        return Quantity(raw=token, n=int(token), unit="count")
    if match := HOURS_PATTERN.match(token):
        return Quantity(raw=token, n=int(match.group(1)), unit="hours")
    if match := MINUTES_PATTERN.match(token):
        return Quantity(raw=token, n=int(match.group(1)), unit="minutes")
    return None


def split_quantity(tokens: list[str]) -> tuple[list[str], Quantity | None]:
    """Remove the first quantity token, scanning left to right."""
    remaining: list[str] = []
    quantity: Quantity | None = None
    for token in tokens:
        if quantity is None:
            if candidate := parse_quantity_token(token):
                quantity = candidate
                continue
        remaining.append(token)
    return remaining, quantity


def is_pronoun(token: str) -> bool:
    """Whether the token is a pronoun the resolver substitutes."""
    return token.strip().lower() in PRONOUNS


def map_direction(token: str) -> str:
    """Map a short or long direction word to its long form, or ""."""
    return DIRECTION_WORDS.get(token.strip().lower(), "")


def contains_phrase(value: str, phrase: str) -> bool:
    """Whether a normalized phrase occurs in value on word boundaries."""
    p = normalize(phrase)
    if not p:
        return False
    return f" {p} " in f" {value} "


def contains_any_phrase(value: str, *phrases: str) -> bool:
    """Whether any of the phrases occurs in value on word boundaries."""
    return any(contains_phrase(value, phrase) for phrase in phrases)
