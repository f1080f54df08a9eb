"""Command registry and phrase matching.

Each CommandDef expands into one phrase per spelling (the canonical name
plus every alias). Player input is matched against those phrases in three
tiers: exact, prefix and fuzzy (Levenshtein distance).
"""

import logging
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from trailparse.parser.exceptions import CommandDefinitionError
from trailparse.parser.intent_types import CommandDef, Verb
from trailparse.parser.normalize import normalize, tokenize

logger = logging.getLogger(__name__)


EXACT_SCORE = 1.0
ALIAS_SCORE = 0.97
PREFIX_SCORE = 0.9
FUZZY_BASE_SCORE = 0.72
FUZZY_DISTANCE_PENALTY = 0.08
FUZZY_SUBSTRING_BONUS = 0.04
FUZZY_ALIAS_BONUS = 0.03
MAX_ALTERNATES = 4


# Built-in command table
# Format: (verb, aliases, min_args, max_args)
DEFAULT_COMMANDS: list[tuple[Verb, tuple[str, ...], int, int]] = [
    # Meta
    (Verb.HELP, ("h", "commands", "?"), 0, 0),
    (Verb.INVENTORY, ("inv", "bag", "my bag", "check bag", "check my bag"), 0, 2),
    (Verb.LOOK, ("l", "look around", "where am i"), 0, 3),
    (Verb.INSPECT, ("examine", "check", "chk"), 1, 5),
    (Verb.ACTIONS, (), 0, 2),
    # Items
    (Verb.TAKE, ("get", "pickup", "pick up", "grab"), 1, 6),
    (Verb.DROP, ("discard", "leave"), 1, 6),
    (Verb.USE, ("apply",), 1, 8),
    (Verb.CRAFT, ("make", "build"), 1, 8),
    # Needs
    (Verb.EAT, ("consume",), 0, 6),
    (Verb.DRINK, ("sip",), 0, 6),
    (Verb.SLEEP, ("rest", "nap"), 0, 3),
    # Movement
    (Verb.GO, ("walk", "move", "head", "travel"), 1, 3),
    # Run control
    (Verb.NEXT, (), 0, 0),
    (Verb.SAVE, (), 0, 0),
    (Verb.LOAD, (), 0, 0),
    (Verb.MENU, ("back",), 0, 0),
    # Survival
    (Verb.HUNT, ("catch",), 1, 6),
    (Verb.FISH, (), 0, 4),
    (Verb.FORAGE, (), 0, 4),
    (Verb.WOOD, (), 1, 5),
    (Verb.RESOURCES, (), 0, 0),
    (Verb.COLLECT, (), 1, 4),
    (Verb.FIRE, (), 1, 6),
    (Verb.SHELTER, (), 1, 4),
    (Verb.TRAP, (), 1, 4),
    (Verb.GUT, ("dress", "clean"), 1, 4),
    (Verb.COOK, ("roast", "boil"), 1, 4),
    (
        Verb.PRESERVE,
        ("smoke", "dry", "salt", "cure", "smoke meat", "dry meat", "salt meat"),
        2,
        5,
    ),
    (Verb.BARK, (), 1, 5),
    (Verb.PLANTS, (), 0, 0),
]


@dataclass(frozen=True)
class CommandPhrase:
    """One spelling of a command, split into tokens."""

    canonical: str
    alias: str
    tokens: tuple[str, ...]

    @property
    def is_alias(self) -> bool:
        return self.alias != self.canonical


@dataclass(frozen=True)
class CommandCandidate:
    """A scored match of input tokens against one phrase.

    Attributes:
        canonical: Canonical command name.
        alias: The phrase that matched.
        consumed: Number of input tokens the phrase covers.
        score: Match score.
        source: How it matched: exact, alias, prefix or fuzzy.
    """

    canonical: str
    alias: str
    consumed: int
    score: float
    source: str


def levenshtein_limit(length: int) -> int:
    """Maximum edit distance tolerated for a phrase of this length."""
    if length <= 4:
        return 1
    if length <= 8:
        return 2
    return 3


def _rank_key(candidate: CommandCandidate) -> tuple[float, int, str]:
    return (-candidate.score, -candidate.consumed, candidate.canonical)


class CommandRegistry:
    """Holds command definitions and matches input against them.

    Built once at start-up and only read while parsing, so one registry
    can serve any number of threads.

    Example:
        registry = CommandRegistry.default()
        best, alternates = registry.match_command(["inventry"])
        # best.canonical == "inventory", best.source == "fuzzy"
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandDef] = {}
        self._phrases: list[CommandPhrase] = []

    @classmethod
    def default(cls) -> "CommandRegistry":
        """Create a registry holding the built-in command table."""
        registry = cls()
        for verb, aliases, min_args, max_args in DEFAULT_COMMANDS:
            registry.register_command(
                CommandDef(
                    canonical=verb.value,
                    aliases=aliases,
                    min_args=min_args,
                    max_args=max_args,
                    handler_key=verb.value,
                )
            )
        return registry

    def register_command(self, command: CommandDef) -> CommandDef:
        """Register a command, replacing any previous one with the same name.

        Args:
            command: The definition to add.

        Returns:
            The stored definition (canonical normalized, handler key filled).

        Raises:
            CommandDefinitionError: If the name is empty or the argument
                bounds are inconsistent.
        """
        canonical = normalize(command.canonical)
        if not canonical:
            raise CommandDefinitionError(
                f"Command name {command.canonical!r} is empty after normalization",
                canonical=command.canonical,
            )
        if command.min_args < 0 or command.max_args < command.min_args:
            raise CommandDefinitionError(
                f"Invalid argument bounds for {canonical!r}: "
                f"min={command.min_args}, max={command.max_args}",
                canonical=canonical,
            )

        aliases: list[str] = []
        for alias in command.aliases:
            n = normalize(alias)
            if n and n != canonical and n not in aliases:
                aliases.append(n)

        stored = CommandDef(
            canonical=canonical,
            aliases=tuple(aliases),
            min_args=command.min_args,
            max_args=command.max_args,
            handler_key=command.handler_key or canonical,
        )
        if canonical in self._commands:
            logger.debug(f"Replacing command definition for {canonical!r}")
            self._phrases = [p for p in self._phrases if p.canonical != canonical]

        self._commands[canonical] = stored
        for spelling in (canonical, *aliases):
            self._phrases.append(
                CommandPhrase(
                    canonical=canonical,
                    alias=spelling,
                    tokens=tuple(tokenize(spelling)),
                )
            )
        return stored

    def get(self, canonical: str) -> CommandDef | None:
        """Look up a command by canonical name."""
        return self._commands.get(normalize(canonical))

    def __contains__(self, canonical: object) -> bool:
        return isinstance(canonical, str) and self.get(canonical) is not None

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def canonical_names(self) -> list[str]:
        """Registered canonical names in registration order."""
        return list(self._commands)

    @property
    def phrases(self) -> list[CommandPhrase]:
        """Flattened phrase entries used for matching."""
        return list(self._phrases)

    def _score_phrase(
        self, phrase: CommandPhrase, tokens: list[str], full_input: str
    ) -> CommandCandidate | None:
        """Score one phrase against the start of the input."""
        consumed = min(len(tokens), len(phrase.tokens))
        prefix = " ".join(tokens[:consumed])

        # Exact
        if consumed == len(phrase.tokens) and prefix == phrase.alias:
            return CommandCandidate(
                canonical=phrase.canonical,
                alias=phrase.alias,
                consumed=consumed,
                score=ALIAS_SCORE if phrase.is_alias else EXACT_SCORE,
                source="alias" if phrase.is_alias else "exact",
            )

        # Prefix
        first = tokens[0]
        if len(phrase.tokens) == 1 and len(first) >= 2 and phrase.alias.startswith(first):
            return CommandCandidate(
                canonical=phrase.canonical,
                alias=phrase.alias,
                consumed=1,
                score=PREFIX_SCORE,
                source="prefix",
            )

        # Fuzzy
        if len(prefix) < 3:
            return None
        distance = Levenshtein.distance(prefix, phrase.alias)
        if distance > levenshtein_limit(len(phrase.alias)):
            return None
        score = FUZZY_BASE_SCORE - FUZZY_DISTANCE_PENALTY * distance
        if phrase.alias in full_input:
            score += FUZZY_SUBSTRING_BONUS
        if phrase.is_alias:
            score += FUZZY_ALIAS_BONUS
        return CommandCandidate(
            canonical=phrase.canonical,
            alias=phrase.alias,
            consumed=consumed,
            score=score,
            source="fuzzy",
        )

    def match_command(
        self, tokens: list[str]
    ) -> tuple[CommandCandidate | None, list[CommandCandidate]]:
        """Find the command the input most likely starts with.

        Args:
            tokens: Tokenized, normalized input.

        Returns:
            Tuple of (best candidate or None, up to four alternates for other
            commands). Candidates are ranked by score, then tokens consumed,
            then canonical name.
        """
        if not tokens:
            return None, []

        full_input = " ".join(tokens)
        candidates = [
            candidate
            for phrase in self._phrases
            if phrase.tokens
            and (candidate := self._score_phrase(phrase, tokens, full_input)) is not None
        ]
        if not candidates:
            return None, []

        candidates.sort(key=_rank_key)
        best = candidates[0]
        alternates: list[CommandCandidate] = []
        seen = {best.canonical}
        for candidate in candidates[1:]:
            if candidate.canonical in seen:
                continue
            seen.add(candidate.canonical)
            alternates.append(candidate)
            if len(alternates) >= MAX_ALTERNATES:
                break

        logger.debug(
            f"Matched {full_input!r} -> {best.canonical} "
            f"({best.source}, {best.score:.2f}); alternates="
            f"{[(c.canonical, round(c.score, 2)) for c in alternates]}"
        )
        return best, alternates
